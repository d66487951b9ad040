"""Detectors: read the content model and produce Issues.

Each detector is stateless and independent of the others:
- links: broken internal links and anchors
- malformed-links: empty link targets or text
- images: broken relative image references
- todos: TODO/FIXME-style markers
- orphans: documentation nothing links to
- coverage: undocumented exports and references to missing code
- numerical: one setting stated with different values
"""

from __future__ import annotations

from .base import Detector, resolve_path, split_target
from .coverage import CoverageDetector, CoverageReport, compute_coverage
from .images import BrokenImageDetector
from .links import LinkValidator, MalformedLinkDetector
from .numerical import NumericalConsistencyDetector
from .orphans import OrphanedFileDetector
from .runner import DetectorOutcome, run_detectors
from .todos import TodoMarkerDetector


def get_default_detectors(disabled: list[str] | None = None) -> list:
    """Return every built-in detector except those named in ``disabled``."""
    detectors = [
        LinkValidator(),
        MalformedLinkDetector(),
        BrokenImageDetector(),
        TodoMarkerDetector(),
        OrphanedFileDetector(),
        CoverageDetector(),
        NumericalConsistencyDetector(),
    ]
    skip = set(disabled or ())
    return [d for d in detectors if d.name not in skip]


__all__ = [
    "BrokenImageDetector",
    "CoverageDetector",
    "CoverageReport",
    "Detector",
    "DetectorOutcome",
    "LinkValidator",
    "MalformedLinkDetector",
    "NumericalConsistencyDetector",
    "OrphanedFileDetector",
    "TodoMarkerDetector",
    "compute_coverage",
    "get_default_detectors",
    "resolve_path",
    "run_detectors",
    "split_target",
]
