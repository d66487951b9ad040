"""Run orchestration: enumerate -> parse -> detect -> result."""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..cache import ParseCache
from ..config import AnalysisConfig
from ..detectors import CoverageReport, compute_coverage, get_default_detectors, run_detectors
from ..detectors.base import Detector
from ..logging_config import get_logger
from ..models import AnalysisMetadata, AnalysisResult, Issue, assign_confidence
from ..scanning import ContentModelBuilder, FileEnumerator

logger = get_logger(__name__)


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, timezone.utc).isoformat(timespec="milliseconds")


class DocAnalyzer:
    """Analyze one project tree for documentation consistency issues.

    Usage::

        result = DocAnalyzer("/path/to/project").analyze()
    """

    def __init__(
        self,
        root: "str | Path",
        config: Optional[AnalysisConfig] = None,
        detectors: Optional[list[Detector]] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.enumerator = FileEnumerator(Path(root), self.config)
        self.root = self.enumerator.root
        self.detectors = (
            detectors
            if detectors is not None
            else get_default_detectors(self.config.disabled_detectors)
        )

    def _open_cache(self) -> Optional[ParseCache]:
        if not self.config.cache_enabled:
            return None
        cache_dir = Path(self.config.cache_dir)
        if not cache_dir.is_absolute():
            cache_dir = self.root / cache_dir
        return ParseCache(
            cache_dir=str(cache_dir),
            ttl_hours=self.config.cache_ttl_hours,
            enabled=True,
        )

    def analyze(self) -> AnalysisResult:
        started = time.time()
        logger.info(f"Analyzing {self.root}")

        cache = self._open_cache()
        try:
            builder = ContentModelBuilder(self.config.max_concurrent_reads, cache)
            model = builder.build(self.enumerator.discover())
        finally:
            if cache is not None:
                cache.close()

        outcomes = run_detectors(
            self.detectors, model, timeout_seconds=self.config.detector_timeout_seconds
        )

        issues: list[Issue] = []
        errors: dict[str, str] = {}
        for outcome in outcomes:
            if outcome.ok:
                issues.extend(outcome.issues)
            else:
                errors[outcome.detector] = outcome.error.reason if outcome.error else "unknown error"

        for issue in issues:
            issue.confidence = assign_confidence(issue)

        try:
            coverage = compute_coverage(model.documents, model.source_files)
        except Exception as e:
            logger.warning(f"Coverage metrics unavailable: {e}")
            errors.setdefault("coverage", f"{type(e).__name__}: {e}")
            coverage = CoverageReport()
        finished = time.time()

        metadata = AnalysisMetadata(
            total_files=model.total_files,
            analyzed_files=model.analyzed_files,
            skipped_files=model.skipped_files,
            total_markdown_files=len(model.documents),
            total_code_files=len(model.source_files),
            total_links=model.total_links,
            total_exports=coverage.total_exports,
            documented_exports=coverage.documented_exports,
            coverage_percentage=coverage.coverage_percentage,
            started_at=_iso(started),
            finished_at=_iso(finished),
            duration_ms=int((finished - started) * 1000),
        )

        logger.info(
            f"Found {len(issues)} issues in {metadata.analyzed_files} files "
            f"({len(errors)} detector errors)"
        )
        return AnalysisResult(inconsistencies=issues, metadata=metadata, detector_errors=errors)


def analyze_project(root: "str | Path", config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    return DocAnalyzer(root, config).analyze()
