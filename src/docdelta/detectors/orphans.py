"""Documentation files nothing links to."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from ..models import Issue, Location
from .base import resolve_path, split_target

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile

ENTRY_POINT_STEMS = frozenset({"readme", "index"})


class OrphanedFileDetector:
    """Markdown files absent from the union of internal link targets.

    README and index files are entry points and never reported.
    """

    name = "orphans"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        linked: set[str] = set()
        for doc in documents:
            for link in doc.links:
                if not link.is_internal:
                    continue
                link_path, _ = split_target(link.target)
                if link_path:
                    linked.add(resolve_path(doc.directory, link_path).lower())

        issues: list[Issue] = []
        for doc in documents:
            name = PurePosixPath(doc.path).name
            if PurePosixPath(name.lower()).stem in ENTRY_POINT_STEMS:
                continue
            if doc.path.lower() in linked:
                continue
            issues.append(
                Issue(
                    type="orphaned-file",
                    severity="low",
                    message="Orphaned file: not linked from any other documentation",
                    location=Location(doc.path, 1),
                    context=f"File: {name}",
                    suggestion="Consider linking this file from relevant documentation or removing it if unused",
                )
            )
        return issues
