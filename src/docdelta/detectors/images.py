"""Broken image references."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..content.markdown import is_internal_target
from ..models import Issue, Location
from .base import resolve_path, split_target

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile


class BrokenImageDetector:
    """Relative image references whose file is missing (case-insensitive)."""

    name = "images"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        lowered = frozenset(p.lower() for p in all_paths)
        issues: list[Issue] = []

        for doc in documents:
            for image in doc.images:
                target = image.target.strip()
                if not target or not is_internal_target(target):
                    continue

                image_path, _ = split_target(target)
                resolved = resolve_path(doc.directory, image_path)
                if resolved.lower() in lowered:
                    continue

                issues.append(
                    Issue(
                        type="broken-image",
                        severity="high",
                        message="Broken image link: file does not exist",
                        location=Location(doc.path, image.line),
                        context=f"Image: ![{image.alt}]({image.target})",
                        suggestion=f"Check if the image path is correct: {image.target}",
                    )
                )

        return issues
