"""TODO-style markers left in documentation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..models import Issue, Location

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile

# Any case; the marker is reported in uppercase.
TODO_RE = re.compile(r"\b(TODO|FIXME|XXX|HACK|NOTE|OPTIMIZE)\b:?\s*(.+)?", re.IGNORECASE)


class TodoMarkerDetector:
    name = "todos"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        issues: list[Issue] = []
        for doc in documents:
            for idx, line in enumerate(doc.lines):
                for match in TODO_RE.finditer(line):
                    marker = match.group(1).upper()
                    issues.append(
                        Issue(
                            type="todo-marker",
                            severity="medium" if marker == "FIXME" else "low",
                            message=f"{marker} comment found in documentation",
                            location=Location(doc.path, idx + 1, match.start() + 1),
                            context=line.strip(),
                            suggestion=f"Complete or remove this {marker} item",
                        )
                    )
        return issues
