"""Documentation coverage: undocumented exports and stale code references.

An export is *documented* when some line of documentation mentions it (as
`` `name` ``, ``name(`` or the bare word) inside a documentation-shaped
path, or when it is mentioned on at least two lines anywhere. Names shorter
than three characters or starting with ``_`` are private and ignored.

Separately, prose that refers to code (``the `foo` function``,
``calling `bar` ``, `` `baz()` ``) is checked against the known exports.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import Issue, Location

if TYPE_CHECKING:
    from ..content.models import Export, ParsedDocument, ParsedSourceFile

DOC_LOCATION_RE = re.compile(r"readme\.md$|docs?/|api|guide|tutorial|reference", re.IGNORECASE)

CODE_REF_PATTERNS = [
    re.compile(r"`(\w+)\(\)`"),
    re.compile(r"`(\w+)`\s+function", re.IGNORECASE),
    re.compile(r"function\s+`(\w+)`", re.IGNORECASE),
    re.compile(r"the\s+`(\w+)`\s+(?:function|method|class)", re.IGNORECASE),
    re.compile(r"call(?:ing)?\s+`(\w+)`", re.IGNORECASE),
]

SKIP_WORDS = frozenset(
    {
        "function", "class", "type", "interface", "const", "let", "var",
        "import", "export", "return", "async", "await", "true", "false",
        "null", "undefined", "string", "number", "boolean", "object",
        "array", "map", "set", "promise", "error", "example", "code",
    }
)

_NAME_SHAPE_RE = re.compile(r"^[A-Z]|^[a-z][a-zA-Z0-9]*$")
_WORD_RE = re.compile(r"\w+")

_MIN_NAME_LENGTH = 3
_MIN_MENTIONS = 2


def is_public(export: Export) -> bool:
    return not export.name.startswith("_") and len(export.name) >= _MIN_NAME_LENGTH


@dataclass(frozen=True)
class Mention:
    path: str
    line: int


@dataclass
class CoverageReport:
    undocumented: list[tuple[str, Export]] = field(default_factory=list)
    total_exports: int = 0
    documented_exports: int = 0

    @property
    def coverage_percentage(self) -> int:
        if self.total_exports == 0:
            return 100
        # half-up, so 12.5 -> 13
        return int(self.documented_exports * 100 / self.total_exports + 0.5)


class MentionIndex:
    """Word -> lines mentioning it, built once over all documents.

    Export names are single ``\\w+`` words, so whole-word membership covers
    the backticked, call-form and bare-word mention shapes alike.
    """

    def __init__(self, documents: list[ParsedDocument]) -> None:
        self._index: dict[str, list[Mention]] = defaultdict(list)
        for doc in documents:
            for idx, line in enumerate(doc.lines):
                for word in set(_WORD_RE.findall(line)):
                    self._index[word].append(Mention(doc.path, idx + 1))

    def mentions(self, name: str) -> list[Mention]:
        return self._index.get(name, [])


def is_documented(mentions: list[Mention]) -> bool:
    if not mentions:
        return False
    if any(DOC_LOCATION_RE.search(m.path) for m in mentions):
        return True
    return len(mentions) >= _MIN_MENTIONS


def compute_coverage(
    documents: list[ParsedDocument], source_files: list[ParsedSourceFile]
) -> CoverageReport:
    index = MentionIndex(documents)
    report = CoverageReport()
    for source in source_files:
        for export in source.exports:
            if not is_public(export):
                continue
            report.total_exports += 1
            if is_documented(index.mentions(export.name)):
                report.documented_exports += 1
            else:
                report.undocumented.append((source.path, export))
    return report


def find_orphaned_references(
    documents: list[ParsedDocument], export_names: set[str]
) -> list[tuple[str, int, str, str]]:
    """``(path, line, token, context)`` for code references to unknown names."""
    seen: set[tuple[str, int, str]] = set()
    found: list[tuple[str, int, str, str]] = []
    for doc in documents:
        for idx, line in enumerate(doc.lines):
            for pattern in CODE_REF_PATTERNS:
                for match in pattern.finditer(line):
                    name = match.group(1)
                    if name.lower() in SKIP_WORDS:
                        continue
                    if not _NAME_SHAPE_RE.search(name):
                        continue
                    if name in export_names:
                        continue
                    key = (doc.path, idx + 1, name)
                    if key in seen:
                        continue
                    seen.add(key)
                    found.append((doc.path, idx + 1, name, line.strip()[:100]))
    return found


class CoverageDetector:
    """Undocumented public exports and orphaned code references."""

    name = "coverage"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        report = compute_coverage(documents, source_files)
        issues: list[Issue] = []

        for path, export in report.undocumented:
            issues.append(
                Issue(
                    type="undocumented-export",
                    severity="medium" if export.kind in ("function", "class") else "low",
                    message=f"Undocumented {export.kind}: {export.name}",
                    location=Location(path, export.line),
                    context=f'Exported {export.kind} "{export.name}" is not documented',
                    suggestion=f"Add documentation for {export.name} in README.md or docs/",
                )
            )

        export_names = {e.name for s in source_files for e in s.exports}
        for path, line, name, context in find_orphaned_references(documents, export_names):
            issues.append(
                Issue(
                    type="orphaned-doc",
                    severity="low",
                    message=f"Documentation references non-existent code: {name}",
                    location=Location(path, line),
                    context=context,
                    suggestion=f'Verify if "{name}" still exists or update the documentation',
                )
            )

        return issues
