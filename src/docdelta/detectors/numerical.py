"""Numerical consistency: one setting, several values across the docs.

Values are extracted in a single pass per line as ``keyword <sep> value
[unit]`` triples. Keywords are normalized (``Buffer_Sizes`` ->
``buffersize``) and values converted to a base unit (time to ms, sizes to
bytes), so ``5s`` and ``5000ms`` agree while ``3s`` and ``5000ms`` do not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..content.markdown import prose_lines
from ..models import Issue, Location

if TYPE_CHECKING:
    from ..content.models import ParsedDocument, ParsedSourceFile

_UNITS = (
    "milliseconds?|seconds?|minutes?|hours?|days?|bytes?|"
    "[kmgt]i?b|min|rem|ms|px|em|h|s|%"
)

VALUE_RE = re.compile(
    r"(?P<keyword>[\w][\w_-]{1,30})\s*"
    r"(?:[:=]|(?:\s+(?:is|are|equals?|set\s+to|defaults?\s+to|of|at)))\s*"
    r"(?P<value>-?\d+(?:,\d{3})*(?:\.\d+)?(?:e[+-]?\d+)?)\s*"
    r"(?P<unit>(?:" + _UNITS + r")(?![A-Za-z]))?",
    re.IGNORECASE,
)

SKIP_PATTERNS = [
    re.compile(r"version\s*[\d.]+", re.IGNORECASE),
    re.compile(r"v\d+\.\d+", re.IGNORECASE),
    re.compile(r"\d{4}[-/]\d{2}[-/]\d{2}"),
    re.compile(r"copyright.*\d{4}", re.IGNORECASE),
    re.compile(r"line\s*\d+", re.IGNORECASE),
    re.compile(r"port\s*\d+", re.IGNORECASE),
    re.compile(r"id[:=]\s*\d+", re.IGNORECASE),
]

CONTEXT_QUALIFIERS = (
    "small", "medium", "large", "tiny", "huge",
    "minimum", "min", "maximum", "max", "default",
    "development", "dev", "production", "prod", "test", "staging",
    "local", "remote", "cloud",
    "best", "worst", "average", "typical",
)
_QUALIFIER_RE = re.compile(r"\b(?:" + "|".join(CONTEXT_QUALIFIERS) + r")\b", re.IGNORECASE)

# (unit pattern, base unit, factor)
UNIT_NORMALIZATIONS = [
    (re.compile(r"^ms$|^milliseconds?$", re.IGNORECASE), "ms", 1),
    (re.compile(r"^s$|^seconds?$", re.IGNORECASE), "ms", 1000),
    (re.compile(r"^min(?:utes?)?$", re.IGNORECASE), "ms", 60000),
    (re.compile(r"^h(?:ours?)?$", re.IGNORECASE), "ms", 3600000),
    (re.compile(r"^days?$", re.IGNORECASE), "ms", 86400000),
    (re.compile(r"^bytes?$", re.IGNORECASE), "bytes", 1),
    (re.compile(r"^ki?b?$", re.IGNORECASE), "bytes", 1024),
    (re.compile(r"^mi?b?$", re.IGNORECASE), "bytes", 1048576),
    (re.compile(r"^gi?b?$", re.IGNORECASE), "bytes", 1073741824),
    (re.compile(r"^%$"), "%", 1),
]

_INLINE_CODE_RE = re.compile(r"`[^`]+`")


@dataclass(frozen=True)
class ExtractedValue:
    keyword: str
    normalized_keyword: str
    raw_value: str
    unit: Optional[str]
    normalized_value: float
    base_unit: str
    path: str
    line: int
    qualified: bool

    @property
    def display(self) -> str:
        return f"{self.raw_value}{self.unit or ''}"


def normalize_keyword(keyword: str) -> str:
    """``Buffer_Sizes`` -> ``buffersize``."""
    normalized = re.sub(r"[-_\s]+", "", keyword.lower())
    if normalized.endswith("s"):
        normalized = normalized[:-1]
    return normalized


def normalize_unit(value: float, unit: Optional[str]) -> tuple[float, str]:
    if not unit:
        return value, "none"
    for pattern, base, factor in UNIT_NORMALIZATIONS:
        if pattern.match(unit):
            return value * factor, base
    return value, unit.lower()


def should_skip(line: str) -> bool:
    return any(p.search(line) for p in SKIP_PATTERNS)


def _clean_lines(doc: ParsedDocument) -> list[str]:
    """Document lines with fenced blocks blanked and inline code removed.

    Blanking keeps line numbers aligned with the original file.
    """
    return [
        "" if line is None else _INLINE_CODE_RE.sub("", line)
        for line in prose_lines(doc.lines)
    ]


def extract_values(documents: list[ParsedDocument]) -> list[ExtractedValue]:
    values: list[ExtractedValue] = []
    for doc in documents:
        for idx, line in enumerate(_clean_lines(doc)):
            if not line or should_skip(line):
                continue
            qualified = _QUALIFIER_RE.search(line) is not None
            for match in VALUE_RE.finditer(line):
                raw = match.group("value")
                unit = match.group("unit") or None
                number = float(raw.replace(",", ""))
                normalized, base = normalize_unit(number, unit)
                values.append(
                    ExtractedValue(
                        keyword=match.group("keyword"),
                        normalized_keyword=normalize_keyword(match.group("keyword")),
                        raw_value=raw,
                        unit=unit,
                        normalized_value=round(normalized, 6),
                        base_unit=base,
                        path=doc.path,
                        line=idx + 1,
                        qualified=qualified,
                    )
                )
    return values


def find_inconsistencies(values: list[ExtractedValue]) -> list[list[ExtractedValue]]:
    """Keyword groups holding more than one distinct (value, base unit)."""
    clusters: dict[str, list[ExtractedValue]] = {}
    for value in values:
        clusters.setdefault(value.normalized_keyword, []).append(value)

    groups: list[list[ExtractedValue]] = []
    for cluster in clusters.values():
        if len(cluster) < 2:
            continue
        distinct = {(v.normalized_value, v.base_unit) for v in cluster}
        if len(distinct) > 1:
            groups.append(cluster)
    return groups


class NumericalConsistencyDetector:
    """Settings stated with different values in different places.

    Severity drops to low when any line in a group carries a qualifier
    (min, max, dev, prod, ...), since the values may differ on purpose.
    """

    name = "numerical"

    def detect(
        self,
        documents: list[ParsedDocument],
        source_files: list[ParsedSourceFile],
        all_paths: frozenset[str],
    ) -> list[Issue]:
        issues: list[Issue] = []
        for group in find_inconsistencies(extract_values(documents)):
            first = group[0]
            found = ", ".join(f"{v.display} ({v.path}:{v.line})" for v in group)
            issues.append(
                Issue(
                    type="numerical-inconsistency",
                    severity="low" if any(v.qualified for v in group) else "medium",
                    message=f'Inconsistent values for "{first.keyword}"',
                    location=Location(first.path, first.line),
                    context=f"Found: {found}",
                    suggestion=(
                        "Verify all occurrences use the same value, or add context "
                        '(e.g., "default", "maximum") if intentionally different'
                    ),
                )
            )
        return issues
