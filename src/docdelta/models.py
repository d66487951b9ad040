"""Data models for docdelta: issues and analysis results."""

import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

Severity = Literal["high", "medium", "low"]
Confidence = Literal["high", "medium", "low"]

SEVERITIES = ("high", "medium", "low")

ISSUE_TYPES = (
    "broken-link",
    "broken-image",
    "malformed-link",
    "todo-marker",
    "orphaned-file",
    "undocumented-export",
    "orphaned-doc",
    "numerical-inconsistency",
    "external-link",
)


def new_issue_id() -> str:
    """Per-run identifier; carries no meaning across runs."""
    return f"inc-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Location:
    path: str
    line: int
    col: Optional[int] = None


@dataclass
class Issue:
    """A single consistency defect found by a detector."""

    type: str
    severity: Severity
    message: str
    location: Location
    context: Optional[str] = None
    suggestion: Optional[str] = None
    confidence: Confidence = "medium"
    id: str = field(default_factory=new_issue_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisMetadata:
    total_files: int = 0
    analyzed_files: int = 0
    skipped_files: int = 0
    total_markdown_files: int = 0
    total_code_files: int = 0
    total_links: int = 0
    total_exports: int = 0
    documented_exports: int = 0
    coverage_percentage: int = 100
    started_at: str = ""
    finished_at: str = ""
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisResult:
    """Output of one analysis run, before any history is consulted."""

    inconsistencies: List[Issue] = field(default_factory=list)
    metadata: AnalysisMetadata = field(default_factory=AnalysisMetadata)
    detector_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def issue_count(self) -> int:
        return len(self.inconsistencies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inconsistencies": [i.to_dict() for i in self.inconsistencies],
            "metadata": self.metadata.to_dict(),
            "detector_errors": dict(self.detector_errors),
        }


_BUILD_DIRS = ("/dist/", "/build/", "/out/")
_LOUD_MARKERS = ("FIXME", "XXX", "HACK")
_ENV_WORDS = ("dev", "prod", "test", "staging")


def assign_confidence(issue: Issue) -> Confidence:
    """How sure we are that ``issue`` is a real defect rather than noise."""
    if issue.type == "broken-link":
        target = (issue.context or "").lower()
        if any(d in target for d in _BUILD_DIRS):
            return "medium"
        return "high"
    if issue.type in ("broken-image", "malformed-link"):
        return "high"
    if issue.type == "todo-marker":
        if any(issue.message.startswith(m) for m in _LOUD_MARKERS):
            return "medium"
        return "low"
    if issue.type in ("orphaned-file", "undocumented-export"):
        return "low"
    if issue.type == "orphaned-doc":
        return "medium"
    if issue.type == "numerical-inconsistency":
        context = (issue.context or "").lower()
        if any(w in context for w in _ENV_WORDS):
            return "low"
        return "medium"
    return "medium"


def count_issues_by_type(issues: List[Issue]) -> Dict[str, int]:
    return dict(Counter(i.type for i in issues))


def count_issues_by_severity(issues: List[Issue]) -> Dict[str, int]:
    counts = {s: 0 for s in SEVERITIES}
    for issue in issues:
        counts[issue.severity] = counts.get(issue.severity, 0) + 1
    return counts
