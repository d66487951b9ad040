"""Delta data models: how each issue moved between two runs.

A DeltaSummary is derived on demand and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Optional

if TYPE_CHECKING:
    from ..models import Issue
    from ..persistence.models import StoredIssue

Classification = Literal["new", "persisting", "resolved", "reintroduced", "ignored"]
CLASSIFICATIONS = ("new", "persisting", "resolved", "reintroduced", "ignored")


def _empty_severities() -> dict[str, int]:
    return {"high": 0, "medium": 0, "low": 0}


@dataclass
class IssueDelta:
    fingerprint: str
    classification: Classification
    severity: str
    issue: Optional[Issue] = None  # present for current issues
    previous_issue: Optional[StoredIssue] = None  # present if in the previous run

    @property
    def path(self) -> str:
        if self.issue is not None:
            return self.issue.location.path
        return self.previous_issue.file_path if self.previous_issue else ""

    @property
    def message(self) -> str:
        if self.issue is not None:
            return self.issue.message
        return self.previous_issue.message if self.previous_issue else ""


@dataclass
class HealthAttribution:
    """Decomposition of a health change; the three terms sum to the delta."""

    from_new_issues: int = 0
    from_resolved_issues: int = 0
    from_severity_mix: int = 0

    @property
    def total(self) -> int:
        return self.from_new_issues + self.from_resolved_issues + self.from_severity_mix


@dataclass
class DeltaSummary:
    new_count: int = 0
    persisting_count: int = 0
    resolved_count: int = 0
    reintroduced_count: int = 0
    ignored_count: int = 0

    new_by_severity: dict[str, int] = field(default_factory=_empty_severities)
    reintroduced_by_severity: dict[str, int] = field(default_factory=_empty_severities)

    previous_health_score: Optional[int] = None
    current_health_score: int = 100
    health_delta: int = 0
    attribution: HealthAttribution = field(default_factory=HealthAttribution)

    issues: list[IssueDelta] = field(default_factory=list)

    has_regressions: bool = False
    is_first_run: bool = False

    def count(self, classification: Classification) -> int:
        return getattr(self, f"{classification}_count")

    def by_classification(self, classification: Classification) -> list[IssueDelta]:
        return [d for d in self.issues if d.classification == classification]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_first_run": self.is_first_run,
            "has_regressions": self.has_regressions,
            "counts": {c: self.count(c) for c in CLASSIFICATIONS},
            "new_by_severity": dict(self.new_by_severity),
            "reintroduced_by_severity": dict(self.reintroduced_by_severity),
            "previous_health_score": self.previous_health_score,
            "current_health_score": self.current_health_score,
            "health_delta": self.health_delta,
            "attribution": {
                "from_new_issues": self.attribution.from_new_issues,
                "from_resolved_issues": self.attribution.from_resolved_issues,
                "from_severity_mix": self.attribution.from_severity_mix,
            },
            "issues": [
                {
                    "fingerprint": d.fingerprint,
                    "classification": d.classification,
                    "severity": d.severity,
                    "path": d.path,
                    "message": d.message,
                }
                for d in self.issues
            ],
        }
