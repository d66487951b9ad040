"""Records stored in the history database.

Runs are immutable once written; only StoredIssue.status changes later.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

IssueStatus = Literal["open", "resolved", "ignored"]
ISSUE_STATUSES = ("open", "resolved", "ignored")


@dataclass
class Project:
    id: str
    name: str
    path: Optional[str] = None
    created_at: str = ""  # ISO-8601
    last_analyzed_at: Optional[str] = None
    analysis_count: int = 0


@dataclass
class AnalysisRun:
    id: str
    project_id: str
    timestamp: str  # ISO-8601
    run_number: int
    issue_count: int = 0
    issues_by_type: dict[str, int] = field(default_factory=dict)
    health_score: int = 100
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class StoredIssue:
    """One issue occurrence in one run, bound to its fingerprint."""

    analysis_id: str
    project_id: str
    fingerprint: str
    type: str
    severity: str
    message: str
    file_path: str
    line: Optional[int] = None
    col: Optional[int] = None
    context: Optional[str] = None
    suggestion: Optional[str] = None
    first_seen_at: str = ""
    status: IssueStatus = "open"
    id: Optional[int] = None  # assigned by the database
