"""Persistence layer: SQLite history of projects, runs and issues."""

from .database import HistoryDB, migrate
from .models import ISSUE_STATUSES, AnalysisRun, IssueStatus, Project, StoredIssue
from .store import HistoryStore, SQLiteHistoryStore
from .writer import RecordedRun, record_run

__all__ = [
    "AnalysisRun",
    "HistoryDB",
    "HistoryStore",
    "ISSUE_STATUSES",
    "IssueStatus",
    "Project",
    "RecordedRun",
    "SQLiteHistoryStore",
    "StoredIssue",
    "migrate",
    "record_run",
]
