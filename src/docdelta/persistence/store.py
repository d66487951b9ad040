"""History store: projects, runs and stored issues.

``HistoryStore`` is the interface the delta tracking depends on;
``SQLiteHistoryStore`` implements it over a ``HistoryDB`` connection.
"""

import json
import sqlite3
from abc import ABC, abstractmethod
from typing import Optional

from ..exceptions import PersistenceError, RecordNotFoundError
from .models import ISSUE_STATUSES, AnalysisRun, IssueStatus, Project, StoredIssue


class HistoryStore(ABC):
    """Persistence operations over the three logical collections."""

    # -- projects --

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def put_project(self, project: Project) -> None: ...

    @abstractmethod
    def list_projects(self) -> list[Project]: ...

    # -- runs --

    @abstractmethod
    def put_run(self, run: AnalysisRun, issues: list[StoredIssue]) -> None:
        """Write a run and its issues atomically."""

    @abstractmethod
    def get_run(self, run_id: str) -> Optional[AnalysisRun]: ...

    @abstractmethod
    def recent_runs(self, project_id: str, limit: int = 10) -> list[AnalysisRun]:
        """Runs for a project, newest first."""

    # -- issues --

    @abstractmethod
    def issues_for_run(self, run_id: str) -> list[StoredIssue]: ...

    @abstractmethod
    def issues_for_project(self, project_id: str) -> list[StoredIssue]: ...

    @abstractmethod
    def issues_for_fingerprint(self, project_id: str, fingerprint: str) -> list[StoredIssue]:
        """Every occurrence of a fingerprint, oldest first."""

    @abstractmethod
    def ever_resolved(self, project_id: str) -> set[str]:
        """Fingerprints that have at any time been marked resolved."""

    @abstractmethod
    def latest_statuses(self, project_id: str) -> dict[str, IssueStatus]:
        """Status of the most recent occurrence of each fingerprint."""

    @abstractmethod
    def first_seen(self, project_id: str) -> dict[str, str]:
        """Earliest ``first_seen_at`` recorded for each fingerprint."""

    @abstractmethod
    def unique_issues(self, project_id: str) -> list[StoredIssue]:
        """Latest occurrence of each fingerprint."""

    @abstractmethod
    def update_status(self, issue_id: int, status: IssueStatus) -> None: ...

    @abstractmethod
    def update_status_by_fingerprint(
        self, project_id: str, fingerprint: str, status: IssueStatus
    ) -> StoredIssue:
        """Set the status of the most recent occurrence of ``fingerprint``."""

    # -- deletion --

    @abstractmethod
    def delete_run(self, run_id: str) -> None: ...

    @abstractmethod
    def delete_project(self, project_id: str) -> None: ...


_ISSUE_COLUMNS = (
    "id, analysis_id, project_id, fingerprint, type, severity, message, file_path, "
    "line, col, context, suggestion, first_seen_at, status"
)

# Occurrences ordered oldest to newest: by run number, then insertion order.
_OCCURRENCE_ORDER = "r.run_number, i.id"


def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        name=row["name"],
        path=row["path"],
        created_at=row["created_at"],
        last_analyzed_at=row["last_analyzed_at"],
        analysis_count=row["analysis_count"],
    )


def _row_to_run(row: sqlite3.Row) -> AnalysisRun:
    return AnalysisRun(
        id=row["id"],
        project_id=row["project_id"],
        timestamp=row["timestamp"],
        run_number=row["run_number"],
        issue_count=row["issue_count"],
        issues_by_type=json.loads(row["issues_by_type"] or "{}"),
        health_score=row["health_score"],
        metadata=json.loads(row["metadata"] or "{}"),
    )


def _row_to_issue(row: sqlite3.Row) -> StoredIssue:
    return StoredIssue(
        id=row["id"],
        analysis_id=row["analysis_id"],
        project_id=row["project_id"],
        fingerprint=row["fingerprint"],
        type=row["type"],
        severity=row["severity"],
        message=row["message"],
        file_path=row["file_path"],
        line=row["line"],
        col=row["col"],
        context=row["context"],
        suggestion=row["suggestion"],
        first_seen_at=row["first_seen_at"],
        status=row["status"],
    )


def _check_status(status: str) -> None:
    if status not in ISSUE_STATUSES:
        raise ValueError(f"Unknown status {status!r}. Choose from: {', '.join(ISSUE_STATUSES)}")


class SQLiteHistoryStore(HistoryStore):
    """HistoryStore over an open connection from ``HistoryDB.connect()``."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ── projects ─────────────────────────────────────────────────

    def get_project(self, project_id: str) -> Optional[Project]:
        row = self.conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
        return _row_to_project(row) if row else None

    def put_project(self, project: Project) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO projects (id, name, path, created_at, last_analyzed_at, analysis_count)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    path = excluded.path,
                    last_analyzed_at = excluded.last_analyzed_at,
                    analysis_count = excluded.analysis_count
                """,
                (
                    project.id,
                    project.name,
                    project.path,
                    project.created_at,
                    project.last_analyzed_at,
                    project.analysis_count,
                ),
            )

    def list_projects(self) -> list[Project]:
        rows = self.conn.execute("SELECT * FROM projects ORDER BY name, id").fetchall()
        return [_row_to_project(r) for r in rows]

    # ── runs ─────────────────────────────────────────────────────

    def put_run(self, run: AnalysisRun, issues: list[StoredIssue]) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO analysis_runs (
                    id, project_id, timestamp, run_number, issue_count,
                    issues_by_type, health_score, metadata
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    run.id,
                    run.project_id,
                    run.timestamp,
                    run.run_number,
                    run.issue_count,
                    json.dumps(run.issues_by_type, sort_keys=True),
                    run.health_score,
                    json.dumps(run.metadata, sort_keys=True),
                ),
            )
            for issue in issues:
                cur = self.conn.execute(
                    """
                    INSERT INTO stored_issues (
                        analysis_id, project_id, fingerprint, type, severity, message,
                        file_path, line, col, context, suggestion, first_seen_at, status
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        issue.analysis_id,
                        issue.project_id,
                        issue.fingerprint,
                        issue.type,
                        issue.severity,
                        issue.message,
                        issue.file_path,
                        issue.line,
                        issue.col,
                        issue.context,
                        issue.suggestion,
                        issue.first_seen_at,
                        issue.status,
                    ),
                )
                issue.id = cur.lastrowid

    def get_run(self, run_id: str) -> Optional[AnalysisRun]:
        row = self.conn.execute("SELECT * FROM analysis_runs WHERE id = ?", (run_id,)).fetchone()
        return _row_to_run(row) if row else None

    def recent_runs(self, project_id: str, limit: int = 10) -> list[AnalysisRun]:
        rows = self.conn.execute(
            """
            SELECT * FROM analysis_runs
            WHERE project_id = ?
            ORDER BY run_number DESC
            LIMIT ?
            """,
            (project_id, limit),
        ).fetchall()
        return [_row_to_run(r) for r in rows]

    # ── issues ───────────────────────────────────────────────────

    def issues_for_run(self, run_id: str) -> list[StoredIssue]:
        rows = self.conn.execute(
            f"SELECT {_ISSUE_COLUMNS} FROM stored_issues WHERE analysis_id = ? ORDER BY id",
            (run_id,),
        ).fetchall()
        return [_row_to_issue(r) for r in rows]

    def issues_for_project(self, project_id: str) -> list[StoredIssue]:
        rows = self.conn.execute(
            f"""
            SELECT i.* FROM stored_issues i
            JOIN analysis_runs r ON r.id = i.analysis_id
            WHERE i.project_id = ?
            ORDER BY {_OCCURRENCE_ORDER}
            """,
            (project_id,),
        ).fetchall()
        return [_row_to_issue(r) for r in rows]

    def issues_for_fingerprint(self, project_id: str, fingerprint: str) -> list[StoredIssue]:
        rows = self.conn.execute(
            f"""
            SELECT i.* FROM stored_issues i
            JOIN analysis_runs r ON r.id = i.analysis_id
            WHERE i.project_id = ? AND i.fingerprint = ?
            ORDER BY {_OCCURRENCE_ORDER}
            """,
            (project_id, fingerprint),
        ).fetchall()
        return [_row_to_issue(r) for r in rows]

    def ever_resolved(self, project_id: str) -> set[str]:
        rows = self.conn.execute(
            """
            SELECT DISTINCT fingerprint FROM stored_issues
            WHERE project_id = ? AND status = 'resolved'
            """,
            (project_id,),
        ).fetchall()
        return {r["fingerprint"] for r in rows}

    def latest_statuses(self, project_id: str) -> dict[str, IssueStatus]:
        statuses: dict[str, IssueStatus] = {}
        for issue in self.issues_for_project(project_id):
            statuses[issue.fingerprint] = issue.status  # later occurrences overwrite
        return statuses

    def first_seen(self, project_id: str) -> dict[str, str]:
        rows = self.conn.execute(
            """
            SELECT fingerprint, MIN(first_seen_at) AS first_seen_at
            FROM stored_issues
            WHERE project_id = ?
            GROUP BY fingerprint
            """,
            (project_id,),
        ).fetchall()
        return {r["fingerprint"]: r["first_seen_at"] for r in rows}

    def unique_issues(self, project_id: str) -> list[StoredIssue]:
        latest: dict[str, StoredIssue] = {}
        for issue in self.issues_for_project(project_id):
            latest[issue.fingerprint] = issue
        return sorted(latest.values(), key=lambda i: (i.file_path, i.line or 0, i.fingerprint))

    def update_status(self, issue_id: int, status: IssueStatus) -> None:
        _check_status(status)
        with self.conn:
            cur = self.conn.execute(
                "UPDATE stored_issues SET status = ? WHERE id = ?", (status, issue_id)
            )
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"no stored issue with id {issue_id}")

    def update_status_by_fingerprint(
        self, project_id: str, fingerprint: str, status: IssueStatus
    ) -> StoredIssue:
        _check_status(status)
        occurrences = self.issues_for_fingerprint(project_id, fingerprint)
        if not occurrences:
            raise RecordNotFoundError(
                f"no issue with fingerprint {fingerprint} in project {project_id}"
            )
        latest = occurrences[-1]
        if latest.id is None:
            raise PersistenceError(f"stored issue for fingerprint {fingerprint} has no id")
        self.update_status(latest.id, status)
        latest.status = status
        return latest

    # ── deletion ─────────────────────────────────────────────────

    def delete_run(self, run_id: str) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM stored_issues WHERE analysis_id = ?", (run_id,))
            cur = self.conn.execute("DELETE FROM analysis_runs WHERE id = ?", (run_id,))
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"no run with id {run_id}")

    def delete_project(self, project_id: str) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM stored_issues WHERE project_id = ?", (project_id,))
            self.conn.execute("DELETE FROM analysis_runs WHERE project_id = ?", (project_id,))
            cur = self.conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"no project with id {project_id}")
