"""Record an AnalysisResult as a new run in the history store."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..fingerprint import fingerprint_issue, project_id
from ..logging_config import get_logger
from ..models import AnalysisResult, count_issues_by_type
from .models import AnalysisRun, Project, StoredIssue
from .store import HistoryStore

logger = get_logger(__name__)


@dataclass
class RecordedRun:
    project: Project
    run: AnalysisRun
    issues: list[StoredIssue]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:12]}"


def record_run(
    store: HistoryStore,
    project_name: str,
    project_path: Optional[str],
    result: AnalysisResult,
    health_score: int,
    timestamp: Optional[str] = None,
) -> RecordedRun:
    """Persist ``result`` as the next run of the project.

    The project is created on first use. Every issue is stored with its
    fingerprint; ``first_seen_at`` comes from the earliest stored occurrence
    of that fingerprint, and an ``ignored`` status carries forward.
    """
    now = timestamp or utc_now()
    pid = project_id(project_name, project_path)

    project = store.get_project(pid)
    if project is None:
        project = Project(id=pid, name=project_name, path=project_path, created_at=now)
        logger.info(f"Creating history for project '{project_name}' ({pid})")

    # history lookups happen before this run is written
    statuses = store.latest_statuses(pid)
    first_seen = store.first_seen(pid)

    project.analysis_count += 1
    project.last_analyzed_at = now
    store.put_project(project)

    run = AnalysisRun(
        id=new_run_id(),
        project_id=pid,
        timestamp=now,
        run_number=project.analysis_count,
        issue_count=len(result.inconsistencies),
        issues_by_type=count_issues_by_type(result.inconsistencies),
        health_score=health_score,
        metadata=result.metadata.to_dict(),
    )

    stored: list[StoredIssue] = []
    for issue in result.inconsistencies:
        fp = fingerprint_issue(issue)
        stored.append(
            StoredIssue(
                analysis_id=run.id,
                project_id=pid,
                fingerprint=fp,
                type=issue.type,
                severity=issue.severity,
                message=issue.message,
                file_path=issue.location.path,
                line=issue.location.line,
                col=issue.location.col,
                context=issue.context,
                suggestion=issue.suggestion,
                first_seen_at=first_seen.get(fp, now),
                status="ignored" if statuses.get(fp) == "ignored" else "open",
            )
        )

    store.put_run(run, stored)
    logger.info(f"Recorded run #{run.run_number} ({len(stored)} issues) for '{project_name}'")
    return RecordedRun(project=project, run=run, issues=stored)
