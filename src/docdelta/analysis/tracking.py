"""Record a run in history and compute its delta against the previous run.

History is optional: when the store cannot be opened or written, the run
still scores normally and is reported with first-run semantics.
"""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_SCORING, AnalysisConfig, ScoringConfig
from ..delta import DeltaSummary, compute_delta, first_run_summary
from ..exceptions import PersistenceError
from ..health import score_result
from ..logging_config import get_logger
from ..models import AnalysisResult
from ..persistence import HistoryDB, HistoryStore, RecordedRun, SQLiteHistoryStore, record_run

logger = get_logger(__name__)


@dataclass
class TrackedRun:
    health_score: int
    delta: DeltaSummary
    recorded: Optional[RecordedRun] = None
    degraded: bool = False  # history was unavailable


def track_with_store(
    store: HistoryStore,
    result: AnalysisResult,
    project_name: str,
    project_path: Optional[str] = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
    timestamp: Optional[str] = None,
) -> TrackedRun:
    """Persist ``result`` first, then diff it against the run before it."""
    health = score_result(result, scoring)
    recorded = record_run(store, project_name, project_path, result, health, timestamp)
    pid = recorded.project.id

    runs = store.recent_runs(pid, limit=2)
    if len(runs) < 2:
        return TrackedRun(health_score=health, delta=first_run_summary(health), recorded=recorded)

    previous_run = runs[1]
    delta = compute_delta(
        current=result.inconsistencies,
        current_health_score=health,
        previous_health_score=previous_run.health_score,
        previous=store.issues_for_run(previous_run.id),
        ever_resolved=store.ever_resolved(pid),
        statuses=store.latest_statuses(pid),
        scoring=scoring,
    )
    return TrackedRun(health_score=health, delta=delta, recorded=recorded)


def track_run(
    result: AnalysisResult,
    project_root: "str | Path",
    project_name: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
) -> TrackedRun:
    """Record ``result`` in ``<root>/.docdelta/history.db`` and compute the delta."""
    config = config or AnalysisConfig()
    root = Path(project_root).resolve()
    name = project_name or root.name
    health = score_result(result, config.scoring)

    try:
        with HistoryDB(str(root), config.history_dir) as db:
            store = SQLiteHistoryStore(db.conn)
            return track_with_store(store, result, name, str(root), config.scoring)
    except (PersistenceError, sqlite3.Error) as e:
        logger.warning(f"History unavailable, treating as first run: {e}")
        return TrackedRun(health_score=health, delta=first_run_summary(health), degraded=True)
