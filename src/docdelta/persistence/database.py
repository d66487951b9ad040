"""SQLite-backed history database stored in .docdelta/ at the project root."""

import sqlite3
from pathlib import Path
from typing import Optional

from ..exceptions import StoreUnavailableError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


class HistoryDB:
    """Manages the ``.docdelta/history.db`` SQLite database.

    Usage::

        with HistoryDB("/path/to/project") as db:
            store = SQLiteHistoryStore(db.conn)
    """

    def __init__(self, project_root: str, history_dir: str = ".docdelta") -> None:
        self.db_dir: Path = Path(project_root) / history_dir
        self.db_path: Path = self.db_dir / "history.db"
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise StoreUnavailableError("not connected", location=str(self.db_path))
        return self._conn

    @property
    def exists(self) -> bool:
        return self.db_path.exists()

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create .docdelta/ and write a .gitignore so it stays untracked."""
        self.db_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.db_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text("*\n")

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations.

        Raises:
            StoreUnavailableError: If the directory or database cannot be used
        """
        try:
            self._ensure_dir()
            conn = sqlite3.connect(str(self.db_path))
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            conn.row_factory = sqlite3.Row
            self._conn = conn
            migrate(conn)
        except (OSError, sqlite3.Error) as e:
            self.close()
            raise StoreUnavailableError(str(e), location=str(self.db_path))
        logger.debug("History DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "HistoryDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ── migration ─────────────────────────────────────────────────


def migrate(conn: sqlite3.Connection) -> None:
    """Idempotently create all tables and indexes."""
    c = conn

    c.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER NOT NULL
        )
        """
    )
    row = c.execute("SELECT version FROM schema_version").fetchone()
    if row is None:
        c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))

    # ── projects ─────────────────────────────────────────────
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS projects (
            id               TEXT    PRIMARY KEY,
            name             TEXT    NOT NULL,
            path             TEXT,
            created_at       TEXT    NOT NULL,
            last_analyzed_at TEXT,
            analysis_count   INTEGER NOT NULL DEFAULT 0
        )
        """
    )

    # ── analysis_runs ────────────────────────────────────────
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS analysis_runs (
            id             TEXT    PRIMARY KEY,
            project_id     TEXT    NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            timestamp      TEXT    NOT NULL,
            run_number     INTEGER NOT NULL,
            issue_count    INTEGER NOT NULL DEFAULT 0,
            issues_by_type TEXT    NOT NULL DEFAULT '{}',
            health_score   INTEGER NOT NULL DEFAULT 100,
            metadata       TEXT    NOT NULL DEFAULT '{}',
            UNIQUE (project_id, run_number)
        )
        """
    )

    # ── stored_issues ────────────────────────────────────────
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS stored_issues (
            id            INTEGER PRIMARY KEY AUTOINCREMENT,
            analysis_id   TEXT    NOT NULL REFERENCES analysis_runs(id) ON DELETE CASCADE,
            project_id    TEXT    NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            fingerprint   TEXT    NOT NULL,
            type          TEXT    NOT NULL,
            severity      TEXT    NOT NULL,
            message       TEXT    NOT NULL,
            file_path     TEXT    NOT NULL,
            line          INTEGER,
            col           INTEGER,
            context       TEXT,
            suggestion    TEXT,
            first_seen_at TEXT    NOT NULL,
            status        TEXT    NOT NULL DEFAULT 'open'
                          CHECK (status IN ('open', 'resolved', 'ignored'))
        )
        """
    )

    # ── indexes ──────────────────────────────────────────────
    c.execute(
        "CREATE INDEX IF NOT EXISTS idx_runs_project ON analysis_runs(project_id, run_number)"
    )
    c.execute("CREATE INDEX IF NOT EXISTS idx_issues_analysis ON stored_issues(analysis_id)")
    c.execute("CREATE INDEX IF NOT EXISTS idx_issues_project ON stored_issues(project_id)")
    c.execute("CREATE INDEX IF NOT EXISTS idx_issues_fingerprint ON stored_issues(fingerprint)")
    c.execute(
        "CREATE INDEX IF NOT EXISTS idx_issues_project_fp "
        "ON stored_issues(project_id, fingerprint)"
    )
    c.execute(
        "CREATE INDEX IF NOT EXISTS idx_issues_project_fp_status "
        "ON stored_issues(project_id, fingerprint, status)"
    )

    c.commit()
