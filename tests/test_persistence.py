"""Tests for the SQLite history store and run recording."""

import dataclasses

import pytest

from docdelta.exceptions import PersistenceError, RecordNotFoundError, StoreUnavailableError
from docdelta.fingerprint import fingerprint_issue, project_id
from docdelta.models import AnalysisMetadata, AnalysisResult, Issue, Location
from docdelta.persistence import HistoryDB, SQLiteHistoryStore, record_run


def _result(*messages, path="README.md"):
    issues = [Issue("broken-link", "high", m, Location(path, n + 1)) for n, m in enumerate(messages)]
    return AnalysisResult(issues, AnalysisMetadata(total_files=1, analyzed_files=1))


@pytest.fixture
def store(tmp_path):
    with HistoryDB(str(tmp_path)) as db:
        yield SQLiteHistoryStore(db.conn)


class TestHistoryDB:
    def test_creates_tables_and_indexes(self, tmp_path):
        with HistoryDB(str(tmp_path)) as db:
            tables = {
                r["name"]
                for r in db.conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
            indexes = {
                r["name"]
                for r in db.conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
            }
        assert {"schema_version", "projects", "analysis_runs", "stored_issues"} <= tables
        assert len([i for i in indexes if i.startswith("idx_")]) == 6
        assert (tmp_path / ".docdelta" / ".gitignore").read_text() == "*\n"

    def test_reopen_is_idempotent(self, tmp_path):
        with HistoryDB(str(tmp_path)):
            pass
        with HistoryDB(str(tmp_path)) as db:
            assert db.exists

    def test_unusable_location_raises(self, tmp_path):
        (tmp_path / ".docdelta").write_text("not a directory")
        with pytest.raises(StoreUnavailableError):
            HistoryDB(str(tmp_path)).connect()

    def test_conn_requires_connect(self, tmp_path):
        with pytest.raises(StoreUnavailableError):
            HistoryDB(str(tmp_path)).conn


class TestRecordRun:
    def test_creates_project_and_numbers_runs(self, store):
        first = record_run(store, "demo", "/srv/demo", _result("x"), 90, "2025-01-01T00:00:00Z")
        second = record_run(store, "demo", "/srv/demo", _result("x"), 90, "2025-01-02T00:00:00Z")

        assert first.project.id == project_id("demo", "/srv/demo")
        assert (first.run.run_number, second.run.run_number) == (1, 2)
        project = store.get_project(first.project.id)
        assert project.analysis_count == 2
        assert project.last_analyzed_at == "2025-01-02T00:00:00Z"
        assert [r.run_number for r in store.recent_runs(first.project.id)] == [2, 1]

    def test_issues_stored_with_fingerprints(self, store):
        recorded = record_run(store, "demo", None, _result("a", "b"), 80)
        stored = store.issues_for_run(recorded.run.id)
        assert [s.message for s in stored] == ["a", "b"]
        assert all(s.id is not None for s in stored)
        assert stored[0].fingerprint == fingerprint_issue(_result("a").inconsistencies[0])
        run = store.get_run(recorded.run.id)
        assert run.issues_by_type == {"broken-link": 2}
        assert run.health_score == 80

    def test_first_seen_is_preserved(self, store):
        record_run(store, "demo", None, _result("a"), 90, "2025-01-01T00:00:00Z")
        record_run(store, "demo", None, _result(), 100, "2025-01-02T00:00:00Z")
        third = record_run(store, "demo", None, _result("a", "b"), 80, "2025-01-03T00:00:00Z")
        first_seen = {s.message: s.first_seen_at for s in third.issues}
        assert first_seen == {"a": "2025-01-01T00:00:00Z", "b": "2025-01-03T00:00:00Z"}

    def test_ignored_status_carries_forward(self, store):
        first = record_run(store, "demo", None, _result("a"), 90)
        fp = first.issues[0].fingerprint
        store.update_status_by_fingerprint(first.project.id, fp, "ignored")

        second = record_run(store, "demo", None, _result("a"), 90)
        assert second.issues[0].status == "ignored"
        assert store.latest_statuses(first.project.id) == {fp: "ignored"}

    def test_resolved_status_does_not_carry_forward(self, store):
        first = record_run(store, "demo", None, _result("a"), 90)
        fp = first.issues[0].fingerprint
        store.update_status_by_fingerprint(first.project.id, fp, "resolved")

        second = record_run(store, "demo", None, _result("a"), 90)
        assert second.issues[0].status == "open"
        assert store.ever_resolved(first.project.id) == {fp}


class TestStoreQueries:
    def test_unique_issues_use_latest_occurrence(self, store):
        record_run(store, "demo", None, _result("a", path="old.md"), 90)
        latest = record_run(store, "demo", None, _result("a", "b", path="old.md"), 80)
        unique = store.unique_issues(latest.project.id)
        assert [u.message for u in unique] == ["a", "b"]
        assert all(u.analysis_id == latest.run.id for u in unique)

    def test_update_status_unknown_fingerprint(self, store):
        recorded = record_run(store, "demo", None, _result("a"), 90)
        with pytest.raises(RecordNotFoundError):
            store.update_status_by_fingerprint(recorded.project.id, "0" * 16, "ignored")

    def test_update_status_rejects_unsaved_occurrence(self, tmp_path):
        class UnsavedRowStore(SQLiteHistoryStore):
            def issues_for_fingerprint(self, project_id, fingerprint):
                rows = super().issues_for_fingerprint(project_id, fingerprint)
                return [dataclasses.replace(r, id=None) for r in rows]

        with HistoryDB(str(tmp_path)) as db:
            store = UnsavedRowStore(db.conn)
            recorded = record_run(store, "demo", None, _result("a"), 90)
            with pytest.raises(PersistenceError):
                store.update_status_by_fingerprint(
                    recorded.project.id, recorded.issues[0].fingerprint, "ignored"
                )

    def test_invalid_status_rejected(self, store):
        recorded = record_run(store, "demo", None, _result("a"), 90)
        with pytest.raises(ValueError):
            store.update_status(recorded.issues[0].id, "closed")

    def test_delete_project(self, store):
        recorded = record_run(store, "demo", None, _result("a"), 90)
        pid = recorded.project.id
        store.delete_project(pid)
        assert store.get_project(pid) is None
        assert store.recent_runs(pid) == []
        assert store.issues_for_project(pid) == []
        with pytest.raises(RecordNotFoundError):
            store.delete_project(pid)

    def test_delete_run(self, store):
        recorded = record_run(store, "demo", None, _result("a"), 90)
        store.delete_run(recorded.run.id)
        assert store.get_run(recorded.run.id) is None
        assert store.issues_for_run(recorded.run.id) == []

    def test_projects_are_isolated(self, store):
        a = record_run(store, "alpha", None, _result("x"), 90)
        b = record_run(store, "beta", None, _result("x"), 90)
        assert a.project.id != b.project.id
        assert [r.run_number for r in store.recent_runs(b.project.id)] == [1]
        assert [p.name for p in store.list_projects()] == ["alpha", "beta"]
