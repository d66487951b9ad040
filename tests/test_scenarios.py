"""End-to-end runs through the analyzer and the SQLite history store."""

import pytest

from docdelta.analysis import DocAnalyzer, analyze_project, track_run
from docdelta.config import AnalysisConfig
from docdelta.exceptions import InvalidPathError
from docdelta.fingerprint import fingerprint_issue
from docdelta.persistence import HistoryDB, SQLiteHistoryStore

CONFIG = AnalysisConfig(cache_enabled=False)


def _types(result):
    return sorted((i.type, i.severity, i.location.path) for i in result.inconsistencies)


class TestBrokenLinkScenario:
    def test_single_broken_link(self, project):
        root = project(
            {
                "README.md": "# Project\n\nSee [the guide](docs/guide.md).\n",
                "docs/other.md": "# Other\n\nBack to [home](../README.md).\n",
            }
        )
        result = analyze_project(root, CONFIG)
        broken = [i for i in result.inconsistencies if i.type == "broken-link"]
        assert len(broken) == 1
        assert broken[0].severity == "high"
        assert broken[0].location.path == "README.md"
        assert broken[0].confidence == "high"


class TestNumericalScenario:
    def test_conflicting_timeouts(self, project):
        root = project(
            {
                "README.md": "# Project\n\n[a](a.md) [b](b.md)\n",
                "a.md": "timeout: 3s\n",
                "b.md": "timeout: 5000ms\n",
            }
        )
        result = analyze_project(root, CONFIG)
        found = [i for i in result.inconsistencies if i.type == "numerical-inconsistency"]
        assert [(i.severity, i.location.path) for i in found] == [("medium", "a.md")]

    def test_equivalent_timeouts(self, project):
        root = project(
            {
                "README.md": "# Project\n\n[a](a.md) [b](b.md)\n",
                "a.md": "timeout: 5s\n",
                "b.md": "timeout: 5000ms\n",
            }
        )
        result = analyze_project(root, CONFIG)
        assert not [i for i in result.inconsistencies if i.type == "numerical-inconsistency"]


class TestUnchangedProjectScenario:
    FILES = {
        "README.md": "# Project\n\nSee [guide](docs/guide.md) and [gone](missing.md).\n\nTODO: finish\n",
        "docs/guide.md": "# Guide\n\nUse `fetchData` here.\n",
        "docs/stray.md": "# Stray\n",
        "src/index.js": "export function fetchData() {}\nexport function hiddenThing() {}\n",
    }

    def test_second_run_is_all_persisting(self, project):
        root = project(self.FILES)
        first = track_run(analyze_project(root, CONFIG), root, "demo", CONFIG)
        second = track_run(analyze_project(root, CONFIG), root, "demo", CONFIG)

        assert first.delta.is_first_run
        delta = second.delta
        assert not delta.is_first_run
        assert delta.new_count == 0
        assert delta.resolved_count == 0
        assert delta.persisting_count == len(delta.issues) > 0
        assert delta.health_delta == 0
        assert delta.attribution.total == 0
        assert second.recorded.run.run_number == 2

    def test_detectors_are_idempotent(self, project):
        root = project(self.FILES)
        a = analyze_project(root, CONFIG)
        b = analyze_project(root, CONFIG)
        assert [fingerprint_issue(i) for i in a.inconsistencies] == [
            fingerprint_issue(i) for i in b.inconsistencies
        ]
        assert a.metadata.total_exports == b.metadata.total_exports == 2

    def test_cached_and_fresh_runs_agree(self, project, tmp_path):
        root = project(self.FILES)
        cached = AnalysisConfig(cache_dir=str(tmp_path / "cache"))
        fresh = analyze_project(root, CONFIG)
        warm_up = analyze_project(root, cached)
        from_cache = analyze_project(root, cached)
        assert _types(fresh) == _types(warm_up) == _types(from_cache)
        assert [i.message for i in fresh.inconsistencies] == [
            i.message for i in from_cache.inconsistencies
        ]


class TestReintroducedScenario:
    BROKEN = {"README.md": "# Project\n\nSee [guide](guide.md).\n"}
    FIXED = {"README.md": "# Project\n\nNo links here.\n"}

    def _run(self, root):
        return track_run(analyze_project(root, CONFIG), root, "demo", CONFIG)

    def _mark(self, root, fingerprint, status):
        with HistoryDB(str(root)) as db:
            store = SQLiteHistoryStore(db.conn)
            project_id = store.list_projects()[0].id
            store.update_status_by_fingerprint(project_id, fingerprint, status)

    def _broken_fingerprint(self, tracked):
        return next(s.fingerprint for s in tracked.recorded.issues if s.type == "broken-link")

    def test_marked_resolved_then_back_is_reintroduced(self, project):
        root = project(self.BROKEN)
        first = self._run(root)
        fp = self._broken_fingerprint(first)
        self._mark(root, fp, "resolved")

        project(self.FIXED)
        second = self._run(root)
        assert [d.fingerprint for d in second.delta.by_classification("resolved")] == [fp]

        project(self.BROKEN)
        third = self._run(root)
        assert [d.fingerprint for d in third.delta.by_classification("reintroduced")] == [fp]
        assert third.delta.new_count == 0
        assert third.delta.has_regressions

    def test_disappeared_without_marking_is_new(self, project):
        root = project(self.BROKEN)
        first = self._run(root)
        fp = self._broken_fingerprint(first)

        project(self.FIXED)
        self._run(root)

        project(self.BROKEN)
        third = self._run(root)
        assert [d.fingerprint for d in third.delta.by_classification("new")] == [fp]
        assert third.delta.reintroduced_count == 0

    def test_ignored_issue_stays_ignored(self, project):
        root = project(self.BROKEN)
        first = self._run(root)
        fp = self._broken_fingerprint(first)
        self._mark(root, fp, "ignored")

        second = self._run(root)
        assert [d.fingerprint for d in second.delta.by_classification("ignored")] == [fp]
        assert second.delta.persisting_count == 0


class TestDegradedHistory:
    def test_store_unavailable_falls_back_to_first_run(self, project):
        root = project({"README.md": "# Project\n\n[x](nope.md)\n"})
        (root / ".docdelta").write_text("blocks the history directory")

        result = analyze_project(root, CONFIG)
        tracked = track_run(result, root, "demo", CONFIG)
        assert tracked.degraded
        assert tracked.recorded is None
        assert tracked.delta.is_first_run
        assert tracked.health_score < 100

    def test_invalid_root(self, tmp_path):
        with pytest.raises(InvalidPathError):
            DocAnalyzer(tmp_path / "does-not-exist")
