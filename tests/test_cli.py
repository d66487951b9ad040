"""Tests for the docdelta command line."""

import json

import pytest
from typer.testing import CliRunner

from docdelta import __version__
from docdelta.cli import app

runner = CliRunner()

BROKEN = {
    "README.md": "# Project\n\nSee [guide](docs/guide.md) and [gone](missing.md).\n",
    "docs/guide.md": "# Guide\n\nTODO: write more\n",
}
CLEAN = {
    "README.md": "# Project\n\nSee [guide](docs/guide.md).\n",
    "docs/guide.md": "# Guide\n\nAll done.\n",
}


def _invoke(root, *args):
    return runner.invoke(app, ["-C", str(root), *args])


class TestAnalyzeCommand:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_text_output(self, project):
        root = project(BROKEN)
        result = _invoke(root, "--format", "text", "--no-cache")
        assert result.exit_code == 0
        assert "Health:" in result.output
        assert "README.md:3: [high] broken-link" in result.output

    def test_rich_output(self, project):
        root = project(CLEAN)
        result = _invoke(root, "--no-cache")
        assert result.exit_code == 0

    def test_json_report_file(self, project, tmp_path):
        root = project(BROKEN)
        out = tmp_path / "report.json"
        grouped = tmp_path / "grouped.json"
        result = _invoke(root, "--json", "--no-cache", "--output", str(out), "--grouped", str(grouped))
        assert result.exit_code == 0

        data = json.loads(out.read_text())
        assert data["summary"]["by_type"]["broken-link"] == 1
        assert data["metadata"]["total_markdown_files"] == 2
        assert data["health"]["score"] < 100

        grouped_data = json.loads(grouped.read_text())
        assert {f["path"] for f in grouped_data["files"]} == {"README.md", "docs/guide.md"}

    @pytest.mark.parametrize(
        "files,fail_on,code",
        [(BROKEN, "high", 1), (BROKEN, "any", 1), (CLEAN, "any", 0), (CLEAN, "high", 0)],
    )
    def test_fail_on(self, project, files, fail_on, code):
        root = project(files)
        result = _invoke(root, "--format", "text", "--no-cache", "--fail-on", fail_on)
        assert result.exit_code == code

    def test_invalid_config(self, project, tmp_path):
        root = project(CLEAN)
        bad = tmp_path / "bad.toml"
        bad.write_text("max_files = 0\n")
        result = _invoke(root, "--config", str(bad), "--format", "text")
        assert result.exit_code == 1
        assert "Error" in result.output


class TestHistoryCommands:
    def test_no_history_yet(self, project):
        root = project(CLEAN)
        result = _invoke(root, "history")
        assert result.exit_code == 0
        assert "No history found" in result.output

    def test_save_then_history(self, project):
        root = project(BROKEN)
        assert _invoke(root, "--save", "--format", "text", "--no-cache").exit_code == 0
        second = _invoke(root, "--save", "--format", "text", "--no-cache")
        assert second.exit_code == 0
        assert "Delta:" in second.output

        result = _invoke(root, "history", "--json")
        assert result.exit_code == 0
        runs = json.loads(result.stdout)
        assert [r["run_number"] for r in runs] == [2, 1]
        assert runs[0]["health_score"] == runs[1]["health_score"]

        table = _invoke(root, "history")
        assert table.exit_code == 0
        assert "Health trend" in table.output

    def test_regression_gate(self, project):
        root = project(CLEAN)
        assert _invoke(root, "--fail-on", "regression", "--format", "text", "--no-cache").exit_code == 0
        project(BROKEN)
        result = _invoke(root, "--fail-on", "regression", "--format", "text", "--no-cache")
        assert result.exit_code == 1

    def test_issues_mark_and_forget(self, project):
        root = project(BROKEN)
        _invoke(root, "--save", "--format", "text", "--no-cache")

        listed = _invoke(root, "issues", "--json")
        assert listed.exit_code == 0
        issues = json.loads(listed.stdout)
        broken = next(i for i in issues if i["type"] == "broken-link")
        assert broken["status"] == "open"

        marked = _invoke(root, "mark", broken["fingerprint"], "ignored")
        assert marked.exit_code == 0
        assert "ignored" in marked.output

        ignored = json.loads(_invoke(root, "issues", "--status", "ignored", "--json").stdout)
        assert [i["fingerprint"] for i in ignored] == [broken["fingerprint"]]

        assert _invoke(root, "mark", "0" * 16, "resolved").exit_code == 1
        assert _invoke(root, "mark", broken["fingerprint"], "closed").exit_code == 2

        forgotten = _invoke(root, "forget", "--yes")
        assert forgotten.exit_code == 0
        after = _invoke(root, "history")
        assert "No runs recorded" in after.output

    def test_project_name_scopes_history(self, project):
        root = project(CLEAN)
        _invoke(root, "--save", "--project", "alpha", "--format", "text", "--no-cache")
        assert json.loads(_invoke(root, "--project", "alpha", "history", "--json").stdout)
        assert "No runs recorded" in _invoke(root, "--project", "beta", "history").output


class TestCacheClear:
    def test_clears_project_cache(self, project):
        root = project(CLEAN)
        assert _invoke(root, "--format", "text").exit_code == 0
        assert (root / ".docdelta-cache").exists()

        result = _invoke(root, "cache-clear")
        assert result.exit_code == 0
        assert "Cache cleared" in result.output

    def test_nothing_to_clear(self, project):
        root = project(CLEAN)
        result = _invoke(root, "cache-clear")
        assert result.exit_code == 0
        assert "No cache to clear" in result.output


class TestLogging:
    def test_verbosity_setting_drives_log_file(self, project, tmp_path, monkeypatch):
        root = project(CLEAN)
        log = tmp_path / "run.log"
        monkeypatch.setenv("DOCDELTA_VERBOSITY", "verbose")
        result = _invoke(root, "--format", "text", "--no-cache", "--log-file", str(log))
        assert result.exit_code == 0
        assert "Analyzing" in log.read_text()

    def test_normal_verbosity_keeps_info_out(self, project, tmp_path):
        root = project(CLEAN)
        log = tmp_path / "run.log"
        result = _invoke(root, "--format", "text", "--no-cache", "--log-file", str(log))
        assert result.exit_code == 0
        assert "Analyzing" not in log.read_text()
