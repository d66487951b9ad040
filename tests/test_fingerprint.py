"""Tests for message normalization and fingerprint stability."""

from docdelta.fingerprint import (
    compute_fingerprint,
    fingerprint_issue,
    normalize_message,
    project_id,
)
from docdelta.models import Issue, Location


class TestNormalizeMessage:
    def test_line_and_path_placeholders(self):
        assert normalize_message('File "src/lib/foo.ts" not found on line 42') == (
            'file "path" not found on line n'
        )

    def test_counts_collapse(self):
        assert normalize_message("Found 3 files") == normalize_message("Found 12 files")
        assert normalize_message("2 links are broken") == normalize_message("7 links are broken")

    def test_positions_collapse(self):
        assert normalize_message("at a:10:4") == normalize_message("at a:99:1")
        assert normalize_message("column 3 is off") == normalize_message("col 8 is off")

    def test_whitespace_and_case(self):
        assert normalize_message("  Broken   LINK ") == "broken link"

    def test_non_path_quotes_are_kept(self):
        a = normalize_message('Inconsistent values for "timeout"')
        b = normalize_message('Inconsistent values for "retries"')
        assert a != b


class TestFingerprint:
    def test_deterministic_and_truncated(self):
        fp = compute_fingerprint("broken-link", "README.md", "Broken link")
        assert fp == compute_fingerprint("broken-link", "README.md", "Broken link")
        assert len(fp) == 16
        int(fp, 16)

    def test_line_drift_keeps_identity(self):
        a = Issue("todo-marker", "low", "TODO on line 3", Location("a.md", 3))
        b = Issue("todo-marker", "low", "TODO on line 30", Location("a.md", 30))
        assert fingerprint_issue(a) == fingerprint_issue(b)

    def test_embedded_path_drift_keeps_identity(self):
        a = compute_fingerprint("broken-link", "a.md", 'Target "docs/old.md" missing')
        b = compute_fingerprint("broken-link", "a.md", 'Target "docs/new.md" missing')
        assert a == b

    def test_substance_changes_identity(self):
        base = compute_fingerprint("broken-link", "a.md", "Broken link")
        assert compute_fingerprint("broken-image", "a.md", "Broken link") != base
        assert compute_fingerprint("broken-link", "b.md", "Broken link") != base
        assert compute_fingerprint("broken-link", "a.md", "Empty link URL") != base

    def test_issue_id_does_not_matter(self):
        a = Issue("orphaned-file", "low", "Orphaned file", Location("x.md", 1))
        b = Issue("orphaned-file", "low", "Orphaned file", Location("x.md", 1))
        assert a.id != b.id
        assert fingerprint_issue(a) == fingerprint_issue(b)


class TestProjectId:
    def test_name_and_path(self):
        assert project_id("docs", "/srv/a") == project_id("docs", "/srv/a")
        assert project_id("docs", "/srv/a") != project_id("docs", "/srv/b")
        assert len(project_id("docs")) == 12
