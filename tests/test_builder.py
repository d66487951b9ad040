"""Tests for file enumeration and content model construction."""

import pytest

from docdelta.config import AnalysisConfig
from docdelta.exceptions import FileAccessError, InvalidPathError
from docdelta.scanning import ContentModelBuilder, FileEnumerator, build_content_model


def _enumerate(root, **overrides):
    return list(FileEnumerator(root, AnalysisConfig(cache_enabled=False, **overrides)).discover())


class TestFileEnumerator:
    def test_classifies_and_sorts(self, project):
        root = project(
            {
                "b.md": "# B\n",
                "a.md": "# A\n",
                "src/app.ts": "export const x = 1;\n",
                "img/logo.png": b"\x89PNG",
                "LICENSE": "MIT\n",
            }
        )
        files = _enumerate(root)
        assert [(f.path, f.kind) for f in files] == [
            ("LICENSE", "other"),
            ("a.md", "markdown"),
            ("b.md", "markdown"),
            ("img/logo.png", "image"),
            ("src/app.ts", "source"),
        ]

    def test_excluded_directories_are_pruned(self, project):
        root = project(
            {
                "README.md": "# R\n",
                "node_modules/pkg/README.md": "# vendored\n",
                ".git/HEAD": "ref\n",
                "dist/out.md": "# built\n",
                ".docdelta/history.db": b"",
            }
        )
        assert [f.path for f in _enumerate(root)] == ["README.md"]

    def test_exclude_patterns_and_limits(self, project):
        root = project({"a.md": "a", "b.md": "b", "notes/draft.md": "d", "big.md": "x" * 2048})
        files = _enumerate(root, exclude_patterns=["notes/*"], max_file_size_mb=0.001)
        assert [f.path for f in files] == ["a.md", "b.md"]
        assert len(_enumerate(root, max_files=2)) == 2

    def test_invalid_roots(self, tmp_path):
        with pytest.raises(InvalidPathError):
            FileEnumerator(tmp_path / "missing", AnalysisConfig())
        target = tmp_path / "file.md"
        target.write_text("x")
        with pytest.raises(InvalidPathError):
            FileEnumerator(target, AnalysisConfig())

    def test_read_reports_decode_errors(self, project):
        root = project({"bad.md": b"\xff\xfe\x00bad"})
        (source,) = _enumerate(root)
        with pytest.raises(FileAccessError):
            source.read()


class TestContentModelBuilder:
    def test_unreadable_files_are_skipped(self, project):
        root = project(
            {
                "good.md": "# Good\n[x](other.md)\n",
                "bad.md": b"\xff\xfe\x00bad",
                "lib.py": "def exported_fn():\n    pass\n",
                "pic.png": b"\x89PNG",
            }
        )
        model = build_content_model(_enumerate(root), max_workers=2)
        assert [d.path for d in model.documents] == ["good.md"]
        assert [s.path for s in model.source_files] == ["lib.py"]
        assert model.skipped_files == 1
        assert model.total_files == 3
        assert model.analyzed_files == 2
        assert model.total_links == 1
        assert "pic.png" in model.all_paths
        assert "bad.md" in model.all_paths

    def test_single_worker_matches_many(self, project):
        root = project({f"doc{n}.md": f"# Doc {n}\n" for n in range(12)})
        few = ContentModelBuilder(max_workers=1).build(_enumerate(root))
        many = ContentModelBuilder(max_workers=8).build(_enumerate(root))
        assert [d.path for d in few.documents] == [d.path for d in many.documents]
        assert few.document("doc3.md").headings[0].text == "Doc 3"
        assert few.document("missing.md") is None
