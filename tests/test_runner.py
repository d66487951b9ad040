"""Tests for detector fan-out and failure isolation."""

import threading

from docdelta.analysis import DocAnalyzer
from docdelta.config import AnalysisConfig
from docdelta.content import ContentModel, parse_markdown
from docdelta.detectors import CoverageDetector, TodoMarkerDetector, run_detectors
from docdelta.detectors import coverage as coverage_module
from docdelta.models import Issue, Location


class ExplodingDetector:
    name = "exploding"

    def detect(self, documents, source_files, all_paths):
        raise RuntimeError("boom")


class StaticDetector:
    name = "static"

    def detect(self, documents, source_files, all_paths):
        return [Issue("todo-marker", "low", "static", Location("a.md", 1))]


class BlockingDetector:
    name = "blocking"

    def __init__(self):
        self.release = threading.Event()

    def detect(self, documents, source_files, all_paths):
        self.release.wait(timeout=10)
        return []


def _model():
    return ContentModel(
        documents=[parse_markdown("a.md", "TODO: one\n")],
        all_paths=frozenset({"a.md"}),
        total_files=1,
    )


class TestRunDetectors:
    def test_failure_is_isolated(self):
        outcomes = run_detectors([StaticDetector(), ExplodingDetector(), TodoMarkerDetector()], _model())
        assert [(o.detector, o.status) for o in outcomes] == [
            ("static", "ok"),
            ("exploding", "error"),
            ("todos", "ok"),
        ]
        assert "RuntimeError: boom" in outcomes[1].error.reason
        assert len(outcomes[2].issues) == 1

    def test_parallel_and_sequential_agree(self):
        detectors = [StaticDetector(), TodoMarkerDetector()]
        parallel = run_detectors(detectors, _model(), parallel=True)
        sequential = run_detectors(detectors, _model(), parallel=False)
        assert [[i.message for i in o.issues] for o in parallel] == [
            [i.message for i in o.issues] for o in sequential
        ]

    def test_timeout_becomes_error(self):
        blocking = BlockingDetector()
        try:
            outcomes = run_detectors([blocking, StaticDetector()], _model(), timeout_seconds=0.2)
        finally:
            blocking.release.set()
        assert outcomes[0].status == "error"
        assert "timeout" in outcomes[0].error.reason
        assert outcomes[1].ok


class TestAnalyzerIsolation:
    def test_partial_results_with_errors(self, project):
        root = project({"README.md": "# Readme\n\nTODO: later\n"})
        analyzer = DocAnalyzer(
            root,
            AnalysisConfig(cache_enabled=False),
            detectors=[ExplodingDetector(), TodoMarkerDetector()],
        )
        result = analyzer.analyze()
        assert list(result.detector_errors) == ["exploding"]
        assert [i.type for i in result.inconsistencies] == ["todo-marker"]
        assert result.inconsistencies[0].confidence == "low"
        assert result.to_dict()["detector_errors"]["exploding"].startswith("RuntimeError")

    def test_coverage_failure_keeps_the_run(self, project, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("coverage exploded")

        monkeypatch.setattr(coverage_module, "MentionIndex", explode)
        root = project({"README.md": "# Readme\n\nTODO: later\n"})
        analyzer = DocAnalyzer(
            root,
            AnalysisConfig(cache_enabled=False),
            detectors=[CoverageDetector(), TodoMarkerDetector()],
        )
        result = analyzer.analyze()
        assert list(result.detector_errors) == ["coverage"]
        assert [i.type for i in result.inconsistencies] == ["todo-marker"]
        assert result.metadata.total_exports == 0
        assert result.metadata.coverage_percentage == 100
