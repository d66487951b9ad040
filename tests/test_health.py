"""Tests for health scoring."""

import pytest

from docdelta.config import ScoringConfig
from docdelta.health import (
    compute_health_score,
    density_penalty,
    health_label,
    score_result,
)
from docdelta.models import AnalysisMetadata, AnalysisResult, Issue, Location


def _issues(*severities):
    return [
        Issue("todo-marker", s, f"issue {n}", Location("a.md", n + 1))
        for n, s in enumerate(severities)
    ]


class TestComputeHealthScore:
    def test_no_files_is_perfect(self):
        assert compute_health_score(_issues("high"), total_files=0) == 100

    def test_severity_penalties(self):
        assert compute_health_score(_issues("high"), total_files=10) == 90
        assert compute_health_score(_issues("medium", "low"), total_files=10) == 93

    def test_density_penalty_is_capped(self):
        issues = _issues(*["low"] * 20)
        # 40 for severity, 20 for density (uncapped would be 30)
        assert compute_health_score(issues, total_files=10) == 40

    def test_coverage_adjustment(self):
        assert compute_health_score([], 10, coverage_percentage=90) == 100
        assert compute_health_score(_issues("high"), 10, coverage_percentage=80) == 95
        assert compute_health_score([], 10, coverage_percentage=49) == 90
        assert compute_health_score([], 10, coverage_percentage=50) == 100

    def test_rounds_half_up(self):
        scoring = ScoringConfig(low_penalty=0, density_factor=1.5)
        # 6 issues per 10 files -> density penalty 1.5 -> 98.5
        assert compute_health_score(_issues(*["low"] * 6), 10, scoring=scoring) == 99

    @pytest.mark.parametrize("count", [0, 1, 5, 50, 500])
    def test_bounds(self, count):
        score = compute_health_score(_issues(*["high"] * count), total_files=3)
        assert 0 <= score <= 100

    def test_density_threshold(self):
        assert density_penalty(5, 10) == 0.0
        assert density_penalty(6, 10) == 2.0


class TestScoreResult:
    def test_docs_only_project_gets_coverage_bonus(self):
        # no exports -> coverage 100 -> +5
        meta = AnalysisMetadata(total_files=1, total_exports=0, coverage_percentage=100)
        assert score_result(AnalysisResult(_issues("low"), meta)) == 93

    def test_coverage_applied_with_exports(self):
        meta = AnalysisMetadata(total_files=10, total_exports=4, coverage_percentage=25)
        assert score_result(AnalysisResult([], meta)) == 90


class TestHealthLabel:
    @pytest.mark.parametrize(
        "score,label",
        [(100, "Excellent"), (90, "Excellent"), (89, "Good"), (75, "Good"),
         (74, "Fair"), (50, "Fair"), (49, "Poor"), (25, "Poor"), (24, "Critical")],
    )
    def test_labels(self, score, label):
        assert health_label(score) == label


class TestScoringConfig:
    def test_rejects_negative_penalty(self):
        with pytest.raises(ValueError):
            ScoringConfig(high_penalty=-1)

    def test_penalty_lookup(self):
        scoring = ScoringConfig()
        assert [scoring.penalty_for(s) for s in ("high", "medium", "low")] == [10, 5, 2]
