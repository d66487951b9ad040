"""
Health scoring: a deterministic 0-100 score for one analysis run.

score = 100 - severity penalties - density penalty + coverage adjustment,
clamped to [0, 100] and rounded half-up.
"""

import math
from typing import Iterable, Optional

from .config import DEFAULT_SCORING, ScoringConfig
from .models import AnalysisResult, Issue

HEALTH_LABELS = (
    (90, "Excellent"),
    (75, "Good"),
    (50, "Fair"),
    (25, "Poor"),
)


def severity_penalty(issues: Iterable[Issue], scoring: ScoringConfig = DEFAULT_SCORING) -> int:
    return sum(scoring.penalty_for(i.severity) for i in issues)


def density_penalty(
    issue_count: int, total_files: int, scoring: ScoringConfig = DEFAULT_SCORING
) -> float:
    if total_files <= 0:
        return 0.0
    density = issue_count / total_files * 10
    if density <= scoring.density_threshold:
        return 0.0
    return min(scoring.density_cap, (density - scoring.density_threshold) * scoring.density_factor)


def coverage_adjustment(
    coverage_percentage: Optional[float], scoring: ScoringConfig = DEFAULT_SCORING
) -> int:
    if coverage_percentage is None:
        return 0
    if coverage_percentage >= scoring.coverage_bonus_threshold:
        return scoring.coverage_bonus
    if coverage_percentage < scoring.coverage_penalty_threshold:
        return -scoring.coverage_penalty
    return 0


def compute_health_score(
    issues: list[Issue],
    total_files: int,
    coverage_percentage: Optional[float] = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """Score a run. A project with no files scores 100.

    ``coverage_percentage`` of None means coverage was not measured (no
    public exports), which neither rewards nor penalises.
    """
    if total_files <= 0:
        return 100

    score = 100.0
    score -= severity_penalty(issues, scoring)
    score -= density_penalty(len(issues), total_files, scoring)
    score += coverage_adjustment(coverage_percentage, scoring)

    score = max(0.0, min(100.0, score))
    return int(math.floor(score + 0.5))


def score_result(result: AnalysisResult, scoring: ScoringConfig = DEFAULT_SCORING) -> int:
    """Score a finished run; coverage is 100 when there are no public exports."""
    meta = result.metadata
    return compute_health_score(
        result.inconsistencies, meta.total_files, meta.coverage_percentage, scoring
    )


def health_label(score: int) -> str:
    for threshold, label in HEALTH_LABELS:
        if score >= threshold:
            return label
    return "Critical"
