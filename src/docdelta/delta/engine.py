"""Delta classification and health attribution.

Classification of each fingerprint, first matching rule wins:

1. present now, latest status ``ignored``          -> ignored
2. present now, absent before, ever resolved       -> reintroduced
3. present now, absent before                      -> new
4. present now, present before                     -> persisting
5. absent now, present before                      -> resolved

Everything here is a pure function of its arguments; history lookups
belong to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..config import DEFAULT_SCORING, ScoringConfig
from ..fingerprint import fingerprint_issue
from .models import Classification, DeltaSummary, HealthAttribution, IssueDelta

if TYPE_CHECKING:
    from ..models import Issue
    from ..persistence.models import StoredIssue


def classify(
    current: list[Issue],
    previous: list[StoredIssue],
    ever_resolved: set[str],
    statuses: dict[str, str],
) -> list[IssueDelta]:
    """One IssueDelta per fingerprint in ``current`` and ``previous``.

    Current issues sharing a fingerprint collapse into one entry (the first
    occurrence); so do previous ones.
    """
    previous_by_fp: dict[str, StoredIssue] = {}
    for stored in previous:
        previous_by_fp.setdefault(stored.fingerprint, stored)

    current_by_fp: dict[str, Issue] = {}
    for issue in current:
        current_by_fp.setdefault(fingerprint_issue(issue), issue)

    deltas: list[IssueDelta] = []
    for fp, issue in current_by_fp.items():
        in_previous = fp in previous_by_fp
        classification: Classification
        if statuses.get(fp) == "ignored":
            classification = "ignored"
        elif not in_previous and fp in ever_resolved:
            classification = "reintroduced"
        elif not in_previous:
            classification = "new"
        else:
            classification = "persisting"
        deltas.append(
            IssueDelta(
                fingerprint=fp,
                classification=classification,
                severity=issue.severity,
                issue=issue,
                previous_issue=previous_by_fp.get(fp),
            )
        )

    for fp, stored in previous_by_fp.items():
        if fp not in current_by_fp:
            deltas.append(
                IssueDelta(
                    fingerprint=fp,
                    classification="resolved",
                    severity=stored.severity,
                    previous_issue=stored,
                )
            )

    return deltas


def attribute_health(
    deltas: list[IssueDelta],
    health_delta: int,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> HealthAttribution:
    """Split ``health_delta`` into new-issue, resolved-issue and remainder terms."""
    from_new = -sum(
        scoring.penalty_for(d.severity)
        for d in deltas
        if d.classification in ("new", "reintroduced")
    )
    from_resolved = sum(
        scoring.penalty_for(d.severity) for d in deltas if d.classification == "resolved"
    )
    return HealthAttribution(
        from_new_issues=from_new,
        from_resolved_issues=from_resolved,
        from_severity_mix=health_delta - from_new - from_resolved,
    )


def first_run_summary(current_health_score: int) -> DeltaSummary:
    return DeltaSummary(current_health_score=current_health_score, is_first_run=True)


def compute_delta(
    current: list[Issue],
    current_health_score: int,
    previous_health_score: Optional[int],
    previous: list[StoredIssue],
    ever_resolved: set[str],
    statuses: dict[str, str],
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> DeltaSummary:
    """Build the DeltaSummary between the current issues and a previous run.

    ``previous_health_score`` of None means there is no previous run, which
    short-circuits to a first-run summary without classification.
    """
    if previous_health_score is None:
        return first_run_summary(current_health_score)

    deltas = classify(current, previous, ever_resolved, statuses)
    summary = DeltaSummary(
        previous_health_score=previous_health_score,
        current_health_score=current_health_score,
        health_delta=current_health_score - previous_health_score,
        issues=deltas,
    )

    for delta in deltas:
        if delta.classification == "new":
            summary.new_count += 1
            summary.new_by_severity[delta.severity] = summary.new_by_severity.get(delta.severity, 0) + 1
        elif delta.classification == "persisting":
            summary.persisting_count += 1
        elif delta.classification == "resolved":
            summary.resolved_count += 1
        elif delta.classification == "reintroduced":
            summary.reintroduced_count += 1
            summary.reintroduced_by_severity[delta.severity] = (
                summary.reintroduced_by_severity.get(delta.severity, 0) + 1
            )
        else:
            summary.ignored_count += 1

    summary.attribution = attribute_health(deltas, summary.health_delta, scoring)
    summary.has_regressions = summary.new_by_severity.get("high", 0) > 0 or summary.reintroduced_count > 0
    return summary


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def format_delta_summary(delta: DeltaSummary) -> str:
    """One-line human summary of a delta."""
    if delta.is_first_run:
        return "First analysis run - no comparison available."

    parts: list[str] = []

    new_high = delta.new_by_severity.get("high", 0)
    if new_high:
        parts.append(f"{_plural(new_high, 'new HIGH severity issue')}")
    if delta.reintroduced_count:
        parts.append(f"{_plural(delta.reintroduced_count, 'reintroduced issue')}")

    changes: list[str] = []
    if delta.new_count:
        changes.append(f"+{delta.new_count} new")
    if delta.resolved_count:
        changes.append(f"-{delta.resolved_count} resolved")
    if delta.persisting_count:
        changes.append(f"{delta.persisting_count} unchanged")
    if changes:
        parts.append(", ".join(changes))

    if delta.previous_health_score is not None:
        parts.append(
            f"Health: {delta.previous_health_score}% → {delta.current_health_score}% "
            f"({delta.health_delta:+d})"
        )

    return " | ".join(parts)
