"""Plain-text formatter, one issue per line."""

from ..delta import format_delta_summary
from ..health import health_label
from ..models import SEVERITIES, count_issues_by_severity
from .base import BaseFormatter, Report


class TextFormatter(BaseFormatter):
    """Plain summary for logs and pipes."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        result = report.result
        meta = result.metadata
        counts = count_issues_by_severity(result.inconsistencies)

        lines = [
            f"Health: {report.health_score}/100 ({health_label(report.health_score)})",
            f"Files: {meta.analyzed_files} analyzed, {meta.skipped_files} skipped  "
            f"Coverage: {meta.coverage_percentage}%",
            "Issues: {} ({})".format(
                result.issue_count, ", ".join(f"{counts[s]} {s}" for s in SEVERITIES)
            ),
        ]
        if report.delta is not None:
            lines.append(f"Delta: {format_delta_summary(report.delta)}")
        for name, reason in sorted(result.detector_errors.items()):
            lines.append(f"Detector failed: {name}: {reason}")

        if result.inconsistencies:
            lines.append("")
        for issue in result.inconsistencies:
            loc = issue.location
            lines.append(
                f"{loc.path}:{loc.line}: [{issue.severity}] {issue.type}: {issue.message}"
            )
        return "\n".join(lines)
