"""JSON formatters: the full report and the grouped-by-file view."""

import json
from typing import Any

from ..health import health_label
from ..models import count_issues_by_severity, count_issues_by_type
from .base import BaseFormatter, Report


def report_to_dict(report: Report) -> dict[str, Any]:
    result = report.result
    data: dict[str, Any] = {
        "metadata": result.metadata.to_dict(),
        "inconsistencies": [i.to_dict() for i in result.inconsistencies],
        "summary": {
            "total": result.issue_count,
            "by_severity": count_issues_by_severity(result.inconsistencies),
            "by_type": count_issues_by_type(result.inconsistencies),
        },
        "health": {
            "score": report.health_score,
            "label": health_label(report.health_score),
        },
    }
    if result.detector_errors:
        data["detector_errors"] = dict(result.detector_errors)
    if report.delta is not None:
        data["delta"] = report.delta.to_dict()
    return data


def group_by_file(report: Report) -> dict[str, Any]:
    """Issues bucketed per file; busiest files first, issues by line."""
    buckets: dict[str, list] = {}
    for issue in report.result.inconsistencies:
        buckets.setdefault(issue.location.path, []).append(issue)

    files = []
    for path, issues in sorted(buckets.items(), key=lambda kv: (-len(kv[1]), kv[0])):
        issues.sort(key=lambda i: (i.location.line, i.location.col or 0))
        files.append(
            {
                "path": path,
                "issue_count": len(issues),
                "by_severity": count_issues_by_severity(issues),
                "issues": [
                    {
                        "id": i.id,
                        "type": i.type,
                        "severity": i.severity,
                        "line": i.location.line,
                        "message": i.message,
                        "suggestion": i.suggestion,
                    }
                    for i in issues
                ],
            }
        )

    return {
        "project": report.project,
        "health_score": report.health_score,
        "total_issues": report.result.issue_count,
        "files": files,
    }


class JsonFormatter(BaseFormatter):
    """Render the full report as JSON."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        return json.dumps(report_to_dict(report), indent=2)


class GroupedJsonFormatter(BaseFormatter):
    """Render issues grouped by file as JSON."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        return json.dumps(group_by_file(report), indent=2)
