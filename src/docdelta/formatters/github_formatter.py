"""GitHub Actions formatter: workflow annotations."""

from .base import BaseFormatter, Report

_LEVELS = {"high": "error", "medium": "warning", "low": "notice"}


def _escape(text: str) -> str:
    """Escape an annotation message."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(text: str) -> str:
    """Escape an annotation property value (``file=``, ``title=``)."""
    return _escape(text).replace(":", "%3A").replace(",", "%2C")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        lines: list[str] = []
        for issue in report.result.inconsistencies:
            level = _LEVELS.get(issue.severity, "notice")
            loc = issue.location
            where = f"file={_escape_property(loc.path)},line={loc.line}"
            if loc.col is not None:
                where += f",col={loc.col}"
            msg = issue.message
            if issue.suggestion:
                msg = f"{msg} ({issue.suggestion})"
            lines.append(f"::{level} {where},title={_escape_property(issue.type)}::{_escape(msg)}")

        delta = report.delta
        if delta is not None and not delta.is_first_run and delta.has_regressions:
            lines.append(
                f"::error title=docdelta::Documentation regressed: "
                f"{delta.new_by_severity.get('high', 0)} new high, "
                f"{delta.reintroduced_count} reintroduced"
            )
        return "\n".join(lines)
