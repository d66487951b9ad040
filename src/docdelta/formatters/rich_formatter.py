"""Rich terminal formatter for docdelta."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..delta import DeltaSummary, format_delta_summary
from ..health import health_label
from ..models import SEVERITIES, Issue, count_issues_by_severity
from .base import BaseFormatter, Report

console = Console(stderr=True)

_SEVERITY_STYLES = {"high": "red bold", "medium": "yellow", "low": "dim"}
_CLASSIFICATION_STYLES = {
    "new": "red",
    "reintroduced": "red bold",
    "resolved": "green",
    "persisting": "dim",
    "ignored": "dim italic",
}


def _health_style(score: int) -> str:
    if score >= 75:
        return "green"
    elif score >= 50:
        return "yellow"
    else:
        return "red"


def _severity_label(severity: str) -> str:
    style = _SEVERITY_STYLES.get(severity, "")
    return f"[{style}]{severity}[/{style}]" if style else severity


class RichFormatter(BaseFormatter):
    """Rich terminal output with summary panel, issue tables, and delta panel."""

    def __init__(self, max_rows: int = 50) -> None:
        self.max_rows = max_rows

    def render(self, report: Report) -> None:
        self._print_summary(report)
        self._print_issues(report.result.inconsistencies)
        if report.delta is not None:
            self._print_delta(report.delta)

    def format(self, report: Report) -> str:
        # Rich output goes directly to console; return empty string
        self.render(report)
        return ""

    # -- private helpers --

    def _print_summary(self, report: Report) -> None:
        meta = report.result.metadata
        counts = count_issues_by_severity(report.result.inconsistencies)
        style = _health_style(report.health_score)

        summary_text = (
            f"Health [{style} bold]{report.health_score}/100[/{style} bold] "
            f"({health_label(report.health_score)})  |  "
            f"[bold]{meta.analyzed_files}[/bold] files "
            f"([cyan]{meta.total_markdown_files}[/cyan] docs, "
            f"[cyan]{meta.total_code_files}[/cyan] source)  |  "
            f"Coverage [blue]{meta.coverage_percentage}%[/blue]  |  "
            + "  ".join(f"{_severity_label(s)} {counts[s]}" for s in SEVERITIES)
        )
        title = "[bold cyan]docdelta[/bold cyan]"
        if report.project:
            title = f"[bold cyan]docdelta: {report.project}[/bold cyan]"
        console.print(Panel(summary_text, title=title, expand=False))

        if meta.skipped_files:
            console.print(f"[dim]{meta.skipped_files} unreadable files skipped[/dim]")
        for name, reason in sorted(report.result.detector_errors.items()):
            console.print(f"[yellow]Detector '{name}' failed:[/yellow] {reason}")
        console.print()

    def _print_issues(self, issues: list[Issue]) -> None:
        if not issues:
            console.print("[green]No documentation issues found.[/green]")
            console.print()
            return

        for severity in SEVERITIES:
            group = [i for i in issues if i.severity == severity]
            if not group:
                continue

            table = Table(
                title=f"{severity.capitalize()} severity ({len(group)})",
                title_style=_SEVERITY_STYLES[severity],
                expand=True,
            )
            table.add_column("Location", style="yellow", no_wrap=False, ratio=2)
            table.add_column("Type", style="cyan", width=24)
            table.add_column("Message", ratio=4)

            for issue in group[: self.max_rows]:
                message = issue.message
                if issue.suggestion:
                    message += f"\n[dim]{issue.suggestion}[/dim]"
                table.add_row(
                    f"{issue.location.path}:{issue.location.line}", issue.type, message
                )
            console.print(table)

            hidden = len(group) - self.max_rows
            if hidden > 0:
                console.print(f"[dim]... and {hidden} more {severity} issues[/dim]")
            console.print()

    def _print_delta(self, delta: DeltaSummary) -> None:
        if delta.is_first_run:
            console.print(
                Panel(
                    format_delta_summary(delta),
                    title="[bold cyan]Changes[/bold cyan]",
                    expand=False,
                )
            )
            return

        lines = [format_delta_summary(delta), ""]
        for classification in ("new", "reintroduced", "resolved"):
            for d in delta.by_classification(classification):
                style = _CLASSIFICATION_STYLES[classification]
                lines.append(
                    f"[{style}]{classification:>12}[/{style}]  "
                    f"{d.path}: {d.message}"
                )

        attribution = delta.attribution
        lines.append("")
        lines.append(
            f"[dim]Health change: {attribution.from_new_issues:+d} new issues, "
            f"{attribution.from_resolved_issues:+d} resolved, "
            f"{attribution.from_severity_mix:+d} other[/dim]"
        )

        border = "red" if delta.has_regressions else "green"
        console.print(
            Panel(
                "\n".join(lines),
                title="[bold cyan]Changes since last run[/bold cyan]",
                border_style=border,
                expand=False,
            )
        )
