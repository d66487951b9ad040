"""History CLI command: list past analysis runs."""

import json

import typer

from ..exceptions import DocDeltaError
from ..persistence import AnalysisRun, SQLiteHistoryStore
from . import app
from ._common import console, project_ref, require_history, short_timestamp, sparkline


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Maximum number of runs to list",
        min=1,
        max=1000,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List past analysis runs stored in .docdelta/history.db.

    Shows run number, timestamp, issue count and health score for each
    recorded run, with a sparkline of the health trend.

    [bold cyan]Examples:[/bold cyan]

      docdelta history

      docdelta history --json

      docdelta -C /path/to/project history --limit 5
    """
    ref = project_ref(ctx)
    db = require_history(ref)

    try:
        with db:
            runs = SQLiteHistoryStore(db.conn).recent_runs(ref.id, limit=limit)
    except DocDeltaError as e:
        console.print(f"[red]Error reading history:[/red] {e}")
        raise typer.Exit(1)

    if not runs:
        console.print(f"[yellow]No runs recorded for project '{ref.name}'.[/yellow]")
        raise typer.Exit(0)

    if json_output:
        _output_json(runs)
    else:
        _output_rich(runs, ref.name)


def _output_json(runs: list[AnalysisRun]) -> None:
    """Machine-readable JSON output."""
    data = [
        {
            "id": r.id,
            "run_number": r.run_number,
            "timestamp": r.timestamp,
            "issue_count": r.issue_count,
            "issues_by_type": r.issues_by_type,
            "health_score": r.health_score,
        }
        for r in runs
    ]
    print(json.dumps(data, indent=2))


def _output_rich(runs: list[AnalysisRun], project: str) -> None:
    """Human-readable Rich table output, oldest run at the bottom."""
    from rich.table import Table

    table = Table(
        title=f"Analysis History: {project}",
        show_lines=False,
        pad_edge=True,
    )
    table.add_column("#", style="bold", justify="right")
    table.add_column("Timestamp", style="green")
    table.add_column("Issues", justify="right", style="yellow")
    table.add_column("Health", justify="right")
    table.add_column("Change", justify="right")

    for i, r in enumerate(runs):
        older = runs[i + 1] if i + 1 < len(runs) else None
        if older is None:
            change = ""
        else:
            diff = r.health_score - older.health_score
            color = "green" if diff > 0 else "red" if diff < 0 else "dim"
            change = f"[{color}]{diff:+d}[/{color}]"
        table.add_row(
            str(r.run_number),
            short_timestamp(r.timestamp),
            str(r.issue_count),
            str(r.health_score),
            change,
        )

    trend = [r.health_score for r in reversed(runs)]
    console.print()
    console.print(table)
    console.print(f"Health trend: [cyan]{sparkline(trend)}[/cyan]  (oldest → newest)")
    console.print()
