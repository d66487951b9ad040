"""Issues CLI command: every distinct issue a project has had."""

import json
from typing import Optional

import click
import typer

from ..exceptions import DocDeltaError
from ..persistence import SQLiteHistoryStore, StoredIssue
from . import app
from ._common import console, project_ref, require_history


@app.command()
def issues(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(
        None,
        "--status",
        "-s",
        help="Only show issues with this status: open | resolved | ignored",
        click_type=click.Choice(["open", "resolved", "ignored"], case_sensitive=False),
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List unique issues (by fingerprint) across a project's history.

    Each row shows the latest occurrence of an issue and its status. Use the
    fingerprint with [bold]docdelta mark[/bold] to resolve or ignore it.

    [bold cyan]Examples:[/bold cyan]

      docdelta issues

      docdelta issues --status ignored --json
    """
    ref = project_ref(ctx)
    db = require_history(ref)

    try:
        with db:
            found = SQLiteHistoryStore(db.conn).unique_issues(ref.id)
    except DocDeltaError as e:
        console.print(f"[red]Error reading history:[/red] {e}")
        raise typer.Exit(1)

    if status is not None:
        found = [i for i in found if i.status == status.lower()]

    if json_output:
        _output_json(found)
    else:
        _output_rich(found)


def _output_json(found: list[StoredIssue]) -> None:
    data = [
        {
            "fingerprint": i.fingerprint,
            "type": i.type,
            "severity": i.severity,
            "status": i.status,
            "path": i.file_path,
            "line": i.line,
            "message": i.message,
            "first_seen_at": i.first_seen_at,
        }
        for i in found
    ]
    print(json.dumps(data, indent=2))


def _output_rich(found: list[StoredIssue]) -> None:
    from rich.table import Table

    if not found:
        console.print("[green]No issues match.[/green]")
        return

    table = Table(title=f"Issues ({len(found)})", expand=True)
    table.add_column("Fingerprint", style="bold", no_wrap=True)
    table.add_column("Status")
    table.add_column("Severity")
    table.add_column("Location", style="yellow")
    table.add_column("Message", ratio=3)

    for i in found:
        table.add_row(
            i.fingerprint,
            i.status,
            i.severity,
            f"{i.file_path}:{i.line}" if i.line else i.file_path,
            i.message,
        )
    console.print(table)
