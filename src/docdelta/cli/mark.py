"""Mark CLI command: set the status of an issue by fingerprint."""

import typer

from ..exceptions import DocDeltaError, RecordNotFoundError
from ..persistence import SQLiteHistoryStore
from . import app
from ._common import console, project_ref, require_history

STATUS_STYLES = {"open": "yellow", "resolved": "green", "ignored": "dim"}


@app.command()
def mark(
    ctx: typer.Context,
    fingerprint: str = typer.Argument(..., help="Issue fingerprint (see `docdelta issues`)"),
    status: str = typer.Argument(..., help="New status: open | resolved | ignored"),
):
    """
    Set an issue's status.

    [bold]ignored[/bold] issues stay ignored in later runs and never count as
    regressions. [bold]resolved[/bold] issues that come back are reported as
    reintroduced.

    [bold cyan]Examples:[/bold cyan]

      docdelta mark 3f2a9c1b7d4e5a60 ignored
    """
    status = status.lower()
    if status not in STATUS_STYLES:
        console.print(f"[red]Error:[/red] status must be one of: {', '.join(STATUS_STYLES)}")
        raise typer.Exit(2)

    ref = project_ref(ctx)
    db = require_history(ref)

    try:
        with db:
            issue = SQLiteHistoryStore(db.conn).update_status_by_fingerprint(
                ref.id, fingerprint, status
            )
    except RecordNotFoundError:
        console.print(f"[red]No issue with fingerprint[/red] [bold]{fingerprint}[/bold]")
        raise typer.Exit(1)
    except DocDeltaError as e:
        console.print(f"[red]Error updating history:[/red] {e}")
        raise typer.Exit(1)

    style = STATUS_STYLES[status]
    console.print(
        f"Marked [bold]{fingerprint}[/bold] as [{style}]{status}[/{style}]: "
        f"{issue.file_path}: {issue.message}"
    )
