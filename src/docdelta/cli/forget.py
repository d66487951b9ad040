"""Forget CLI command: delete a project's recorded history."""

import typer

from ..exceptions import DocDeltaError, RecordNotFoundError
from ..persistence import SQLiteHistoryStore
from . import app
from ._common import console, project_ref, require_history


@app.command()
def forget(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete every recorded run and issue for the project."""
    ref = project_ref(ctx)
    db = require_history(ref)

    if not yes:
        typer.confirm(f"Delete all history for '{ref.name}'?", abort=True)

    try:
        with db:
            SQLiteHistoryStore(db.conn).delete_project(ref.id)
    except RecordNotFoundError:
        console.print(f"[yellow]No history recorded for project '{ref.name}'.[/yellow]")
        raise typer.Exit(0)
    except DocDeltaError as e:
        console.print(f"[red]Error updating history:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]History for '{ref.name}' deleted[/green]")
