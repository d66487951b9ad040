"""Cache management commands."""

from pathlib import Path

import typer

from ..cache import ParseCache
from . import app
from ._common import console, project_ref


@app.command()
def cache_clear(ctx: typer.Context):
    """Clear the parse cache of the project."""
    ref = project_ref(ctx)
    settings = ref.config

    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    cache_dir = Path(settings.cache_dir)
    if not cache_dir.is_absolute():
        cache_dir = ref.root / cache_dir
    if not cache_dir.exists():
        console.print("[dim]No cache to clear[/dim]")
        raise typer.Exit(0)

    with ParseCache(str(cache_dir), ttl_hours=settings.cache_ttl_hours) as cache:
        entries = cache.stats().get("size", 0)
        cache.clear()
    console.print(f"[green]Cache cleared[/green] ({entries} entries)")
