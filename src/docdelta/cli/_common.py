"""Shared CLI helpers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..fingerprint import project_id
from ..persistence import HistoryDB

console = Console()

SPARK_CHARS = "▁▂▃▄▅▆▇█"


@dataclass
class ProjectRef:
    root: Path
    name: str
    config: AnalysisConfig

    @property
    def id(self) -> str:
        return project_id(self.name, str(self.root))

    def history(self) -> HistoryDB:
        return HistoryDB(str(self.root), self.config.history_dir)


def resolve_config(
    config: Optional[Path] = None,
    no_cache: bool = False,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if no_cache:
        overrides["cache_enabled"] = False
    if workers is not None:
        overrides["max_concurrent_reads"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


def project_ref(ctx: typer.Context) -> ProjectRef:
    """Project root, name and config chosen on the top-level command."""
    obj = ctx.obj or {}
    root = Path(obj.get("path") or Path.cwd()).resolve()
    return ProjectRef(
        root=root,
        name=obj.get("project") or root.name,
        config=resolve_config(obj.get("config")),
    )


def require_history(ref: ProjectRef) -> HistoryDB:
    """The project's history database, or exit 0 with a hint if none exists."""
    db = ref.history()
    if not db.exists:
        console.print(
            "[yellow]No history found.[/yellow] "
            "Run [bold]docdelta --save[/bold] first to record a run."
        )
        raise typer.Exit(0)
    return db


def sparkline(values: list[int], low: int = 0, high: int = 100) -> str:
    """Render scores in ``[low, high]`` as a row of block characters."""
    span = max(high - low, 1)
    top = len(SPARK_CHARS) - 1
    chars = []
    for v in values:
        clamped = min(max(v, low), high)
        chars.append(SPARK_CHARS[round((clamped - low) / span * top)])
    return "".join(chars)


def short_timestamp(ts: str) -> str:
    """Trim an ISO timestamp to date and time."""
    if "T" in ts:
        ts = ts.replace("T", " ")
    if "+" in ts:
        ts = ts[: ts.index("+")]
    if "." in ts:
        ts = ts[: ts.index(".")]
    return ts
