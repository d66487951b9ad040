"""Main analysis command."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..analysis import DocAnalyzer, track_run
from ..delta import DeltaSummary
from ..exceptions import DocDeltaError
from ..formatters import GroupedJsonFormatter, JsonFormatter, Report, get_formatter
from ..health import score_result
from ..logging_config import get_logger, setup_logging
from ..models import AnalysisResult
from . import app
from ._common import console, resolve_config


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format (same as --format json)",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich | json | text | github",
        click_type=click.Choice(["rich", "json", "text", "github"], case_sensitive=False),
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Record this run in .docdelta/ and show what changed since the last one",
    ),
    project: Optional[str] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project name for history (default: directory name)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this file",
        dir_okay=False,
    ),
    grouped: Optional[Path] = typer.Option(
        None,
        "--grouped",
        help="Also write issues grouped by file as JSON to this file",
        dir_okay=False,
    ),
    fail_on: Optional[str] = typer.Option(
        None,
        "--fail-on",
        help="Exit 1 if issues meet threshold: any | high | regression",
        click_type=click.Choice(["any", "high", "regression"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Parse every file even if a cached copy exists",
        hidden=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Concurrent file reads (default: 64)",
        min=1,
        max=128,
        hidden=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Check documentation for broken links, stale TODOs, orphaned files,
    undocumented exports and inconsistent numbers.

    With [bold]--save[/bold] the run is recorded and compared against the
    previous one: new, resolved, reintroduced and ignored issues, plus the
    health change they explain.

    [bold cyan]Examples:[/bold cyan]

      docdelta

      docdelta --save

      docdelta --json --output report.json

      docdelta -C /path/to/project --save --fail-on regression
    """
    # Store resolved options in context for subcommands
    target = Path(path) if path else Path.cwd()
    ctx.ensure_object(dict)
    ctx.obj["path"] = target
    ctx.obj["project"] = project
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is not None:
        return

    from .. import __version__

    if version:
        console.print(f"[bold cyan]docdelta[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    logger = get_logger()

    try:
        settings = resolve_config(
            config=config,
            no_cache=no_cache,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
        logger = setup_logging(settings.verbosity, str(log_file) if log_file else None)

        root = target.resolve()
        name = project or root.name
        result = DocAnalyzer(root, settings).analyze()

        delta: Optional[DeltaSummary] = None
        want_history = save or fail_on == "regression"
        if want_history and settings.enable_history:
            tracked = track_run(result, root, name, settings)
            health = tracked.health_score
            delta = tracked.delta
            if tracked.degraded:
                console.print("[yellow]History unavailable; this run was not recorded.[/yellow]")
        else:
            if want_history:
                logger.warning("History is disabled (enable_history = false); run not recorded")
            health = score_result(result, settings.scoring)

        report = Report(result=result, health_score=health, delta=delta, project=name)

        fmt = "json" if json_output else output_format.lower()
        get_formatter(fmt).render(report)

        if output is not None:
            output.write_text(JsonFormatter().format(report) + "\n")
            logger.info(f"Report written to {output}")
        if grouped is not None:
            grouped.write_text(GroupedJsonFormatter().format(report) + "\n")
            logger.info(f"Grouped report written to {grouped}")

        if fail_on is not None:
            should_fail = _check_fail_condition(fail_on.lower(), result, delta)
            if should_fail:
                raise typer.Exit(1)

    except typer.Exit:
        raise

    except DocDeltaError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Fail-on condition checker
# ---------------------------------------------------------------------------


def _check_fail_condition(
    fail_on: str, result: AnalysisResult, delta: Optional[DeltaSummary]
) -> bool:
    """Return True if the run should exit non-zero."""
    if fail_on == "any":
        return result.issue_count > 0
    if fail_on == "high":
        return any(i.severity == "high" for i in result.inconsistencies)
    if fail_on == "regression":
        return delta is not None and delta.has_regressions
    return False
