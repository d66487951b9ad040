"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="docdelta",
    help="docdelta - Documentation consistency checks with run-over-run deltas",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import main as _main_callback  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402
from .issues import issues as _issues  # noqa: F401, E402
from .mark import mark as _mark  # noqa: F401, E402
from .forget import forget as _forget  # noqa: F401, E402
from .cache import cache_clear as _cache_clear  # noqa: F401, E402
