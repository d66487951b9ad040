"""
Logging configuration for docdelta.

Routes log records through rich so warnings about skipped files or failed
detectors stay readable next to the report output. The level comes from the
``verbosity`` setting, which TOML files, ``DOCDELTA_VERBOSITY`` and the
``--verbose``/``--quiet`` flags all feed.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Install a stderr rich handler, plus a plain file handler when ``log_file`` is set.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose``
        log_file: Optional path; records are appended to it

    Returns:
        The ``docdelta`` logger
    """
    if verbosity not in VERBOSITY_LEVELS:
        raise ValueError(f"Unknown verbosity: {verbosity}")
    level = VERBOSITY_LEVELS[verbosity]
    verbose = verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger("docdelta")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger namespaced under ``docdelta`` (``None`` gives the package logger)."""
    if name is None:
        return logging.getLogger("docdelta")

    if not name.startswith("docdelta"):
        name = f"docdelta.{name}"

    return logging.getLogger(name)
