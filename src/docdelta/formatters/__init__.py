"""Output formatters for docdelta."""

from .base import BaseFormatter, Report
from .github_formatter import GithubFormatter
from .json_formatter import GroupedJsonFormatter, JsonFormatter, group_by_file, report_to_dict
from .rich_formatter import RichFormatter
from .text_formatter import TextFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json", "grouped", "text", "github"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "rich": RichFormatter,
        "json": JsonFormatter,
        "grouped": GroupedJsonFormatter,
        "text": TextFormatter,
        "github": GithubFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "Report",
    "RichFormatter",
    "JsonFormatter",
    "GroupedJsonFormatter",
    "TextFormatter",
    "GithubFormatter",
    "get_formatter",
    "group_by_file",
    "report_to_dict",
]
