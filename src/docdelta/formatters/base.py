"""Base formatter interface for docdelta output rendering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..delta import DeltaSummary
from ..models import AnalysisResult


@dataclass
class Report:
    """Everything a formatter can show about one run."""

    result: AnalysisResult
    health_score: int
    delta: Optional[DeltaSummary] = None
    project: str = ""


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: Report) -> None:
        """Render the report to stderr/stdout as appropriate."""

    @abstractmethod
    def format(self, report: Report) -> str:
        """Return formatted string representation of the report."""
