"""Delta engine: classify issues across runs and attribute health changes."""

from .engine import attribute_health, classify, compute_delta, first_run_summary, format_delta_summary
from .models import CLASSIFICATIONS, Classification, DeltaSummary, HealthAttribution, IssueDelta

__all__ = [
    "CLASSIFICATIONS",
    "Classification",
    "DeltaSummary",
    "HealthAttribution",
    "IssueDelta",
    "attribute_health",
    "classify",
    "compute_delta",
    "first_run_summary",
    "format_delta_summary",
]
