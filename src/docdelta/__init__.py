"""
docdelta - Documentation Consistency Delta Tracking

Scans a project's Markdown and source files for documentation defects
(broken links and images, TODO markers, orphaned files, undocumented
exports, inconsistent numbers), scores the run 0-100, and tells you what
changed since the last recorded run.
"""

__version__ = "0.1.0"

from .analysis import DocAnalyzer, TrackedRun, analyze_project, track_run
from .delta import DeltaSummary, compute_delta
from .health import compute_health_score
from .models import AnalysisResult, Issue, Location

__all__ = [
    "analyze_project",  # Main entry point
    "track_run",  # Analysis plus history
    "DocAnalyzer",
    "TrackedRun",
    "AnalysisResult",
    "Issue",
    "Location",
    "DeltaSummary",
    "compute_delta",
    "compute_health_score",
]
