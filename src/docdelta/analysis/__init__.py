"""Run orchestrator: analysis plus history tracking."""

from .engine import DocAnalyzer, analyze_project
from .tracking import TrackedRun, track_run, track_with_store

__all__ = ["DocAnalyzer", "TrackedRun", "analyze_project", "track_run", "track_with_store"]
