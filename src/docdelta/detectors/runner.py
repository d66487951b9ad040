"""Fan-out/fan-in execution of detectors with isolated failures."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional

from ..exceptions import DetectorError
from ..logging_config import get_logger

if TYPE_CHECKING:
    from ..content.models import ContentModel
    from ..models import Issue
    from .base import Detector

logger = get_logger(__name__)


@dataclass
class DetectorOutcome:
    """Tagged result of one detector: ``ok`` with issues or ``error``."""

    detector: str
    status: Literal["ok", "error"]
    issues: list[Issue] = field(default_factory=list)
    error: Optional[DetectorError] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def _run_one(detector: Detector, model: ContentModel) -> DetectorOutcome:
    try:
        issues = detector.detect(model.documents, model.source_files, model.all_paths)
    except Exception as e:
        error = DetectorError(detector.name, f"{type(e).__name__}: {e}")
        logger.warning(f"Detector '{detector.name}' failed: {e}")
        logger.debug("Detector traceback", exc_info=True)
        return DetectorOutcome(detector=detector.name, status="error", error=error)
    logger.debug(f"Detector '{detector.name}' produced {len(issues)} issues")
    return DetectorOutcome(detector=detector.name, status="ok", issues=list(issues))


def run_detectors(
    detectors: list[Detector],
    model: ContentModel,
    timeout_seconds: Optional[float] = None,
    parallel: bool = True,
) -> list[DetectorOutcome]:
    """Run every detector against ``model``; outcomes keep detector order.

    A detector that raises or exceeds ``timeout_seconds`` becomes an error
    outcome; the others are unaffected.
    """
    if not parallel or len(detectors) < 2:
        return [_run_one(d, model) for d in detectors]

    outcomes: list[DetectorOutcome] = []
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=len(detectors))
    try:
        futures = [executor.submit(_run_one, d, model) for d in detectors]
        for detector, future in zip(detectors, futures):
            try:
                outcomes.append(future.result(timeout=timeout_seconds))
            except concurrent.futures.TimeoutError:
                error = DetectorError(detector.name, f"exceeded {timeout_seconds}s timeout")
                logger.warning(f"Detector '{detector.name}' exceeded {timeout_seconds}s timeout")
                outcomes.append(DetectorOutcome(detector=detector.name, status="error", error=error))
    finally:
        # a timed-out detector keeps its thread; do not block on it
        executor.shutdown(wait=False)
    return outcomes
