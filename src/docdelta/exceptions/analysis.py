"""Analysis-related exceptions: file access, parsing, detector failures."""

from pathlib import PurePath
from typing import Union

from .base import DocDeltaError

PathLike = Union[str, PurePath]


class AnalysisError(DocDeltaError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be read or decoded."""

    def __init__(self, filepath: PathLike, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = str(filepath)
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be turned into a content model."""

    def __init__(self, filepath: PathLike, kind: str, reason: str):
        super().__init__(
            f"Failed to parse {kind} file: {filepath}",
            details={"filepath": str(filepath), "kind": kind, "reason": reason},
        )
        self.filepath = str(filepath)
        self.kind = kind
        self.reason = reason


class DetectorError(AnalysisError):
    """Captures an unexpected failure inside a single detector."""

    def __init__(self, detector: str, reason: str):
        super().__init__(
            f"Detector {detector} failed",
            details={"detector": detector, "reason": reason},
        )
        self.detector = detector
        self.reason = reason
