"""Exception hierarchy for docdelta."""

from .analysis import (
    AnalysisError,
    DetectorError,
    FileAccessError,
    ParsingError,
)
from .base import DocDeltaError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .persistence import (
    PersistenceError,
    RecordNotFoundError,
    StoreUnavailableError,
)

__all__ = [
    "DocDeltaError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "DetectorError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "PersistenceError",
    "StoreUnavailableError",
    "RecordNotFoundError",
]
