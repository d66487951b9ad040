"""History store exceptions."""

from typing import Optional

from .base import DocDeltaError


class PersistenceError(DocDeltaError):
    """Base class for history store errors."""

    def __init__(self, reason: str, location: Optional[str] = None):
        details = {"reason": reason}
        if location:
            details["location"] = location
        super().__init__(f"History store error: {reason}", details=details)
        self.reason = reason
        self.location = location


class StoreUnavailableError(PersistenceError):
    """Raised when the history database cannot be opened or written."""

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when a requested project, run or issue does not exist."""

    pass
