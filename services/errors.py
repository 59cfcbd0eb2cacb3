# Error taxonomy for the application review workflow

from typing import Optional


class ApplicationError(Exception):
    """Base class for errors that abort an application request."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequest(ApplicationError):
    """Rejected before any I/O (bad status, blank id)."""


class NotFound(ApplicationError):
    """No application row with the requested id."""


class PersistenceError(ApplicationError):
    """The data store failed on a required read or write."""
