"""Core exception classes for the book service.

Every failure the request handler can report is a ``BookApiError`` carrying
its HTTP status and the message shown to the caller. The router translates
these into responses in one place; nothing below the handler knows about
status codes.
"""

from collections.abc import Sequence


class BookApiError(Exception):
    """Base class for failures reported to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookApiError):
    """Malformed identifier or missing/empty required field."""

    status_code = 400


class NotFoundError(BookApiError):
    """Well-formed identifier with no matching record."""

    status_code = 404


class MethodNotAllowedError(BookApiError):
    """Operation method outside the supported set."""

    status_code = 405

    def __init__(self, method: str, allowed: Sequence[str]):
        super().__init__(f"Method {method} Not Allowed")
        self.method = method
        self.allowed = tuple(allowed)


class PersistenceError(BookApiError):
    """Any underlying store failure. Details are logged, never returned."""

    status_code = 500


class BootstrapError(Exception):
    """Raised when the store cannot be created or seeded at startup."""
