"""
Application-level exceptions.

Domain errors raised by the scanner service, scan record store and auth layer.
Each carries the HTTP status and a client-safe message so the API server maps
them to consistent JSON error responses in one place.
"""

from __future__ import annotations


class ScanServiceError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ScanServiceError):
    """Empty or malformed scan input; rejected before evaluation."""

    status_code = 400
    default_message = "Invalid input"


class Unauthorized(ScanServiceError):
    """Missing, malformed or expired caller identity."""

    status_code = 401
    default_message = "Not authorized"


class ScanNotFound(ScanServiceError):
    """Scan record does not exist or belongs to another user."""

    status_code = 404
    default_message = "Scan not found"


class StoreUnavailable(ScanServiceError):
    """Persistence layer unreachable at read or write time. Callers may retry."""

    status_code = 503
    default_message = "Scan store unavailable"
