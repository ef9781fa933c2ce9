"""
Core utilities — shared exceptions and cross-cutting concerns.

Used by the analytics evaluators, the scan record store, the scanner service
and the API server.
"""

from backend_safespace.core.exceptions import (
    InvalidInput,
    ScanNotFound,
    ScanServiceError,
    StoreUnavailable,
    Unauthorized,
)

__all__ = [
    "InvalidInput",
    "ScanNotFound",
    "ScanServiceError",
    "StoreUnavailable",
    "Unauthorized",
]
