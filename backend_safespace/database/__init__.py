"""
Database layer — append-only scan record store.

ScanStore over a swappable backend; SQLAlchemyBackend serves both SQLite (default)
and PostgreSQL via DATABASE_URL.
"""

from backend_safespace.database.database import (
    SQLAlchemyBackend,
    ScanStore,
    ScanStoreBackend,
    get_scan_store,
    reset_store_cache_for_test,
)
from backend_safespace.database.models import ScanRecord, ScanStats

__all__ = [
    "SQLAlchemyBackend",
    "ScanRecord",
    "ScanStats",
    "ScanStore",
    "ScanStoreBackend",
    "get_scan_store",
    "reset_store_cache_for_test",
]
