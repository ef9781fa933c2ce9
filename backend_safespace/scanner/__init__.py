"""
Scanner — service layer tying input validation, evaluators and the scan store together.
"""

from backend_safespace.scanner.service import (
    HistoryPage,
    ScanService,
    validate_message,
    validate_url,
)

__all__ = ["HistoryPage", "ScanService", "validate_message", "validate_url"]
