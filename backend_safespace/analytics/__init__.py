"""
Analytics — risk evaluators for submitted URLs and messages.

Pure functions: input text → Verdict. No I/O beyond logging.
"""

from backend_safespace.analytics.message_risk import evaluate_message
from backend_safespace.analytics.models import SCAN_KINDS, ScanInput, ScanKind, UrlAnalysis, Verdict
from backend_safespace.analytics.url_risk import URL_CATEGORIES, evaluate_url

__all__ = [
    "SCAN_KINDS",
    "ScanInput",
    "ScanKind",
    "URL_CATEGORIES",
    "UrlAnalysis",
    "Verdict",
    "evaluate_message",
    "evaluate_url",
]
