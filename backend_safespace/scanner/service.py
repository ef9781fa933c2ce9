"""
Scanner service: validate → evaluate → record → return verdict.

One synchronous evaluation and one store write per scan. Input problems raise
InvalidInput before anything is evaluated; store problems propagate as
StoreUnavailable so the caller is told the write failed.
"""

from __future__ import annotations

import ipaddress
import math
import random
from dataclasses import dataclass
from urllib.parse import urlsplit

from backend_safespace.analytics import ScanInput, Verdict, evaluate_message, evaluate_url
from backend_safespace.core.exceptions import InvalidInput, ScanNotFound
from backend_safespace.database import ScanRecord, ScanStats, ScanStore
from backend_safespace.safespace_logging import bind_user, preview

ALLOWED_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048
RECENT_ACTIVITY_LIMIT = 10


@dataclass(frozen=True)
class HistoryPage:
    records: list[ScanRecord]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def validate_url(url: str | None) -> str:
    """
    Return the trimmed URL or raise InvalidInput.

    Accepts bare hosts ("example.com/x") as well as http(s) URLs. The host
    must contain a dot, be localhost, or be an IP literal.
    """
    url = (url or "").strip()
    if not url:
        raise InvalidInput("Valid URL is required")
    if len(url) > MAX_URL_LENGTH:
        raise InvalidInput(f"URL must be at most {MAX_URL_LENGTH} characters")
    if any(ch.isspace() for ch in url):
        raise InvalidInput("Valid URL is required")
    candidate = url if "://" in url else f"http://{url}"
    try:
        parts = urlsplit(candidate)
        host = parts.hostname or ""
        _ = parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidInput("Valid URL is required") from e
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidInput("URL scheme must be http or https")
    if not host or not ("." in host or host == "localhost" or _is_ip_literal(host)):
        raise InvalidInput("Valid URL is required")
    if host.startswith(".") or ".." in host:
        raise InvalidInput("Valid URL is required")
    return url


def validate_message(message: str | None) -> str:
    if not (message or "").strip():
        raise InvalidInput("Message is required")
    return message


class ScanService:
    """Scan use cases for an authenticated user, on top of a ScanStore."""

    def __init__(self, store: ScanStore, *, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng

    def scan_url(self, user_id: str, url: str) -> Verdict:
        url = validate_url(url)
        verdict = evaluate_url(url)
        self._store.record(user_id, ScanInput(kind="url", text=url), verdict)
        bind_user(user_id).info(
            "url_scanned",
            url=preview(url),
            risk_score=verdict.risk_score,
            is_safe=verdict.is_safe,
            categories=verdict.categories,
        )
        return verdict

    def scan_message(self, user_id: str, message: str) -> Verdict:
        message = validate_message(message)
        verdict = evaluate_message(message, rng=self._rng)
        self._store.record(user_id, ScanInput(kind="message", text=message), verdict)
        bind_user(user_id).info(
            "message_scanned",
            length=len(message),
            risk_score=verdict.risk_score,
            is_safe=verdict.is_safe,
        )
        return verdict

    def history(self, user_id: str, kind: str, page: int, page_size: int) -> HistoryPage:
        records, total = self._store.list_by_user(user_id, kind=kind, page=page, page_size=page_size)
        return HistoryPage(records=records, total=total, page=page, page_size=page_size)

    def url_history(self, user_id: str, page: int = 1, page_size: int = 10) -> HistoryPage:
        return self.history(user_id, "url", page, page_size)

    def message_history(self, user_id: str, page: int = 1, page_size: int = 10) -> HistoryPage:
        return self.history(user_id, "message", page, page_size)

    def get_url_scan(self, user_id: str, record_id: int) -> ScanRecord:
        rec = self._store.get_for_user(user_id, record_id, kind="url")
        if rec is None:
            raise ScanNotFound()
        return rec

    def scan_stats(self, user_id: str) -> ScanStats:
        return self._store.stats_for_user(user_id)

    def recent_activity(self, user_id: str, limit: int = RECENT_ACTIVITY_LIMIT) -> list[ScanRecord]:
        """Newest scans of either kind, merged by created_at."""
        records, _ = self._store.list_by_user(user_id, kind=None, page=1, page_size=limit)
        return records
