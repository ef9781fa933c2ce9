"""
URL risk engine: lexical risk score and categories for a submitted URL.

Purely string-based; no network, DNS or reputation lookups. Each category in
URL_CATEGORIES adds its weight once when any of its substrings appears in the
lower-cased URL. Structural red flags (userinfo '@' or a dotted-quad host)
add 30 once; a non-https scheme adds 15. Score is clamped to 100.
Risk: < 30 safe, 30-59 medium, >= 60 high.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable

from backend_safespace.analytics.models import UrlAnalysis, Verdict
from backend_safespace.safespace_logging import get_logger, preview

logger = get_logger(__name__)

# (name, substrings, weight) in reporting order
URL_CATEGORIES: tuple[tuple[str, tuple[str, ...], int], ...] = (
    ("phishing", ("phishing", "scam", "fraud", "fake", "spoof", "verify-account", "secure-login"), 40),
    ("malware", ("malware", "virus", "trojan", "spyware", "adware", "ransomware"), 40),
    ("adult", ("porn", "adult", "xxx", "nsfw", "explicit"), 20),
    ("gambling", ("gambling", "casino", "bet", "poker", "lottery"), 20),
    ("suspicious_domains", (".tk", ".ml", ".ga", ".cf", "bit.ly", "tinyurl.com", "short.link"), 20),
)

CATEGORY_SUSPICIOUS_STRUCTURE = "suspicious_structure"
CATEGORY_INSECURE_PROTOCOL = "insecure_protocol"
SUSPICIOUS_STRUCTURE_WEIGHT = 30
INSECURE_PROTOCOL_WEIGHT = 15

SECURE_SCHEME = "https://"
# Any four 1-3 digit groups; octets are not range-checked
DOTTED_QUAD_RE = re.compile(r"[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}")

MAX_RISK_SCORE = 100
SAFE_BELOW = 30
HIGH_RISK_AT = 60
REASON_HIGH = "High risk URL detected"
REASON_MEDIUM = "Medium risk URL detected"


def has_secure_scheme(url: str) -> bool:
    """True when the URL starts with https:// (scheme compared case-insensitively)."""
    return url[: len(SECURE_SCHEME)].lower() == SECURE_SCHEME


def has_suspicious_structure(url: str) -> bool:
    """True when the URL embeds userinfo ('@') or an IPv4-shaped substring."""
    return "@" in url or DOTTED_QUAD_RE.search(url) is not None


def match_categories(url: str) -> list[tuple[str, int]]:
    """Return (category, weight) for every table category with at least one substring in the URL."""
    url_lower = url.lower()
    return [
        (name, weight)
        for name, substrings, weight in URL_CATEGORIES
        if any(s in url_lower for s in substrings)
    ]


def risk_reason(risk_score: int) -> str | None:
    if risk_score < SAFE_BELOW:
        return None
    return REASON_HIGH if risk_score >= HIGH_RISK_AT else REASON_MEDIUM


def evaluate_url(
    url: str,
    *,
    now: Callable[[], datetime] | None = None,
) -> Verdict:
    """
    Score a URL against the category table and structural checks.

    now: clock for analysis.scannedAt (default: UTC now); injectable for tests.
    Returns Verdict with categories in table order, then suspicious_structure,
    then insecure_protocol.
    """
    matched = match_categories(url)
    categories = [name for name, _ in matched]
    raw_score = sum(weight for _, weight in matched)

    if has_suspicious_structure(url):
        categories.append(CATEGORY_SUSPICIOUS_STRUCTURE)
        raw_score += SUSPICIOUS_STRUCTURE_WEIGHT

    secure = has_secure_scheme(url)
    if not secure:
        categories.append(CATEGORY_INSECURE_PROTOCOL)
        raw_score += INSECURE_PROTOCOL_WEIGHT

    risk_score = min(raw_score, MAX_RISK_SCORE)
    is_safe = risk_score < SAFE_BELOW
    scanned_at = now() if now is not None else datetime.now(timezone.utc)

    verdict = Verdict(
        is_safe=is_safe,
        risk_score=risk_score,
        categories=categories,
        reason=risk_reason(risk_score),
        analysis=UrlAnalysis(
            length=len(url),
            has_secure_scheme=secure,
            scanned_at=scanned_at,
        ),
    )
    logger.debug(
        "url_risk_result",
        url=preview(url),
        raw_score=raw_score,
        risk_score=risk_score,
        categories=categories,
    )
    return verdict
