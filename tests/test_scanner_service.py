"""
Tests for the scanner service (input validation, evaluate + record flow).
"""

from __future__ import annotations

import random
from unittest.mock import MagicMock

import pytest

from backend_safespace.core.exceptions import InvalidInput, ScanNotFound, StoreUnavailable
from backend_safespace.scanner import ScanService, validate_message, validate_url

from conftest import OTHER_USER_ID, USER_ID


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "example.com/path?q=1",
        "http://localhost:3000",
        "http://1.2.3.4/login",
        "https://1.2.3.4@evil.com",
        "  https://padded.com  ",
    ],
)
def test_validate_url_accepts(url):
    assert validate_url(url) == url.strip()


@pytest.mark.parametrize(
    "url",
    [
        "",
        "   ",
        None,
        "not a url",
        "ftp://example.com",
        "javascript:alert(1)",
        "example",
        "http://example.com:abc",
        "http://.example.com",
        "https://" + "a" * 2050 + ".com",
    ],
)
def test_validate_url_rejects(url):
    with pytest.raises(InvalidInput):
        validate_url(url)


def test_validate_message():
    assert validate_message(" hi ") == " hi "
    with pytest.raises(InvalidInput, match="Message is required"):
        validate_message("   ")


def test_scan_url_records_verdict(scan_store):
    service = ScanService(scan_store)
    verdict = service.scan_url(USER_ID, " http://phishing-verify-account.tk ")
    assert verdict.risk_score == 75

    history = service.url_history(USER_ID)
    assert history.total == 1
    rec = history.records[0]
    assert rec.input.text == "http://phishing-verify-account.tk"
    assert rec.verdict.categories == verdict.categories


def test_invalid_url_is_not_recorded(scan_store):
    service = ScanService(scan_store)
    with pytest.raises(InvalidInput):
        service.scan_url(USER_ID, "ftp://example.com")
    assert service.url_history(USER_ID).total == 0


def test_scan_message_records_placeholder(scan_store):
    service = ScanService(scan_store, rng=random.Random(11))
    expected = random.Random(11).randrange(100)
    verdict = service.scan_message(USER_ID, "hello")
    assert verdict.is_safe is True
    assert verdict.risk_score == expected

    history = service.message_history(USER_ID)
    assert history.total == 1
    assert history.records[0].input.kind == "message"
    assert service.url_history(USER_ID).total == 0


def test_history_pages(scan_store):
    service = ScanService(scan_store)
    for i in range(7):
        service.scan_url(USER_ID, f"https://site{i}.com")
    history = service.url_history(USER_ID, page=2, page_size=5)
    assert history.total == 7
    assert history.pages == 2
    assert len(history.records) == 2


def test_get_url_scan_owner_only(scan_store):
    service = ScanService(scan_store)
    service.scan_url(USER_ID, "https://example.com")
    rec_id = service.url_history(USER_ID).records[0].id
    assert service.get_url_scan(USER_ID, rec_id).id == rec_id
    with pytest.raises(ScanNotFound):
        service.get_url_scan(OTHER_USER_ID, rec_id)
    with pytest.raises(ScanNotFound):
        service.get_url_scan(USER_ID, rec_id + 1000)


def test_store_failure_propagates():
    """Write failures reach the caller; no verdict is returned as if it were stored."""
    store = MagicMock()
    store.record.side_effect = StoreUnavailable()
    service = ScanService(store)
    with pytest.raises(StoreUnavailable):
        service.scan_url(USER_ID, "https://example.com")
    store.record.assert_called_once()


def test_recent_activity_spans_both_kinds(scan_store):
    service = ScanService(scan_store, rng=random.Random(1))
    service.scan_url(USER_ID, "https://example.com")
    service.scan_message(USER_ID, "hello")
    recent = service.recent_activity(USER_ID, limit=5)
    assert [r.input.kind for r in recent] == ["message", "url"]
    assert service.recent_activity(OTHER_USER_ID) == []
