"""
Test that safespace_logging imports cleanly and its processors behave.
"""

from __future__ import annotations

from structlog.testing import capture_logs

from backend_safespace.safespace_logging import bind_user, get_logger, preview
from backend_safespace.safespace_logging.logger import _normalize_event, _redact_secrets


def test_logging_import():
    """Import get_logger from safespace_logging and use the logger."""
    logger = get_logger("test")
    assert logger is not None
    for method in ("info", "debug", "warning", "error"):
        assert hasattr(logger, method)
    logger.info("test_message", key="value")


def test_bind_user_carries_user_id():
    with capture_logs() as logs:
        bind_user("u-1").info("url_scanned", risk_score=75)
    assert logs[0]["event"] == "url_scanned"
    assert logs[0]["user_id"] == "u-1"
    assert logs[0]["risk_score"] == 75


def test_normalize_event():
    out = _normalize_event(None, "info", {"event": "api_started"})
    assert out == {"event_type": "api_started", "message": "api_started"}


def test_redact_secrets():
    out = _redact_secrets(None, "info", {"Authorization": "Bearer abc", "token": "", "url": "x"})
    assert out == {"Authorization": "***", "token": "", "url": "x"}


def test_preview():
    assert preview("  short  ") == "short"
    assert preview(None) == ""
    assert preview("x" * 60, limit=10) == "x" * 10 + "..."
