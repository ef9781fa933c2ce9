"""
Structured JSON logging: timestamp, event_type, user_id, request_id.

structlog with ISO timestamps, log level and consistent keys so scan and
request events aggregate cleanly. Modules call get_logger(__name__) and log an
event_type plus keyword fields. The API server calls configure_logging() at
startup with values from Settings; until then the env defaults apply.

Uses only Python stdlib logging and structlog; no backend_safespace imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# Keys that must never reach the log sink in clear text
SECRET_KEYS = frozenset({"authorization", "token", "password", "jwt_secret"})


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; mirror it into message for plain-text sinks."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _redact_secrets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in list(event_dict):
        if key.lower() in SECRET_KEYS and event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog: contextvars, level, timestamp, event_type, renderer.

    level: DEBUG | INFO | WARNING | ERROR (default LOG_LEVEL env or INFO).
    fmt: "json" for aggregation, anything else for the colored console renderer.
    """
    level_name = (level or DEFAULT_LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    fmt = (fmt or DEFAULT_LOG_FORMAT).strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
        _redact_secrets,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

    Log with event_type (first arg) and keyword fields:
        logger = get_logger(__name__)
        logger.info("url_scanned", user_id=uid, risk_score=75, categories=["phishing"])
    Output (JSON): {"event_type": "url_scanned", "user_id": "...", "risk_score": 75,
    "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_user(user_id: str) -> structlog.BoundLogger:
    """Return a logger with user_id bound to all subsequent log calls."""
    return get_logger("backend_safespace").bind(user_id=user_id)


def preview(text: str | None, limit: int = 48) -> str:
    """Shorten user-submitted text (URLs, messages) before it goes into a log line."""
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
