"""
Structured logging for Backend SafeSpace.

JSON logs with timestamp, event_type, user_id, request_id.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_safespace.safespace_logging.logger import (
    bind_user,
    configure_logging,
    get_logger,
    preview,
)

__all__ = ["bind_user", "configure_logging", "get_logger", "preview"]
