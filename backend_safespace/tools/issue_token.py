#!/usr/bin/env python3
"""
Print a bearer token for a user id, signed with the configured JWT_SECRET.

Local development and manual API testing only; production tokens come from
the auth service.

Usage:
  py -m backend_safespace.tools.issue_token <user_id> [--expires-in SECONDS]
"""

from __future__ import annotations

import argparse
import sys

from backend_safespace.api_server.auth import issue_token
from backend_safespace.config import ConfigError, get_settings
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue a SafeSpace bearer token")
    parser.add_argument("user_id", help="User id to embed in the token")
    parser.add_argument(
        "--expires-in",
        type=int,
        default=None,
        help="Lifetime in seconds (default: JWT_EXPIRES_IN_SEC)",
    )
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as e:
        print(f"[issue_token] ERROR: {e}", file=sys.stderr)
        return 1

    expires_in = args.expires_in if args.expires_in and args.expires_in > 0 else settings.jwt_expires_in_sec
    try:
        token = issue_token(
            args.user_id,
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_in_sec=expires_in,
        )
    except ValueError as e:
        print(f"[issue_token] ERROR: {e}", file=sys.stderr)
        return 1

    logger.debug("token_issued", user_id=args.user_id, expires_in_sec=expires_in)
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
