"""
Bearer-token identity for scan routes.

Tokens are HS256 JWTs carrying the user id under "id" (same claim layout the
SafeSpace frontend already stores). issue_token() signs, verify_token()
checks signature and expiry, and current_user_id is the FastAPI dependency
every protected route uses. The scanner and store never authenticate.
"""

from __future__ import annotations

import time
from typing import Any

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend_safespace.config import Settings
from backend_safespace.core.exceptions import Unauthorized
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued for a SafeSpace user")


def issue_token(
    user_id: str,
    secret: str,
    *,
    algorithm: str = "HS256",
    expires_in_sec: int = 30 * 24 * 3600,
    now: int | None = None,
) -> str:
    """Sign a token for user_id valid for expires_in_sec seconds."""
    user_id = (user_id or "").strip()
    if not user_id:
        raise ValueError("user_id must be non-empty")
    issued_at = int(time.time()) if now is None else now
    payload: dict[str, Any] = {
        "id": user_id,
        "iat": issued_at,
        "exp": issued_at + expires_in_sec,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, *, algorithm: str = "HS256") -> str:
    """Return the user id in a valid token. Raises Unauthorized otherwise."""
    if not token:
        raise Unauthorized("Not authorized, no token")
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm], options={"require": ["exp"]})
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized("Not authorized, token expired") from e
    except jwt.InvalidTokenError as e:
        logger.info("auth_token_rejected", error=type(e).__name__)
        raise Unauthorized("Not authorized, token failed") from e
    user_id = str(payload.get("id") or "").strip()
    if not user_id:
        raise Unauthorized("Not authorized, token failed")
    return user_id


def get_app_settings(request: Request) -> Settings:
    """Dependency: Settings the app was built with."""
    return request.app.state.settings


def current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """Dependency: authenticated user id from the Authorization: Bearer header."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token")
    return verify_token(
        credentials.credentials,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
