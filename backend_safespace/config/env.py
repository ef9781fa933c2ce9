"""
Environment variable loading and validation for SafeSpace.

- DATABASE_URL: SQLAlchemy URL (PostgreSQL in production); wins over DB_PATH
- DB_PATH: SQLite file used when DATABASE_URL is unset (default: safespace.db)
- JWT_SECRET / JWT_ALGORITHM / JWT_EXPIRES_IN_SEC: bearer token signing
- API_PREFIX: route prefix (default: /api/v1)
- CORS_ORIGIN: comma-separated allowed origins
- APP_ENV (or NODE_ENV): development | production | test
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_safespace/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_DB_PATH = "safespace.db"
DEFAULT_API_PREFIX = "/api/v1"
DEFAULT_CORS_ORIGIN = "http://localhost:5173"
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXPIRES_IN_SEC = 30 * 24 * 3600
# Placeholder secret; accepted in development only
FALLBACK_JWT_SECRET = "fallback_secret"


def load_safespace_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def get_app_env() -> str:
    """Return APP_ENV (or legacy NODE_ENV): development | production | test. Default: development."""
    load_safespace_env()
    raw = _env("APP_ENV") or _env("NODE_ENV") or "development"
    return raw.lower()


def is_production() -> bool:
    return get_app_env() == "production"


def get_database_url() -> str:
    """
    Resolve the SQLAlchemy URL.
    Order: DATABASE_URL > sqlite:///DB_PATH > sqlite:///safespace.db.
    """
    load_safespace_env()
    url = _env("DATABASE_URL")
    if url:
        return url
    return f"sqlite:///{_env('DB_PATH', DEFAULT_DB_PATH)}"


def get_jwt_secret() -> str:
    """Return JWT_SECRET, or the development fallback when unset."""
    load_safespace_env()
    return _env("JWT_SECRET", FALLBACK_JWT_SECRET)


def get_jwt_algorithm() -> str:
    load_safespace_env()
    return _env("JWT_ALGORITHM", DEFAULT_JWT_ALGORITHM)


def get_jwt_expires_in_sec() -> int:
    """Token lifetime in seconds (default 30 days). Invalid values fall back to the default."""
    load_safespace_env()
    raw = _env("JWT_EXPIRES_IN_SEC")
    try:
        value = int(raw) if raw else DEFAULT_JWT_EXPIRES_IN_SEC
    except ValueError:
        return DEFAULT_JWT_EXPIRES_IN_SEC
    return value if value > 0 else DEFAULT_JWT_EXPIRES_IN_SEC


def get_api_prefix() -> str:
    """Return API_PREFIX normalized to a leading slash and no trailing slash."""
    load_safespace_env()
    prefix = _env("API_PREFIX", DEFAULT_API_PREFIX)
    prefix = "/" + prefix.strip("/")
    return "" if prefix == "/" else prefix


def get_cors_origins() -> list[str]:
    """Return CORS_ORIGIN (or FRONTEND_URL) split on commas."""
    load_safespace_env()
    raw = _env("CORS_ORIGIN") or _env("FRONTEND_URL") or DEFAULT_CORS_ORIGIN
    return [o.strip() for o in raw.split(",") if o.strip()]
