"""
Tests for environment configuration (config.env, config.settings).

.env loading is disabled so only monkeypatched variables are seen.
"""

from __future__ import annotations

import pytest

from backend_safespace.config import ConfigError, Settings, get_settings
from backend_safespace.config import env

ENV_VARS = (
    "APP_ENV",
    "NODE_ENV",
    "DATABASE_URL",
    "DB_PATH",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "JWT_EXPIRES_IN_SEC",
    "API_PREFIX",
    "CORS_ORIGIN",
    "FRONTEND_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(env, "load_safespace_env", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = get_settings()
    assert s.app_env == "development"
    assert s.database_url == "sqlite:///safespace.db"
    assert s.jwt_secret == env.FALLBACK_JWT_SECRET
    assert s.jwt_algorithm == "HS256"
    assert s.jwt_expires_in_sec == 30 * 24 * 3600
    assert s.api_prefix == "/api/v1"
    assert s.cors_origins == ["http://localhost:5173"]
    assert s.is_production is False


def test_database_url_precedence(monkeypatch):
    monkeypatch.setenv("DB_PATH", "/tmp/x.db")
    assert env.get_database_url() == "sqlite:////tmp/x.db"
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db/safespace")
    assert env.get_database_url() == "postgresql+psycopg://u:p@db/safespace"


def test_node_env_fallback(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "Test")
    assert env.get_app_env() == "test"
    monkeypatch.setenv("APP_ENV", "development")
    assert env.get_app_env() == "development"


@pytest.mark.parametrize(
    "raw,expected",
    [("api/v2/", "/api/v2"), ("/", ""), ("/api", "/api")],
)
def test_api_prefix_normalized(monkeypatch, raw, expected):
    monkeypatch.setenv("API_PREFIX", raw)
    assert env.get_api_prefix() == expected


@pytest.mark.parametrize("raw", ["abc", "-5", "0"])
def test_bad_token_lifetime_falls_back(monkeypatch, raw):
    monkeypatch.setenv("JWT_EXPIRES_IN_SEC", raw)
    assert env.get_jwt_expires_in_sec() == env.DEFAULT_JWT_EXPIRES_IN_SEC


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://app.example")
    assert env.get_cors_origins() == ["https://app.example"]
    monkeypatch.setenv("CORS_ORIGIN", "https://a.example, https://b.example,")
    assert env.get_cors_origins() == ["https://a.example", "https://b.example"]


def test_production_requires_jwt_secret(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    with pytest.raises(ConfigError, match="JWT_SECRET"):
        get_settings()
    monkeypatch.setenv("JWT_SECRET", "prod-secret-0123456789abcdefghijkl")
    s = get_settings()
    assert s.is_production is True
    assert s.jwt_secret == "prod-secret-0123456789abcdefghijkl"


def test_settings_are_frozen():
    s = Settings(app_env="test", database_url="sqlite://", jwt_secret="x")
    with pytest.raises(AttributeError):
        s.app_env = "production"
