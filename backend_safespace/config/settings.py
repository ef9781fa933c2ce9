"""
Application settings and environment configuration.

Responsibilities:
- Collect configuration from environment variables and .env (see config.env).
- Validate required settings: a real JWT_SECRET is mandatory in production.
- Expose typed, immutable settings (database URL, API prefix, token options, CORS)
  for use across the store, scanner service and API server.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_safespace.config import env
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)


class ConfigError(RuntimeError):
    """Raised when required configuration is missing for the current environment."""


@dataclass(frozen=True)
class Settings:
    app_env: str
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = env.DEFAULT_JWT_ALGORITHM
    jwt_expires_in_sec: int = env.DEFAULT_JWT_EXPIRES_IN_SEC
    api_prefix: str = env.DEFAULT_API_PREFIX
    cors_origins: list[str] = field(default_factory=lambda: [env.DEFAULT_CORS_ORIGIN])

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def validate_settings(settings: Settings) -> None:
    """Reject the fallback JWT secret in production; warn about it elsewhere."""
    if settings.jwt_secret and settings.jwt_secret != env.FALLBACK_JWT_SECRET:
        return
    if settings.is_production:
        raise ConfigError("Missing required environment variable: JWT_SECRET")
    logger.warning("config_fallback_jwt_secret", app_env=settings.app_env)


def get_settings() -> Settings:
    """
    Return the current application settings, read fresh from the environment.

    Returns:
        Settings with app_env, database_url, jwt_secret, jwt_algorithm,
        jwt_expires_in_sec, api_prefix and cors_origins.
    """
    settings = Settings(
        app_env=env.get_app_env(),
        database_url=env.get_database_url(),
        jwt_secret=env.get_jwt_secret(),
        jwt_algorithm=env.get_jwt_algorithm(),
        jwt_expires_in_sec=env.get_jwt_expires_in_sec(),
        api_prefix=env.get_api_prefix(),
        cors_origins=env.get_cors_origins(),
    )
    validate_settings(settings)
    return settings
