"""
Configuration management for the Backend SafeSpace service.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all service configuration.
"""

from backend_safespace.config.settings import ConfigError, Settings, get_settings  # noqa: F401

__all__ = ["ConfigError", "Settings", "get_settings"]
