"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, and a cached ``get_settings()`` accessor.

IMPORTANT: This module has ZERO imports from the ``campaign_billing`` package
to prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

import sys
from functools import lru_cache

import structlog
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file.

    ``SecretStr`` fields prevent accidental leaks in logs or error output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False

    # -- HTTP API --------------------------------------------------------------
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # -- Pricing ---------------------------------------------------------------
    # Empty means the first registered model
    default_model_id: str = ""

    # -- Observability ---------------------------------------------------------
    sentry_dsn: SecretStr = SecretStr("")


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    The ``@lru_cache`` decorator ensures environment variables are parsed
    exactly once.  Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Log only the structured errors list -- never the full exception
        # which may contain raw SecretStr values.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)
