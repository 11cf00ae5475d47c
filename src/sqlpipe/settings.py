"""Centralized settings for sqlpipe.

All fields can be set via ``SQLPIPE_*`` environment variables (e.g.
``SQLPIPE_DEBUG=true``) or through a ``.env`` file.  The debug flag that
turns on statement diagnostics lives here; it is read once when a
:class:`~sqlpipe.statement.StatementBuilder` is constructed, never
consulted as a mutable module global.

Tags:
    sqlpipe, configuration, settings, pydantic
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SqlpipeSettings(BaseSettings):
    """sqlpipe configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SQLPIPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = Field(default=False, description="Log every built statement with its args")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///:memory:")
    dialect: str = Field(default="sqlite", description="SQL dialect statements are compiled for")
    database_pool_size: int | None = Field(default=None)
    database_max_overflow: int | None = Field(default=None)
    database_pool_timeout: int | None = Field(default=None)
    database_echo: bool = Field(default=False)


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, SqlpipeSettings] = {}


def get_settings(*, reload: bool = False) -> SqlpipeSettings:
    """Load, validate, and cache a :class:`SqlpipeSettings` instance.

    Pass ``reload=True`` to re-read the environment (tests, config reload).
    """
    if reload or "default" not in _settings_cache:
        _settings_cache["default"] = SqlpipeSettings()
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Drop the cached settings instance."""
    _settings_cache.clear()


__all__ = [
    "SqlpipeSettings",
    "get_settings",
    "clear_settings_cache",
]
