"""
Sample App Configuration Module.

Implements the Nested Settings Pattern: each sub-module is an independent
concern with its own environment variable prefix.

Multi-Environment Support:
    Set `SAMPLE_APP_ENV` to one of: development, testing, staging, production
    Every settings class loads .env files in this order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from sample_app.config import settings

    settings.app.port           # 3000 (or $PORT)
    settings.logging.sink_names # ["stdio", "tcp"]
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .environment import get_env_files
from .logging import ColorMode, LogFormat, LoggingSettings, LogLevel


class Settings(BaseSettings):
    """Composite settings aggregating the application and logging domains."""

    model_config = SettingsConfigDict(
        env_file=get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def app(self) -> AppSettings:
        return AppSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def service_name(self) -> str:
        return self.app.name


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AppSettings",
    "LoggingSettings",
    "LogLevel",
    "LogFormat",
    "ColorMode",
]
