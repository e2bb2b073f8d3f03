"""
Application Configuration.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import get_env_files


class AppSettings(BaseSettings):
    """Basic application metadata and HTTP listener."""

    model_config = SettingsConfigDict(
        env_prefix="SAMPLE_APP_APP_",
        env_file=get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = "sample-app"
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("SAMPLE_APP_APP_PORT", "PORT"),
        description="HTTP listen port",
    )
