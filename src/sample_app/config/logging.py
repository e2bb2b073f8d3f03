"""
Logging Configuration.
"""

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import get_env_files


class LogLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class LoggingSettings(BaseSettings):
    """Logging pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SAMPLE_APP_LOG_",
        env_file=get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Minimum level emitted")
    sinks: str = Field(default="stdio,tcp", description="Comma-separated sink names (stdio, tcp)")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Output format of the stdio sink")
    console_fields: bool = Field(default=False, description="Show structured fields on the console")
    console_timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Console timestamp format")
    console_level_width: int = Field(default=5, description="Console level column width")
    console_service_width: int = Field(default=12, description="Console service column width")
    console_separator: str = Field(default=" | ", description="Console column separator")
    color: ColorMode = Field(default=ColorMode.AUTO, description="Console colors (auto = only on a TTY)")
    logstash_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("SAMPLE_APP_LOG_LOGSTASH_HOST", "LOGSTASH_HOST"),
        description="Host of the Logstash TCP input",
    )
    logstash_port: int = Field(
        default=5000,
        validation_alias=AliasChoices("SAMPLE_APP_LOG_LOGSTASH_PORT", "LOGSTASH_PORT"),
        description="Port of the Logstash TCP input",
    )
    connect_timeout: float = Field(default=2.0, description="Seconds to wait for the TCP connection")
    write_timeout: float = Field(default=1.0, description="Seconds a single TCP send may block")
    intercept_stdlib: bool = Field(default=True, description="Route stdlib logging through the pipeline")

    @property
    def sink_names(self) -> list[str]:
        return [s.strip().lower() for s in self.sinks.split(",") if s.strip()]
