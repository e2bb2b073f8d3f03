"""
Record formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import cached_property
from typing import Any

import orjson

from .records import LogRecord, clean_text, coerce_value

# =============================================================================
# JSON Serialization
# =============================================================================


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


class JsonFormatter:
    """Machine-readable, line-delimited JSON rendering (network sinks)."""

    @staticmethod
    def format(record: LogRecord) -> str:
        payload = record.to_dict()
        try:
            return orjson_dumps(payload, default=coerce_value)
        except (orjson.JSONEncodeError, TypeError):
            return orjson_dumps({clean_text(str(k)): coerce_value(v) for k, v in payload.items()})


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "info": "\033[32m",
    "warn": "\033[33m",
    "error": "\033[31m",
    "timestamp": "\033[90m",
    "service": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Handles human-readable console rendering (fixed width, right-aligned)."""

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 5
    SERVICE_WIDTH = 12
    SEPARATOR = " | "
    SHOW_FIELDS = False

    # Printed below the record line instead of inline.
    MULTILINE_KEYS = ("stack",)

    @classmethod
    def configure(
        cls,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        service_width: int | None = None,
        separator: str | None = None,
        show_fields: bool | None = None,
    ) -> None:
        """Configure alignment and rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format
            cls.TIMESTAMP_WIDTH = len(datetime.now().strftime(timestamp_format))
        if level_width:
            cls.LEVEL_WIDTH = level_width
        if service_width:
            cls.SERVICE_WIDTH = service_width
        if separator is not None:
            cls.SEPARATOR = separator
        if show_fields is not None:
            cls.SHOW_FIELDS = show_fields

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _format_timestamp(cls, raw_timestamp: str) -> str:
        try:
            dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)
        except (ValueError, TypeError):
            return raw_timestamp

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, record: LogRecord, *, use_color: bool = True) -> str:
        """Format a record into an aligned line."""
        message_text = record.message.replace("\n", " ")

        if cls.SHOW_FIELDS:
            extras = [
                f"{cls._maybe_color(k, 'key', use_color)}={cls._maybe_color(str(v), 'dim', use_color)}"
                for k, v in record.fields.items()
                if k not in cls.MULTILINE_KEYS
            ]
            if extras:
                message_text = f"{message_text} " + " ".join(extras)

        line = "".join(
            [
                cls._maybe_color(
                    cls._fit_right(cls._format_timestamp(record.timestamp), cls.TIMESTAMP_WIDTH),
                    "timestamp",
                    use_color,
                ),
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(record.level.upper(), cls.LEVEL_WIDTH), record.level, use_color),
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(record.service, cls.SERVICE_WIDTH), "service", use_color),
                cls.SEPARATOR,
                message_text,
            ]
        )

        for key in cls.MULTILINE_KEYS:
            value = record.fields.get(key)
            if value:
                line += "\n" + str(value).rstrip("\n")
        return line


# =============================================================================
# Formatted Record (what sinks receive)
# =============================================================================


class FormattedRecord:
    """A record plus its lazily rendered, cached forms.

    Every sink receiving the same record shares one instance, so each form is
    rendered at most once per emission.
    """

    def __init__(self, record: LogRecord):
        self.record = record
        self._console: dict[bool, str] = {}

    @cached_property
    def json(self) -> str:
        return JsonFormatter.format(self.record)

    def console(self, *, use_color: bool = True) -> str:
        if use_color not in self._console:
            self._console[use_color] = ConsoleFormatter.format(self.record, use_color=use_color)
        return self._console[use_color]
