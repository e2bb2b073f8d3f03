"""
Structured logging pipeline for the sample app.

Every record is rendered once per form and fanned out to all sinks:
- stdio: standard output (colored console or JSON)
- tcp: newline-delimited JSON over a persistent TCP connection (Logstash)

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson.
"""

from .core import AppLogger, ExceptionBoundary, build_logger, build_sinks
from .formatters import ConsoleFormatter, FormattedRecord, JsonFormatter
from .records import LEVELS, LogRecord, clean_text, coerce_fields, coerce_value
from .sinks import BaseSink, StdioSink, TcpSink

__all__ = [
    "AppLogger",
    "ExceptionBoundary",
    "build_logger",
    "build_sinks",
    "ConsoleFormatter",
    "FormattedRecord",
    "JsonFormatter",
    "LEVELS",
    "LogRecord",
    "clean_text",
    "coerce_fields",
    "coerce_value",
    "BaseSink",
    "StdioSink",
    "TcpSink",
]
