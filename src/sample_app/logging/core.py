"""
Core logger: structlog processor chain and multi-sink dispatch.
"""

from __future__ import annotations

import logging
import sys
import threading
import traceback
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

import structlog
from structlog.typing import EventDict, WrappedLogger

from .formatters import ConsoleFormatter, FormattedRecord
from .records import LogRecord, coerce_fields, coerce_value
from .sinks import BaseSink, StdioSink, TcpSink

if TYPE_CHECKING:
    from sample_app.config import LoggingSettings

_LEVEL_NUMBERS = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# structlog method name -> record level
_METHOD_LEVELS = {
    "info": "info",
    "warn": "warn",
    "warning": "warn",
    "error": "error",
    "exception": "error",
    "critical": "error",
}


# =============================================================================
# Structlog Processors
# =============================================================================


def add_log_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Name the level the way the collector expects (info, warn, error)."""
    event_dict["level"] = _METHOD_LEVELS.get(method_name, "info")
    return event_dict


class MonotonicTimestamper:
    """Add an ISO 8601 UTC timestamp that strictly increases per logger."""

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        now = datetime.now(timezone.utc)
        with self._lock:
            if self._last is not None and now <= self._last:
                now = self._last + timedelta(microseconds=1)
            self._last = now
        event_dict["timestamp"] = now.isoformat(timespec="microseconds").replace("+00:00", "Z")
        return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message' for Logstash/Kibana compatibility."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class MultiSinkRenderer:
    """Render one event to every sink. Returns empty to suppress default output."""

    def __init__(self, sinks: Sequence[BaseSink], on_failure: Callable[[BaseSink, Exception], None]):
        self.sinks = sinks
        self._on_failure = on_failure

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        fields = dict(event_dict.get("fields") or {})
        fields.update(
            coerce_fields(
                {k: v for k, v in event_dict.items() if k not in {"timestamp", "level", "message", "service", "fields"}}
            )
        )
        record = LogRecord(
            timestamp=event_dict["timestamp"],
            level=event_dict["level"],
            message=str(coerce_value(event_dict.get("message", ""))),
            service=str(event_dict.get("service", "")),
            fields=fields,
        )
        formatted = FormattedRecord(record)
        for sink in self.sinks:
            try:
                sink.write(formatted)
            except Exception as exc:
                self._on_failure(sink, exc)
        return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


# =============================================================================
# Logger
# =============================================================================


class AppLogger:
    """Fan-out logger owning an ordered list of sinks.

    ``info``/``warn``/``error`` never raise: each sink write is isolated, and a
    failing sink is reported once on stderr and otherwise ignored.

    ``log_uncaught`` is the last-resort path for an exception that reached the
    process entry point; it writes to ``exception_sinks`` (the console) only.
    """

    def __init__(
        self,
        sinks: Sequence[BaseSink] | None = None,
        *,
        service: str = "sample-app",
        level: str = "info",
        exception_sinks: Sequence[BaseSink] | None = None,
    ):
        self.service = service
        self.sinks: list[BaseSink] = list(sinks or [])
        self.exception_sinks: list[BaseSink] = (
            list(exception_sinks) if exception_sinks is not None else [StdioSink(fmt="console")]
        )
        self._reported: set[int] = set()
        timestamper = MonotonicTimestamper()
        self._bound = self._make_bound(self.sinks, level, timestamper)
        self._crash_bound = self._make_bound(self.exception_sinks, "info", timestamper)

    def _make_bound(self, sinks: Sequence[BaseSink], level: str, timestamper: MonotonicTimestamper) -> Any:
        return structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=[
                add_log_level,
                timestamper,
                rename_event_key,
                MultiSinkRenderer(sinks, self._report_sink_failure),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(_LEVEL_NUMBERS.get(level, logging.INFO)),
            context_class=dict,
            cache_logger_on_first_use=True,
            service=self.service,
        )

    def _report_sink_failure(self, sink: BaseSink, exc: Exception) -> None:
        self._report(id(sink), f"log sink {sink.name!r}", exc)

    def _report(self, key: int, what: str, exc: Exception) -> None:
        # Noted once per source on stderr, never raised.
        if key in self._reported:
            return
        self._reported.add(key)
        try:
            print(f"[{self.service}] {what} failed, ignoring: {exc!r}", file=sys.stderr)
        except Exception:
            pass

    def _emit(self, method: Callable[..., Any], message: Any, fields: Mapping[str, Any] | None, kw: dict) -> None:
        merged = dict(fields or {})
        merged.update(kw)
        try:
            method(str(coerce_value(message)), fields=coerce_fields(merged))
        except Exception as exc:
            self._report(id(self), "log pipeline", exc)

    def info(self, message: Any, fields: Mapping[str, Any] | None = None, **kw: Any) -> None:
        self._emit(self._bound.info, message, fields, kw)

    def warn(self, message: Any, fields: Mapping[str, Any] | None = None, **kw: Any) -> None:
        self._emit(self._bound.warning, message, fields, kw)

    def error(self, message: Any, fields: Mapping[str, Any] | None = None, **kw: Any) -> None:
        self._emit(self._bound.error, message, fields, kw)

    def log(self, level: str, message: Any, fields: Mapping[str, Any] | None = None, **kw: Any) -> None:
        """Emit at a level given by name (info, warn, error)."""
        getattr(self, level if level in _LEVEL_NUMBERS else "info")(message, fields, **kw)

    def log_uncaught(self, exc: BaseException) -> None:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self._emit(
            self._crash_bound.error,
            f"Uncaught exception: {exc}",
            {"error": str(exc), "type": type(exc).__name__, "stack": stack},
            {},
        )

    def close(self) -> None:
        for sink in [*self.sinks, *self.exception_sinks]:
            sink.close()


class ExceptionBoundary:
    """Top-level boundary for the process entry point.

    Logs an unhandled ``Exception`` once through ``logger.log_uncaught`` and
    turns it into ``SystemExit(exit_code)``. The logger may be swapped while
    inside the boundary, once a fully configured one exists.
    """

    def __init__(self, logger: AppLogger, *, exit_code: int = 1):
        self.logger = logger
        self.exit_code = exit_code

    def __enter__(self) -> "ExceptionBoundary":
        return self

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False
        self.logger.log_uncaught(exc)
        raise SystemExit(self.exit_code) from exc


# =============================================================================
# Configuration Logic
# =============================================================================


def build_sinks(config: LoggingSettings) -> list[BaseSink]:
    """Create the sinks named in ``config.sinks``, in order. Unknown names are ignored."""
    sinks: list[BaseSink] = []
    for name in config.sink_names:
        if name == "stdio":
            sinks.append(StdioSink(fmt=config.format.value, stream=sys.stdout, color=config.color.value))
        elif name == "tcp":
            sinks.append(
                TcpSink(
                    config.logstash_host,
                    config.logstash_port,
                    connect_timeout=config.connect_timeout,
                    write_timeout=config.write_timeout,
                )
            )
    return sinks


def build_logger(config: LoggingSettings, *, service: str) -> AppLogger:
    """Build the process logger from settings."""
    ConsoleFormatter.configure(
        timestamp_format=config.console_timestamp_format,
        level_width=config.console_level_width,
        service_width=config.console_service_width,
        separator=config.console_separator,
        show_fields=config.console_fields,
    )

    sinks = build_sinks(config)
    logger = AppLogger(
        sinks,
        service=service,
        level=config.level.value,
        exception_sinks=[StdioSink(fmt="console", stream=sys.stdout, color=config.color.value)],
    )

    for sink in sinks:
        if isinstance(sink, TcpSink) and not sink.available:
            logger.warn(
                "Logstash connection unavailable, network log records will be dropped",
                host=sink.host,
                port=sink.port,
                error=str(sink.error),
            )
    return logger
