"""
Interceptors for capturing standard library and third-party logs.
"""

import logging

from .core import AppLogger

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events into the application logger.
    This ensures uvicorn and third-party logs pass through the same sinks.
    """

    def __init__(self, logger: AppLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self._logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.name.startswith(("sample_app", "structlog")):
                return

            fields = {"logger": self._simplify_logger_name(record.name)}
            if record.exc_info:
                fields["stack"] = logging.Formatter().formatException(record.exc_info)

            self._logger.log(self._map_level(record.levelno), record.getMessage(), fields)
        except Exception:
            self.handleError(record)

    @staticmethod
    def _map_level(levelno: int) -> str:
        if levelno >= logging.ERROR:
            return "error"
        if levelno >= logging.WARNING:
            return "warn"
        return "info"

    @staticmethod
    def _simplify_logger_name(name: str) -> str:
        """
        Simplify a logger name for display.

        Rules:
        - "uvicorn.error" -> "uvicorn.error"
        - "a.b.c.d" -> "c.d"
        """
        if not name:
            return "stdlib"
        parts = name.split(".")
        if len(parts) <= 2:
            return name
        return ".".join(parts[-2:])


def install_stdlib_redirect(logger: AppLogger, level: int = logging.INFO) -> RedirectStdLibHandler:
    """Replace root handlers with a redirect into ``logger`` and detach uvicorn's own handlers."""
    handler = RedirectStdLibHandler(logger)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in UVICORN_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers = []
        lg.propagate = True

    return handler
