"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import socket
import sys
from abc import ABC, abstractmethod
from typing import Any, Literal

from .formatters import FormattedRecord

LogFormat = Literal["console", "json"]
ColorMode = Literal["auto", "always", "never"]


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    name: str = "sink"

    @abstractmethod
    def write(self, formatted: FormattedRecord) -> None:
        """Write one formatted record to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard output sink with configurable format.

    Args:
        fmt: Output format - "console" (colored human-readable) or "json"
        stream: Output stream (default: stdout)
        color: "auto" colors only when the stream is a TTY
    """

    name = "stdio"

    def __init__(self, fmt: LogFormat = "console", stream: Any = None, color: ColorMode = "auto"):
        self._fmt = fmt
        self._stream = stream or sys.stdout
        self._color = color

    @property
    def use_color(self) -> bool:
        if self._color == "always":
            return True
        if self._color == "never":
            return False
        return bool(getattr(self._stream, "isatty", lambda: False)())

    def write(self, formatted: FormattedRecord) -> None:
        if self._fmt == "json":
            output = formatted.json
        else:
            output = formatted.console(use_color=self.use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass


class TcpSink(BaseSink):
    """Line-delimited JSON over one persistent TCP connection (Logstash tcp input).

    The connection is opened once, here. A sink that could not connect, or whose
    connection later fails, drops every further record; there is no reconnect.
    """

    name = "tcp"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5000,
        *,
        connect_timeout: float = 2.0,
        write_timeout: float = 1.0,
    ):
        self.host = host
        self.port = port
        self.dropped = 0
        self.error: OSError | None = None
        self._sock: socket.socket | None = None
        try:
            self._sock = socket.create_connection((host, port), timeout=connect_timeout)
            self._sock.settimeout(write_timeout)
        except OSError as exc:
            self.error = exc

    @property
    def available(self) -> bool:
        return self._sock is not None

    def write(self, formatted: FormattedRecord) -> None:
        if self._sock is None:
            self.dropped += 1
            return
        try:
            self._sock.sendall(formatted.json.encode("utf-8") + b"\n")
        except OSError as exc:
            # A partial send leaves the stream mid-line, so the socket is unusable.
            self.error = exc
            self.dropped += 1
            self.close()

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
