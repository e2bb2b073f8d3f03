"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import socket

import pytest
from fastapi.testclient import TestClient

from sample_app.api import create_app
from sample_app.config import AppSettings
from sample_app.logging import AppLogger, BaseSink, ConsoleFormatter, FormattedRecord, LogRecord


class RecordingSink(BaseSink):
    """Keeps every record it receives."""

    name = "recording"

    def __init__(self) -> None:
        self.formatted: list[FormattedRecord] = []
        self.closed = False

    @property
    def records(self) -> list[LogRecord]:
        return [f.record for f in self.formatted]

    def write(self, formatted: FormattedRecord) -> None:
        self.formatted.append(formatted)

    def close(self) -> None:
        self.closed = True

    def clear(self) -> None:
        self.formatted.clear()


class FailingSink(BaseSink):
    """Raises on every write, counting the attempts."""

    name = "failing"

    def __init__(self) -> None:
        self.calls = 0

    def write(self, formatted: FormattedRecord) -> None:
        self.calls += 1
        raise ConnectionError("sink is down")

    def close(self) -> None:
        pass


def free_port() -> int:
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(autouse=True)
def reset_console_formatter(monkeypatch):
    """ConsoleFormatter is configured at class level; restore it after each test."""
    for attr in (
        "TIMESTAMP_FORMAT",
        "TIMESTAMP_WIDTH",
        "LEVEL_WIDTH",
        "SERVICE_WIDTH",
        "SEPARATOR",
        "SHOW_FIELDS",
    ):
        monkeypatch.setattr(ConsoleFormatter, attr, getattr(ConsoleFormatter, attr))


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def crash_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def app_logger(recording_sink, crash_sink) -> AppLogger:
    return AppLogger([recording_sink], service="sample-app", exception_sinks=[crash_sink])


@pytest.fixture
def app(app_logger):
    return create_app(app_logger, AppSettings())


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def sink_factory():
    """Build extra recording sinks inside a test."""
    return RecordingSink


@pytest.fixture
def unused_port() -> int:
    return free_port()
