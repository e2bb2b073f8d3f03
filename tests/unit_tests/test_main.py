from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sample_app import main as entry
from sample_app.config import Settings


@pytest.fixture
def fresh_settings(monkeypatch):
    monkeypatch.setenv("SAMPLE_APP_LOG_SINKS", "stdio")
    monkeypatch.setenv("SAMPLE_APP_LOG_INTERCEPT_STDLIB", "false")
    monkeypatch.setenv("PORT", "3999")

    def install():
        monkeypatch.setattr(entry, "settings", Settings())

    return install


class TestMain:
    def test_runs_uvicorn_with_configured_app(self, monkeypatch, fresh_settings):
        fresh_settings()
        run = MagicMock()
        monkeypatch.setattr(entry.uvicorn, "run", run)

        entry.main()

        run.assert_called_once()
        app = run.call_args.args[0]
        kwargs = run.call_args.kwargs
        assert kwargs["port"] == 3999
        assert kwargs["log_config"] is None
        assert kwargs["access_log"] is False
        assert app.state.logger.service == "sample-app"

    def test_server_crash_is_logged_then_exits(self, monkeypatch, fresh_settings, capsys):
        fresh_settings()
        monkeypatch.setattr(entry.uvicorn, "run", MagicMock(side_effect=RuntimeError("address in use")))

        with pytest.raises(SystemExit) as excinfo:
            entry.main()

        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert "Uncaught exception: address in use" in out
        assert "RuntimeError: address in use" in out

    def test_invalid_settings_are_logged_then_exit(self, monkeypatch, fresh_settings, capsys):
        monkeypatch.setenv("LOGSTASH_PORT", "not-a-port")
        fresh_settings()
        run = MagicMock()
        monkeypatch.setattr(entry.uvicorn, "run", run)

        with pytest.raises(SystemExit):
            entry.main()

        run.assert_not_called()
        assert "Uncaught exception" in capsys.readouterr().out
