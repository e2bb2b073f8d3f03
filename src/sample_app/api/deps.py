from __future__ import annotations

from starlette.requests import Request

from sample_app.logging import AppLogger


def get_app_logger(request: Request) -> AppLogger:
    return request.app.state.logger
