from __future__ import annotations

import time

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from sample_app.logging import AppLogger


def _request_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class RequestLoggingMiddleware:
    """Emit exactly one info record per request, whatever the outcome.

    Plain ASGI rather than ``BaseHTTPMiddleware`` so the record is written after
    the last body chunk, not when the headers go out. The status is the one sent
    to the client; a handler exception before any response is recorded as 500
    and re-raised so the framework still produces its error response.
    """

    def __init__(self, app: ASGIApp, logger: AppLogger):
        self.app = app
        self._logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self._log(Request(scope), status_code, start)

    def _log(self, request: Request, status_code: int, start: float) -> None:
        duration = round(max(0.0, (time.perf_counter() - start) * 1000), 3)
        url = _request_url(request)
        self._logger.info(
            f"{request.method} {url} {status_code}",
            type="request",
            method=request.method,
            url=url,
            status=status_code,
            duration=duration,
            ip=request.client.host if request.client else "unknown",
            userAgent=request.headers.get("user-agent", ""),
        )
