"""
HTTP surface of the sample app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from sample_app.config import AppSettings
from sample_app.logging import AppLogger

from .middleware import RequestLoggingMiddleware
from .routes import router


def create_app(logger: AppLogger, app_settings: AppSettings | None = None) -> FastAPI:
    """Build the FastAPI app around an explicitly constructed logger."""
    app_settings = app_settings or AppSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Sample application started on port {app_settings.port}")
        yield

    app = FastAPI(title=app_settings.name, lifespan=lifespan)
    app.state.logger = logger
    app.add_middleware(RequestLoggingMiddleware, logger=logger)
    app.include_router(router)
    return app


__all__ = ["create_app"]
