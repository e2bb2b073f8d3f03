"""
Process entry point: settings -> logger -> app -> uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from sample_app.api import create_app
from sample_app.config import settings
from sample_app.logging import AppLogger, ExceptionBoundary, build_logger
from sample_app.logging.interceptors import install_stdlib_redirect


def main() -> None:
    # Console-only until the configured logger exists, so settings errors are still reported.
    with ExceptionBoundary(AppLogger(service="sample-app")) as boundary:
        logger = build_logger(settings.logging, service=settings.service_name)
        boundary.logger = logger
        try:
            if settings.logging.intercept_stdlib:
                install_stdlib_redirect(logger, logging.INFO)

            app = create_app(logger, settings.app)
            uvicorn.run(
                app,
                host=settings.app.host,
                port=settings.app.port,
                log_config=None,
                access_log=False,
            )
        finally:
            logger.close()


if __name__ == "__main__":
    main()
