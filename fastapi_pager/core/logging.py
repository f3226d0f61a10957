"""Structured logging with request context.

Log records are emitted in ECS (Elastic Common Schema) format. The request
ID is kept in a ContextVar so that pager code deep inside template
rendering can include it without having the request at hand.

Usage:

    # In main.py
    from fastapi_pager.core.logging import LoggingMiddleware, configure_logging
    configure_logging(settings.log_level)
    app.add_middleware(LoggingMiddleware, app_settings=settings)

    # In modules
    logger = logging.getLogger(__name__)
    logger.info("pager_rendered", extra=get_logging_context())
"""

from __future__ import annotations

import logging
import logging.config
import uuid
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from typing import Any

from ecs_logging import StdlibFormatter
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from fastapi_pager.core.config import Settings, settings

LOGGER = logging.getLogger(__name__)

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def configure_logging(level: str) -> None:
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "ecs": {
                "()": StdlibFormatter,
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "ecs",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {
            "handlers": ["default"],
            "level": level.upper(),
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level.upper()},
            "uvicorn.error": {"handlers": ["default"], "level": level.upper()},
            "uvicorn.access": {"handlers": ["default"], "level": level.upper()},
        },
    }
    logging.config.dictConfig(logging_config)


def set_request_id(request_id: str) -> None:
    """Set request ID in context for current async task."""
    _request_id_var.set(request_id)


def get_request_id() -> str | None:
    return _request_id_var.get()


def get_logging_context() -> dict[str, str | None]:
    """Get logging context as dict for structured logging.

    Returns:
        Dict with request_id (value may be None)
    """
    return {"request_id": get_request_id()}


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log message with the request context merged into ``extra``.

    Example:
        log_with_context(
            logger,
            logging.INFO,
            "pager_not_found_translated",
            extra={"error": str(exc)},
        )
    """
    merged_extra: dict[str, Any] = dict(get_logging_context())
    if extra:
        merged_extra.update(extra)
    logger.log(level, message, extra=merged_extra)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request-scoped structured logging.

    Extracts or generates the request ID, stores it in a ContextVar,
    logs request start and completion, and echoes the ID in the
    response headers.

    Usage in main.py:
        app.add_middleware(LoggingMiddleware, app_settings=app_settings)
    """

    def __init__(self, app: ASGIApp, app_settings: Settings | None = None) -> None:
        super().__init__(app)
        self.settings = app_settings or settings

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(self.settings.request_id_header, str(uuid.uuid4()))
        set_request_id(request_id)

        if self.settings.include_request_context_in_logs:
            LOGGER.info(
                "request_started",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_host": request.client.host if request.client else None,
                },
            )

        response = await call_next(request)

        if self.settings.include_request_context_in_logs:
            route = request.scope.get("route")
            LOGGER.info(
                "request_completed",
                extra={
                    "request_id": request_id,
                    "route_name": getattr(route, "name", None),
                    "status_code": response.status_code,
                    "method": request.method,
                    "path": request.url.path,
                },
            )

        response.headers[self.settings.request_id_header] = request_id

        return response


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with module name.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
