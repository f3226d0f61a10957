"""Translation of pagination errors into 404 responses.

An invalid page size (or, optionally, an invalid current page) in a
request is the client asking for a page that does not exist. The
handlers replace the pagination error with an ``HTTPException(404)``
whose ``__cause__`` is the original error, then hand it to the
application's HTTPException handler so the response looks like every
other not found response of the application.

FastAPI picks the handler of the most specific class in the exception
MRO, so these handlers take precedence over a catch-all ``Exception``
handler while leaving other errors to it.
"""

from __future__ import annotations

import inspect
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import http_exception_handler
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from fastapi_pager.core.config import Settings
from fastapi_pager.core.config import settings as default_settings
from fastapi_pager.core.logging import log_with_context
from fastapi_pager.exceptions import NotValidCurrentPageError, NotValidMaxPerPageError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Page Not Found"


def translate_exception(exc: BaseException) -> BaseException:
    """Return the exception to report in place of ``exc``.

    A ``NotValidMaxPerPageError`` becomes a 404 ``HTTPException`` chained
    to it. Any other exception is returned unchanged.
    """
    if isinstance(exc, NotValidMaxPerPageError):
        return _not_found(exc)
    return exc


def _not_found(exc: BaseException) -> HTTPException:
    not_found = HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    not_found.__cause__ = exc
    return not_found


async def _respond_not_found(request: Request, not_found: HTTPException) -> Response:
    log_with_context(
        logger,
        logging.INFO,
        "pager_not_found_translated",
        extra={
            "path": request.url.path,
            "error_type": type(not_found.__cause__).__name__,
            "error": str(not_found.__cause__),
        },
    )
    handlers = request.app.exception_handlers
    handler = next(
        (handlers[cls] for cls in type(not_found).__mro__ if cls in handlers),
        http_exception_handler,
    )
    if inspect.iscoroutinefunction(handler):
        return await handler(request, not_found)
    return await run_in_threadpool(handler, request, not_found)


async def not_valid_max_per_page_handler(
    request: Request,
    exc: Exception,
) -> Response:
    """Handle an invalid page size as 404 Not Found."""
    return await _respond_not_found(request, translate_exception(exc))  # type: ignore[arg-type]


async def not_valid_current_page_handler(
    request: Request,
    exc: Exception,
) -> Response:
    """Handle a page below 1 or past the last page as 404 Not Found."""
    return await _respond_not_found(request, _not_found(exc))


def register_exception_handlers(app: FastAPI, settings: Settings | None = None) -> None:
    """Install the handlers whose strategy is ``to_http_not_found``.

    With the ``custom`` strategy the error is left to the application's
    own handlers.
    """
    settings = settings or default_settings

    if settings.pager_not_valid_max_per_page_strategy == "to_http_not_found":
        app.add_exception_handler(NotValidMaxPerPageError, not_valid_max_per_page_handler)
    if settings.pager_not_valid_current_page_strategy == "to_http_not_found":
        app.add_exception_handler(NotValidCurrentPageError, not_valid_current_page_handler)
