"""Request stack and request route context.

Starlette has no notion of a "current request" outside of the endpoint
signature. ``RequestStack`` keeps the requests being handled in a
ContextVar so that template functions can reach the request that is
rendering them. ``RequestStackMiddleware`` pushes every HTTP request for
the duration of the call; a request pushed while another one is active
is a sub-request.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.routing import BaseRoute
from starlette.types import ASGIApp

from fastapi_pager.core.routing import parse_query


class RequestStack:
    """Stack of requests being handled in the current context."""

    def __init__(self, name: str = "request_stack") -> None:
        self._stack_var: ContextVar[tuple[Request, ...]] = ContextVar(name, default=())

    def push(self, request: Request) -> None:
        self._stack_var.set((*self._stack_var.get(), request))

    def pop(self) -> Request | None:
        """Remove and return the innermost request, or None if empty."""
        stack = self._stack_var.get()
        if not stack:
            return None
        self._stack_var.set(stack[:-1])
        return stack[-1]

    @contextmanager
    def scoped(self, request: Request) -> Iterator[Request]:
        """Push ``request`` for the duration of the ``with`` block."""
        self.push(request)
        try:
            yield request
        finally:
            self.pop()

    @property
    def current_request(self) -> Request | None:
        stack = self._stack_var.get()
        return stack[-1] if stack else None

    @property
    def parent_request(self) -> Request | None:
        """The request that issued the current one, None for a main request."""
        stack = self._stack_var.get()
        return stack[-2] if len(stack) > 1 else None

    @property
    def main_request(self) -> Request | None:
        stack = self._stack_var.get()
        return stack[0] if stack else None

    def __len__(self) -> int:
        return len(self._stack_var.get())


request_stack = RequestStack()


class RequestStackMiddleware(BaseHTTPMiddleware):
    """Push each HTTP request onto a request stack.

    Usage in main.py:
        from fastapi_pager.core.requests import RequestStackMiddleware
        app.add_middleware(RequestStackMiddleware)
    """

    def __init__(self, app: ASGIApp, stack: RequestStack | None = None) -> None:
        super().__init__(app)
        self.stack = stack if stack is not None else request_stack

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        self.stack.push(request)
        try:
            return await call_next(request)
        finally:
            self.stack.pop()


def get_route(request: Request) -> BaseRoute | None:
    """Route matched for ``request``, if routing has run."""
    return request.scope.get("route")


def get_route_name(request: Request) -> str | None:
    return getattr(get_route(request), "name", None)


def get_root_path(request: Request) -> str:
    """Path the application is served under.

    Mounts extend ``root_path`` with their own prefix, which is already
    part of the URLs the application router generates, so the root path
    of the outermost application is used.
    """
    return request.scope.get("app_root_path", request.scope.get("root_path", ""))


def get_route_params(request: Request) -> dict[str, Any]:
    return dict(request.scope.get("path_params", {}))


def get_query_params(request: Request) -> dict[str, Any]:
    """Query parameters of ``request``, with bracket keys nested."""
    return parse_query(request.scope.get("query_string", b"").decode("latin-1"))
