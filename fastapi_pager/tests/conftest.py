"""Shared fixtures for pager tests.

Provides a small FastAPI application with named routes, an isolated
request stack and helpers to build requests as the router would.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from starlette.requests import Request
from starlette.routing import BaseRoute, Mount

from fastapi_pager.core.pagination import Pager
from fastapi_pager.core.requests import RequestStack
from fastapi_pager.core.routing import UrlGenerator

# Import the settings fixtures for test isolation
from fastapi_pager.tests.fixtures.settings import (  # noqa: F401
    test_settings,
    test_settings_factory,
)


@pytest.fixture
def routed_app() -> FastAPI:
    """Application with the named routes used by the URL tests.

    Routes:
        view: /view
        category_items: /categories/{category}/items
        admin:section_list: /admin/{section}/list (mounted sub-application)
    """
    app = FastAPI()

    @app.get("/view", name="view")
    async def view() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/categories/{category}/items", name="category_items")
    async def category_items(category: str) -> dict[str, str]:
        return {"category": category}

    admin = FastAPI()

    @admin.get("/{section}/list", name="section_list")
    async def section_list(section: str) -> dict[str, str]:
        return {"section": section}

    app.mount("/admin", admin, name="admin")
    return app


@pytest.fixture
def section_list_route(routed_app: FastAPI) -> BaseRoute:
    """The route of the mounted admin application."""
    mount = next(r for r in routed_app.router.routes if isinstance(r, Mount))
    return next(r for r in mount.routes if getattr(r, "name", None) == "section_list")


@pytest.fixture
def url_generator(routed_app: FastAPI) -> UrlGenerator:
    return UrlGenerator(routed_app.router)


@pytest.fixture
def stack() -> RequestStack:
    """Isolated request stack, empty at the start of each test."""
    return RequestStack(name="test_request_stack")


@pytest.fixture
def make_request(routed_app: FastAPI) -> Callable[..., Request]:
    """Factory building a request matched to a named route of ``routed_app``.

    Usage:
        request = make_request("category_items", {"category": "books"}, "sort=asc")
    """

    def _factory(
        route_name: str | None = "view",
        path_params: dict[str, Any] | None = None,
        query_string: str = "",
    ) -> Request:
        route = next(
            (r for r in routed_app.router.routes if getattr(r, "name", None) == route_name),
            None,
        )
        scope = {
            "type": "http",
            "method": "GET",
            "path": getattr(route, "path", "/"),
            "query_string": query_string.encode(),
            "headers": [],
            "app": routed_app,
            "path_params": path_params or {},
        }
        if route is not None:
            scope["route"] = route
        return Request(scope)

    return _factory


@pytest.fixture
def pager_factory() -> Callable[..., Pager[int]]:
    """Factory for pagers over ``1..nb_results``."""

    def _factory(nb_results: int = 100, page: int = 1, size: int = 10) -> Pager[int]:
        return Pager.from_sequence(list(range(1, nb_results + 1)), page=page, size=size)

    return _factory
