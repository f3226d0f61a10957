"""Pager rendering for FastAPI and Jinja2 templates.

Examples:
    from fastapi_pager import Pager, setup_pager

    renderer = setup_pager(app, templates)

    @app.get("/items", name="list_items")
    async def list_items(request: Request, params: ParamsDep):
        items = Pager.from_params(ITEMS, params)
        return templates.TemplateResponse(request, "items.html", {"items": items})

    # items.html
    {{ pager(items, "twitter_bootstrap5") }}
"""

from fastapi_pager.core.pagination import DefaultParams, Pager, ParamsDep, as_pager
from fastapi_pager.core.renderer import PagerRenderer
from fastapi_pager.core.requests import RequestStack, RequestStackMiddleware, request_stack
from fastapi_pager.core.route_generator import RouteGenerator, create_route_generator
from fastapi_pager.core.routing import UrlGenerator
from fastapi_pager.exceptions import (
    LessThan1CurrentPageError,
    LessThan1MaxPerPageError,
    NoCurrentRequestError,
    NotValidCurrentPageError,
    NotValidMaxPerPageError,
    OutOfRangeCurrentPageError,
    PagerError,
    SubRequestRouteError,
    ViewNotFoundError,
)
from fastapi_pager.core.setup import setup_pager

__all__ = [
    # Pagination
    "Pager",
    "DefaultParams",
    "ParamsDep",
    "as_pager",
    # Rendering
    "PagerRenderer",
    "RouteGenerator",
    "create_route_generator",
    "UrlGenerator",
    "RequestStack",
    "RequestStackMiddleware",
    "request_stack",
    "setup_pager",
    # Exceptions
    "PagerError",
    "NotValidMaxPerPageError",
    "LessThan1MaxPerPageError",
    "NotValidCurrentPageError",
    "LessThan1CurrentPageError",
    "OutOfRangeCurrentPageError",
    "ViewNotFoundError",
    "NoCurrentRequestError",
    "SubRequestRouteError",
]
