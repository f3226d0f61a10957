"""Template functions rendering pagers.

Two functions are installed in a Jinja2 environment:

    {{ pager(items) }}
    {{ pager(items, "twitter_bootstrap5", {"omit_first_page": true}) }}
    {{ pager(items, {"route_name": "items", "page_parameter": "filter[page]"}) }}
    <link rel="next" href="{{ pager_page_url(items, items.next_page) }}">

``pager`` returns Markup so its output is not escaped again.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Request
from jinja2 import Environment
from markupsafe import Markup

from fastapi_pager.core.pagination import as_pager
from fastapi_pager.core.requests import RequestStack, request_stack
from fastapi_pager.core.route_generator import RouteGenerator, create_route_generator
from fastapi_pager.core.routing import UrlGenerator
from fastapi_pager.exceptions import OutOfRangeCurrentPageError
from fastapi_pager.views.base import ViewFactory

logger = logging.getLogger(__name__)


class PagerRenderer:
    """Renders pagers and page URLs for the current request.

    Args:
        default_view: View used when the caller names none
        view_factory: Registry of views
        url_generator: Generator for route URLs
        stack: Request stack used for route inference
    """

    def __init__(
        self,
        default_view: str,
        view_factory: ViewFactory,
        url_generator: UrlGenerator,
        stack: RequestStack | None = None,
    ) -> None:
        self.default_view = default_view
        self.view_factory = view_factory
        self.url_generator = url_generator
        self.request_stack = stack if stack is not None else request_stack

    def render_pager(
        self,
        pager: Any,
        view_name: str | Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
    ) -> Markup:
        """Render ``pager`` with a named view or the default view.

        A mapping given as ``view_name`` is used as the options.

        Raises:
            TypeError: If ``view_name`` is neither a string, a mapping nor None
            ViewNotFoundError: If the view is not registered
        """
        if isinstance(view_name, Mapping):
            view_name, options = None, view_name
        elif view_name is not None and not isinstance(view_name, str):
            msg = (
                "The view_name argument of render_pager() must be a mapping, a string, "
                f"or None; a {type(view_name).__name__} was given."
            )
            raise TypeError(msg)

        return self.render_named(pager, view_name or self.default_view, options, request=request)

    def render(
        self,
        pager: Any,
        options: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
    ) -> Markup:
        return self.render_named(pager, self.default_view, options, request=request)

    def render_named(
        self,
        pager: Any,
        view_name: str,
        options: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
    ) -> Markup:
        options = dict(options or {})
        view = self.view_factory.get(view_name)
        route_generator = self.create_route_generator(options, request=request)
        return Markup(view.render(as_pager(pager), route_generator, options))

    def get_page_url(
        self,
        pager: Any,
        page: int,
        options: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
    ) -> str:
        """URL of ``page`` of ``pager``.

        Raises:
            OutOfRangeCurrentPageError: If ``page`` is not within
                ``0..nb_pages``
        """
        nb_pages = as_pager(pager).nb_pages
        if page < 0 or page > nb_pages:
            msg = f"Page '{page}' is out of bounds"
            raise OutOfRangeCurrentPageError(msg)

        return self.create_route_generator(options, request=request)(page)

    def create_route_generator(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
    ) -> RouteGenerator:
        return create_route_generator(options, self.request_stack, self.url_generator, request=request)

    def install(self, environment: Environment) -> None:
        """Register the ``pager`` and ``pager_page_url`` template functions."""
        environment.globals["pager"] = self.render_pager
        environment.globals["pager_page_url"] = self.get_page_url
        logger.debug("pager_functions_installed", extra={"default_view": self.default_view})
