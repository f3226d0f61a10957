"""Page URL generation for pager links.

A route generator maps a page number to the URL of that page. It is built
once per render from the caller's options and, when no route is given,
from the route and parameters of the request being handled:

    query parameters < route path parameters < ``route_params`` option

The page number is then written at ``page_parameter`` inside a copy of
the merged parameters. ``page_parameter`` is a property path, so
``[page]`` is the top-level ``page`` key and ``filter[page]`` nests it.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from fastapi_pager.core.logging import log_with_context
from fastapi_pager.core.property_path import PropertyPath, set_value
from fastapi_pager.core.requests import (
    RequestStack,
    get_query_params,
    get_root_path,
    get_route,
    get_route_params,
)
from fastapi_pager.core.routing import UrlGenerator
from fastapi_pager.exceptions import NoCurrentRequestError, SubRequestRouteError

logger = logging.getLogger(__name__)


class RouteGeneratorOptions(BaseModel):
    """Options consumed by the route generator.

    Any other key of the view options is ignored here and left for the
    view. The camelCase spellings are accepted as aliases.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    route_name: str | None = Field(default=None, alias="routeName")
    route_params: dict[str, Any] = Field(default_factory=dict, alias="routeParams")
    page_parameter: str = Field(default="[page]", alias="pageParameter")
    omit_first_page: bool = Field(default=False, alias="omitFirstPage")

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> RouteGeneratorOptions:
        # None values fall back to the defaults, like a missing key
        return cls.model_validate({k: v for k, v in (options or {}).items() if v is not None})


class RouteGenerator:
    """Callable mapping a page number to a URL of route ``route_name``."""

    def __init__(
        self,
        url_generator: UrlGenerator,
        route_name: str,
        route_params: Mapping[str, Any],
        page_parameter: str = "[page]",
        omit_first_page: bool = False,
        root_path: str | None = None,
    ) -> None:
        self.url_generator = url_generator
        self.route_name = route_name
        self.route_params = dict(route_params)
        self.page_path = PropertyPath(page_parameter)
        self.omit_first_page = omit_first_page
        self.root_path = root_path

    def params_for(self, page: int) -> dict[str, Any]:
        params = copy.deepcopy(self.route_params)
        if self.omit_first_page:
            set_value(params, self.page_path, page if page > 1 else None)
        else:
            set_value(params, self.page_path, page)
        return params

    def __call__(self, page: int) -> str:
        return self.url_generator.generate(self.route_name, self.params_for(page), root_path=self.root_path)

    def __repr__(self) -> str:
        return f"<RouteGenerator route={self.route_name!r} page_parameter={self.page_path.path!r}>"


def create_route_generator(
    options: Mapping[str, Any] | None,
    request_stack: RequestStack,
    url_generator: UrlGenerator,
    request: Request | None = None,
) -> RouteGenerator:
    """Build the page URL function for a render call.

    Args:
        options: View options; only the route generator keys are read
        request_stack: Stack used to find the current request and to
            detect sub-requests
        url_generator: Generator for route URLs
        request: Request to infer the route from instead of the current
            request of the stack

    Raises:
        NoCurrentRequestError: If the route must be inferred and there is
            no request
        SubRequestRouteError: If the route must be inferred during a
            sub-request
    """
    resolved = RouteGeneratorOptions.from_options(options)
    route_name = resolved.route_name
    route_params = resolved.route_params
    current = request if request is not None else request_stack.current_request

    if route_name is None:
        if current is None:
            msg = "There is no current request to infer the pager route from"
            raise NoCurrentRequestError(msg)

        if request_stack.parent_request is not None:
            msg = "The pager route cannot be inferred in a sub-request; pass route_name explicitly"
            raise SubRequestRouteError(msg)

        route = get_route(current)
        route_name = url_generator.name_for(route) if route is not None else None
        route_params = {
            **get_query_params(current),
            **get_route_params(current),
            **resolved.route_params,
        }
        log_with_context(
            logger,
            logging.DEBUG,
            "pager_route_inferred",
            extra={"route_name": route_name, "route_params": sorted(route_params)},
        )

    return RouteGenerator(
        url_generator,
        route_name,  # type: ignore[arg-type]
        route_params,
        page_parameter=resolved.page_parameter,
        omit_first_page=resolved.omit_first_page,
        root_path=(get_root_path(current) or None) if current is not None else None,
    )
