"""Wiring of pager rendering into an application.

``setup_pager`` is what an application needs to render pagers in its
templates:

    templates = Jinja2Templates(directory="templates")
    setup_pager(app, templates)

It installs the request stack middleware, the 404 translation of invalid
page sizes and the ``pager``/``pager_page_url`` template functions.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates
from jinja2 import ChoiceLoader, PackageLoader

from fastapi_pager.core.config import Settings, settings
from fastapi_pager.core.exception_handlers import register_exception_handlers
from fastapi_pager.core.renderer import PagerRenderer
from fastapi_pager.core.requests import RequestStack, RequestStackMiddleware, request_stack
from fastapi_pager.core.routing import UrlGenerator
from fastapi_pager.views import create_view_factory


def setup_pager(
    app: FastAPI,
    templates: Jinja2Templates,
    app_settings: Settings | None = None,
    stack: RequestStack | None = None,
) -> PagerRenderer:
    """Wire pager rendering into ``app`` and ``templates``.

    The bundled pager templates are appended to the template loader so
    application templates can include or override them.

    Returns:
        The renderer, also stored as ``app.state.pager_renderer``
    """
    app_settings = app_settings or settings
    stack = stack if stack is not None else request_stack

    environment = templates.env
    bundled = PackageLoader("fastapi_pager", "templates")
    environment.loader = ChoiceLoader([environment.loader, bundled]) if environment.loader else bundled

    app.add_middleware(RequestStackMiddleware, stack=stack)
    register_exception_handlers(app, app_settings)

    renderer = PagerRenderer(
        app_settings.pager_default_view,
        create_view_factory(environment, app_settings.pager_default_template),
        UrlGenerator(app.router),
        stack,
    )
    renderer.install(environment)
    app.state.pager_renderer = renderer
    return renderer
