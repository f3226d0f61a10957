"""FastAPI application entrypoint and pager wiring.

``create_app`` builds a demo application listing items through
``setup_pager``.

Middleware executes in REVERSE order of addition, so LoggingMiddleware
(added last) sees the request first and the request stack is pushed
right before routing.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from fastapi_pagination import Page
from jinja2 import Environment, select_autoescape

from fastapi_pager.core.config import ConfigurationError, Settings, settings
from fastapi_pager.core.logging import LoggingMiddleware, configure_logging
from fastapi_pager.core.pagination import Pager, ParamsDep, configure_pagination
from fastapi_pager.core.setup import setup_pager

logger = logging.getLogger(__name__)

DEMO_ITEMS = [f"Item {number}" for number in range(1, 101)]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Validate configuration on startup (fail fast on misconfiguration)."""
    app_settings: Settings = app.state.settings
    try:
        for warning in app_settings.validate_config():
            logger.warning("Configuration warning: %s", warning)
    except ConfigurationError:
        logger.exception("Configuration validation failed")
        raise

    logger.info("Pager ready with default view %s", app_settings.pager_default_view)
    yield


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings.log_level)

    app = FastAPI(title=app_settings.app_name, lifespan=lifespan)
    app.state.settings = app_settings
    configure_pagination()

    # setup_pager adds the bundled templates, items.html included
    templates = Jinja2Templates(env=Environment(autoescape=select_autoescape(default=True)))

    @app.get("/items", response_class=HTMLResponse, name="list_items")
    async def list_items(request: Request, params: ParamsDep, view: str | None = None) -> HTMLResponse:
        items = Pager.from_params(DEMO_ITEMS, params, max_size=app_settings.pagination_page_size_max)
        return templates.TemplateResponse(request, "items.html", {"items": items, "view": view})

    @app.get("/api/items", name="api_list_items")
    async def api_list_items(params: ParamsDep) -> Page[str]:
        return Pager.from_params(DEMO_ITEMS, params, max_size=app_settings.pagination_page_size_max).page

    setup_pager(app, templates, app_settings)
    app.add_middleware(LoggingMiddleware, app_settings=app_settings)
    return app


app = create_app()
