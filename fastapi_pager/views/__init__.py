"""Pager views.

Examples:
    from fastapi_pager.views import create_view_factory

    views = create_view_factory()
    html = views.get("twitter_bootstrap5").render(pager, route_generator, {})
"""

from fastapi_pager.views.base import View, ViewFactory
from fastapi_pager.views.template import (
    PageLink,
    TemplateView,
    build_links,
    create_view_factory,
    page_window,
)

__all__ = [
    "View",
    "ViewFactory",
    "TemplateView",
    "PageLink",
    "build_links",
    "page_window",
    "create_view_factory",
]
