"""Jinja2 template based pager views.

The view computes which links to draw and hands a flat list of links to a
template. With the default proximity of 2, page 1 of 10 renders as:

    [Previous] 1 2 3 4 5 ... 10 [Next]

When the window starts at page 3 (or ends two pages before the last),
page 2 (or the page before the last) is linked instead of a separator
since the separator would hide a single page.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from fastapi_pager.core.pagination import Pager
from fastapi_pager.views.base import RouteGeneratorFn, ViewFactory

LOGGER = logging.getLogger(__name__)

DEFAULT_PROXIMITY = 2

_environment: Environment | None = None


def get_environment() -> Environment:
    """Jinja2 environment loading the bundled pager templates."""
    global _environment  # noqa: PLW0603
    if _environment is None:
        _environment = Environment(
            loader=PackageLoader("fastapi_pager", "templates"),
            autoescape=select_autoescape(default=True),
        )
    return _environment


@dataclass(frozen=True)
class PageLink:
    """One element of a rendered pager.

    ``kind`` is one of ``previous``, ``next``, ``page``, ``current`` or
    ``dots``. Disabled previous/next links have no URL.
    """

    kind: str
    page: int | None = None
    url: str | None = None
    disabled: bool = False


def page_window(current_page: int, nb_pages: int, proximity: int = DEFAULT_PROXIMITY) -> tuple[int, int]:
    """First and last page linked around ``current_page``.

    The window keeps ``2 * proximity + 1`` pages when the listing has that
    many, shifting away from the edges instead of shrinking.
    """
    start = current_page - proximity
    end = current_page + proximity

    if start < 1:
        end = min(end + (1 - start), nb_pages)
        start = 1

    if end > nb_pages:
        start = max(start - (end - nb_pages), 1)
        end = nb_pages

    return start, end


def build_links(pager: Pager[Any], route_generator: RouteGeneratorFn, proximity: int = DEFAULT_PROXIMITY) -> list[PageLink]:
    current = pager.current_page
    nb_pages = pager.nb_pages
    start, end = page_window(current, nb_pages, proximity)

    def page(number: int) -> PageLink:
        if number == current:
            return PageLink("current", number)
        return PageLink("page", number, route_generator(number))

    links: list[PageLink] = []

    if pager.has_previous_page:
        previous = pager.previous_page
        links.append(PageLink("previous", previous, route_generator(previous)))
    else:
        links.append(PageLink("previous", disabled=True))

    if start > 1:
        links.append(page(1))
        if start == 3:
            links.append(page(2))
        elif start != 2:
            links.append(PageLink("dots"))

    links.extend(page(number) for number in range(start, end + 1))

    if end < nb_pages:
        if end == nb_pages - 2:
            links.append(page(nb_pages - 1))
        elif end != nb_pages - 1:
            links.append(PageLink("dots"))
        links.append(page(nb_pages))

    if pager.has_next_page:
        following = pager.next_page
        links.append(PageLink("next", following, route_generator(following)))
    else:
        links.append(PageLink("next", disabled=True))

    return links


class TemplateView:
    """Pager view rendering a Jinja2 template.

    Args:
        template: Template name, overridable per call with the
            ``template`` option
        defaults: Default labels and CSS classes, overridable per call
        environment: Environment to load the template from, the bundled
            templates by default
    """

    def __init__(
        self,
        template: str,
        defaults: Mapping[str, Any] | None = None,
        environment: Environment | None = None,
    ) -> None:
        self.template = template
        self.defaults = dict(defaults or {})
        self.environment = environment

    def render(
        self,
        pager: Pager[Any],
        route_generator: RouteGeneratorFn,
        options: Mapping[str, Any],
    ) -> str:
        view_options = {**self.defaults, **options}
        proximity = int(view_options.get("proximity", DEFAULT_PROXIMITY))
        template_name = view_options.get("template") or self.template

        environment = self.environment or get_environment()
        template = environment.get_template(template_name)

        LOGGER.debug(
            "pager_view_rendering",
            extra={"template": template_name, "page": pager.current_page, "nb_pages": pager.nb_pages},
        )
        return template.render(
            pager=pager,
            links=build_links(pager, route_generator, proximity),
            options=view_options,
        )


DEFAULT_VIEW_OPTIONS: dict[str, Any] = {
    "prev_message": "Previous",
    "next_message": "Next",
    "dots_message": "&hellip;",
    "css_container_class": "pagination",
    "css_prev_class": "prev",
    "css_next_class": "next",
    "css_disabled_class": "disabled",
    "css_dots_class": "dots",
    "css_current_class": "current",
}

TWITTER_BOOTSTRAP_OPTIONS: dict[str, Any] = {
    "prev_message": "&larr; Previous",
    "next_message": "Next &rarr;",
    "dots_message": "&hellip;",
    "css_container_class": "pagination",
    "css_prev_class": "prev",
    "css_next_class": "next",
    "css_disabled_class": "disabled",
    "css_dots_class": "disabled",
    "css_active_class": "active",
}

TWITTER_BOOTSTRAP4_OPTIONS: dict[str, Any] = {
    **TWITTER_BOOTSTRAP_OPTIONS,
    "prev_message": "Previous",
    "next_message": "Next",
    "css_prev_class": "",
    "css_next_class": "",
}

SEMANTIC_UI_OPTIONS: dict[str, Any] = {
    "prev_message": "&larr; Previous",
    "next_message": "Next &rarr;",
    "dots_message": "&hellip;",
    "css_container_class": "ui pagination menu",
    "css_prev_class": "prev",
    "css_next_class": "next",
    "css_disabled_class": "disabled",
    "css_dots_class": "disabled",
    "css_active_class": "active",
}


def create_view_factory(
    environment: Environment | None = None,
    default_template: str = "pager/default.html",
) -> ViewFactory:
    """Registry holding the bundled views.

    ``environment`` is only used by the generic ``template`` view, which
    renders ``default_template`` (or the ``template`` option) from it so
    applications can ship their own pager templates.
    """
    bootstrap = TemplateView("pager/twitter_bootstrap.html", TWITTER_BOOTSTRAP_OPTIONS)
    return ViewFactory(
        {
            "default": TemplateView("pager/default.html", DEFAULT_VIEW_OPTIONS),
            "twitter_bootstrap": bootstrap,
            "twitter_bootstrap3": bootstrap,
            "twitter_bootstrap4": TemplateView("pager/twitter_bootstrap4.html", TWITTER_BOOTSTRAP4_OPTIONS),
            "twitter_bootstrap5": TemplateView("pager/twitter_bootstrap5.html", TWITTER_BOOTSTRAP4_OPTIONS),
            "semantic_ui": TemplateView("pager/semantic_ui.html", SEMANTIC_UI_OPTIONS),
            "template": TemplateView(default_template, DEFAULT_VIEW_OPTIONS, environment),
        }
    )
