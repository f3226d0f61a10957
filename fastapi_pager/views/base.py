"""View protocol and registry."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from fastapi_pager.core.pagination import Pager
from fastapi_pager.exceptions import ViewNotFoundError

RouteGeneratorFn = Callable[[int], str]


@runtime_checkable
class View(Protocol):
    """Renders a pager into markup.

    ``route_generator`` maps a page number to the URL of that page.
    ``options`` holds the full options given by the caller, view specific
    keys included.
    """

    def render(
        self,
        pager: Pager[Any],
        route_generator: RouteGeneratorFn,
        options: Mapping[str, Any],
    ) -> str: ...


class ViewFactory:
    """Registry of views by name."""

    def __init__(self, views: Mapping[str, View] | None = None) -> None:
        self._views: dict[str, View] = {}
        if views:
            self.add(views)

    def set(self, name: str, view: View) -> None:
        self._views[name] = view

    def add(self, views: Mapping[str, View]) -> None:
        for name, view in views.items():
            self.set(name, view)

    def has(self, name: str) -> bool:
        return name in self._views

    def get(self, name: str) -> View:
        """Return the view registered under ``name``.

        Raises:
            ViewNotFoundError: If no view has that name
        """
        try:
            return self._views[name]
        except KeyError:
            msg = f'The view "{name}" does not exist.'
            raise ViewNotFoundError(msg) from None

    def all(self) -> dict[str, View]:
        return dict(self._views)

    def remove(self, name: str) -> None:
        if name not in self._views:
            msg = f'The view "{name}" does not exist.'
            raise ViewNotFoundError(msg)
        del self._views[name]

    def clear(self) -> None:
        self._views.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._views

    def __iter__(self) -> Iterator[str]:
        return iter(self._views)
