"""URL generation through the Starlette router.

Starlette's ``url_path_for`` only substitutes path parameters and rejects
anything else. ``UrlGenerator`` splits a flat parameter mapping into the
route's path parameters and extra parameters, and appends the extras as
a query string. Nested values use bracket keys (``filter[page]=2``) and
``None`` values are dropped at every level, so a parameter can be
removed from a URL by setting it to ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode

from starlette.routing import BaseRoute, Mount, NoMatchFound, Router

LOGGER = logging.getLogger(__name__)


def _flatten(value: Any, prefix: str) -> Iterator[tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield from _flatten(item, f"{prefix}[{key}]")
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        for index, item in enumerate(value):
            yield from _flatten(item, f"{prefix}[{index}]")
    elif isinstance(value, bool):
        yield prefix, "1" if value else "0"
    else:
        yield prefix, str(value)


def build_query(params: Mapping[str, Any]) -> str:
    """Encode nested parameters as a query string.

    Examples:
        >>> build_query({"page": 2, "filter": {"q": "a b", "tag": None}})
        'page=2&filter%5Bq%5D=a+b'
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        pairs.extend(_flatten(value, str(key)))
    return urlencode(pairs)


def _split_key(key: str) -> list[str]:
    if "[" not in key or key.startswith("["):
        return [key]
    head, _, tail = key.partition("[")
    parts = [head]
    while tail:
        inner, closed, rest = tail.partition("]")
        if not closed:
            # Unbalanced brackets are kept verbatim as part of the last key
            parts[-1] = f"{parts[-1]}[{tail}"
            break
        parts.append(inner)
        if not rest.startswith("["):
            break
        tail = rest[1:]
    return parts


def parse_query(query_string: str) -> dict[str, Any]:
    """Decode a query string into nested parameters.

    Bracket keys build nested dicts and an empty bracket (``tags[]``)
    appends to a list.

    Examples:
        >>> parse_query("page=2&filter[q]=a&tags[]=x&tags[]=y")
        {'page': '2', 'filter': {'q': 'a'}, 'tags': ['x', 'y']}
    """
    result: dict[str, Any] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        parts = _split_key(key)
        container: Any = result
        for position, part in enumerate(parts):
            last = position == len(parts) - 1
            if isinstance(container, list):
                if last:
                    container.append(value)
                    break
                container.append({})
                container = container[-1]
                continue
            if last:
                container[part] = value
                break
            next_is_list = parts[position + 1] == ""
            child = container.get(part)
            if next_is_list and not isinstance(child, list):
                child = container[part] = []
            elif not next_is_list and not isinstance(child, dict):
                child = container[part] = {}
            container = child
    return result


def route_param_names(routes: Sequence[BaseRoute], name: str) -> set[str] | None:
    """Return the path parameter names of the route called ``name``.

    Parameters of enclosing mounts are included. Returns None when no
    route has that name.
    """
    for route in routes:
        if isinstance(route, Mount):
            if route.name is not None:
                if not name.startswith(f"{route.name}:"):
                    continue
                child_name = name[len(route.name) + 1 :]
            else:
                child_name = name
            found = route_param_names(route.routes, child_name)
            if found is not None:
                return found | (set(route.param_convertors) - {"path"})
        elif getattr(route, "name", None) == name and hasattr(route, "param_convertors"):
            return set(route.param_convertors)
    return None


def qualified_route_name(routes: Sequence[BaseRoute], target: BaseRoute) -> str | None:
    """Name under which ``target`` is reachable from ``routes``.

    Routes of mounted applications are prefixed with the names of their
    mounts (``admin:section_list``). Returns None when ``target`` is not
    in the tree.
    """
    for route in routes:
        if route is target:
            return getattr(route, "name", None)
        if isinstance(route, Mount):
            found = qualified_route_name(route.routes, target)
            if found is not None:
                return f"{route.name}:{found}" if route.name else found
    return None


class UrlGenerator:
    """Generates URLs for named routes.

    Args:
        router: The application router (``app.router``)
        root_path: Prefix prepended to every generated path, for
            applications served below a sub path. A root path given to
            ``generate`` takes its place.
    """

    def __init__(self, router: Router, root_path: str = "") -> None:
        self.router = router
        self.root_path = root_path.rstrip("/")

    def name_for(self, route: BaseRoute) -> str | None:
        """Name to generate URLs of ``route`` with, mount prefixes included."""
        return qualified_route_name(self.router.routes, route) or getattr(route, "name", None)

    def generate(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        root_path: str | None = None,
    ) -> str:
        """Generate the URL of route ``name``.

        Raises:
            NoMatchFound: If no route has that name or a path parameter is
                missing
        """
        extra = dict(params or {})
        names = route_param_names(self.router.routes, name)
        if names is None:
            raise NoMatchFound(name, extra)

        prefix = self.root_path if root_path is None else root_path.rstrip("/")
        path_params = {key: extra.pop(key) for key in names if extra.get(key) is not None}
        url = prefix + str(self.router.url_path_for(name, **path_params))

        query = build_query(extra)
        if query:
            url = f"{url}?{query}"

        LOGGER.debug("url_generated", extra={"route_name": name, "url": url})
        return url
