"""Property path parsing and assignment over nested data.

A property path addresses a location inside nested mappings, lists or
objects, for example ``[page]``, ``filter[page]`` or ``sort.order``.
Bracketed elements are indexes, bare elements are properties. On a
mapping both kinds resolve to a key.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, MutableMapping, MutableSequence
from dataclasses import dataclass
from typing import Any

_ELEMENT_PATTERN = re.compile(r"^(?:([^.\[]+)|\[([^\]]+)\])(.*)$")


class InvalidPropertyPathError(ValueError):
    """Raised when a property path cannot be parsed."""


@dataclass(frozen=True)
class PathElement:
    name: str
    is_index: bool


class PropertyPath:
    """Parsed property path.

    Examples:
        >>> [e.name for e in PropertyPath("filter[page]")]
        ['filter', 'page']
        >>> PropertyPath("[page]").elements[0].is_index
        True
    """

    def __init__(self, path: str | PropertyPath) -> None:
        if isinstance(path, PropertyPath):
            self.path = path.path
            self.elements: tuple[PathElement, ...] = path.elements
            return

        if not isinstance(path, str) or not path:
            msg = "The property path must be a non-empty string"
            raise InvalidPropertyPathError(msg)

        self.path = path
        self.elements = tuple(self._parse(path))

    @staticmethod
    def _parse(path: str) -> Iterator[PathElement]:
        remaining = path
        position = 0
        while remaining:
            match = _ELEMENT_PATTERN.match(remaining)
            if match is None:
                msg = (
                    f'Could not parse property path "{path}". '
                    f'Unexpected token "{remaining[0]}" at position {position}.'
                )
                raise InvalidPropertyPathError(msg)

            prop, index, rest = match.groups()
            if prop is not None:
                yield PathElement(prop, is_index=False)
            else:
                yield PathElement(index, is_index=True)

            consumed = len(remaining) - len(rest)
            position += consumed
            remaining = rest
            if remaining.startswith("."):
                if len(remaining) == 1:
                    msg = f'Could not parse property path "{path}". Path ends with ".".'
                    raise InvalidPropertyPathError(msg)
                remaining = remaining[1:]
                position += 1

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"PropertyPath({self.path!r})"


def _read(container: Any, element: PathElement) -> Any:
    if isinstance(container, MutableMapping):
        return container.get(element.name)
    if isinstance(container, MutableSequence):
        index = _list_index(container, element)
        return container[index] if index < len(container) else None
    if element.is_index:
        try:
            return container[element.name]
        except (KeyError, IndexError, TypeError):
            return None
    return getattr(container, element.name, None)


def _write(container: Any, element: PathElement, value: Any) -> None:
    if isinstance(container, MutableMapping):
        container[element.name] = value
    elif isinstance(container, MutableSequence):
        index = _list_index(container, element)
        if index == len(container):
            container.append(value)
        else:
            container[index] = value
    elif element.is_index:
        container[element.name] = value
    else:
        setattr(container, element.name, value)


def _list_index(container: MutableSequence[Any], element: PathElement) -> int:
    if not element.name.isdigit() or int(element.name) > len(container):
        msg = f'Cannot write index "{element.name}" of a list of length {len(container)}'
        raise InvalidPropertyPathError(msg)
    return int(element.name)


def _is_container(value: Any) -> bool:
    return isinstance(value, (MutableMapping, MutableSequence)) or hasattr(value, "__dict__")


def set_value(target: Any, path: str | PropertyPath, value: Any) -> None:
    """Assign ``value`` at ``path`` inside ``target``.

    Missing intermediate levels are created as dicts. Intermediate values
    that cannot hold children (strings, numbers, None) are replaced.

    Raises:
        InvalidPropertyPathError: If the path is malformed or addresses a
            list index that cannot be written
    """
    elements = PropertyPath(path).elements
    container = target
    for element in elements[:-1]:
        child = _read(container, element)
        if not _is_container(child):
            child = {}
            _write(container, element, child)
        container = child
    _write(container, elements[-1], value)


def get_value(target: Any, path: str | PropertyPath, default: Any = None) -> Any:
    """Read the value at ``path`` inside ``target`` without modifying it."""
    container = target
    for element in PropertyPath(path).elements:
        if container is None:
            return default
        try:
            container = _read(container, element)
        except InvalidPropertyPathError:
            return default
    return default if container is None else container
