"""Pagination configuration, dependency helpers and the pager wrapper."""

from __future__ import annotations

import importlib
from collections.abc import Iterator, Sequence
from typing import Annotated, Any, Generic, TypeVar

from fastapi import Depends, Query
from fastapi_pagination import Page, Params, paginate, set_page

from fastapi_pager.core.config import settings
from fastapi_pager.exceptions import (
    LessThan1CurrentPageError,
    LessThan1MaxPerPageError,
    NotValidMaxPerPageError,
    OutOfRangeCurrentPageError,
)

T = TypeVar("T")


class DefaultParams(Params):
    # Bounds are enforced by Pager so that a bad page or page size is a
    # pagination error (translated to 404) rather than a 422.
    page: int = Query(1, description="Page number")
    size: int = Query(settings.pagination_page_size, description="Page size")


ParamsDep = Annotated[DefaultParams, Depends()]


def configure_pagination() -> None:
    if not settings.pagination_page_class:
        return

    module_path, _, attr = settings.pagination_page_class.rpartition(".")
    if not module_path:
        msg = "pagination_page_class must be an importable path"
        raise ValueError(msg)

    module = importlib.import_module(module_path)
    page_cls = getattr(module, attr)
    if not isinstance(page_cls, type) or not issubclass(page_cls, Page):
        msg = "pagination_page_class must be a fastapi-pagination Page"
        raise TypeError(msg)

    set_page(page_cls)


class Pager(Generic[T]):
    """Navigation state of one page of results.

    Wraps a fastapi-pagination ``Page`` (items, total, page, size, pages)
    and exposes what pager views need to draw links. A listing always
    has at least one page, even when it is empty.
    """

    def __init__(self, page: Page[T]) -> None:
        self.page = page

    @classmethod
    def from_sequence(
        cls,
        sequence: Sequence[T],
        page: int = 1,
        size: int | None = None,
        max_size: int | None = None,
    ) -> Pager[T]:
        """Paginate ``sequence`` and validate the requested position.

        Raises:
            LessThan1MaxPerPageError: If ``size`` is below 1
            NotValidMaxPerPageError: If ``size`` exceeds ``max_size``
            LessThan1CurrentPageError: If ``page`` is below 1
            OutOfRangeCurrentPageError: If ``page`` is past the last page
        """
        size = settings.pagination_page_size if size is None else size
        max_size = settings.pagination_page_size_max if max_size is None else max_size

        if size < 1:
            msg = f"Max per page must be at least 1, {size} given"
            raise LessThan1MaxPerPageError(msg)
        if size > max_size:
            msg = f"Max per page must not exceed {max_size}, {size} given"
            raise NotValidMaxPerPageError(msg)
        if page < 1:
            msg = f"Current page must be at least 1, {page} given"
            raise LessThan1CurrentPageError(msg)

        result = paginate(sequence, DefaultParams(page=page, size=size), safe=True)
        pager = cls(result)
        if page > pager.nb_pages:
            msg = f"Page '{page}' is out of bounds"
            raise OutOfRangeCurrentPageError(msg)
        return pager

    @classmethod
    def from_params(
        cls,
        sequence: Sequence[T],
        params: Params,
        max_size: int | None = None,
    ) -> Pager[T]:
        return cls.from_sequence(sequence, page=params.page, size=params.size, max_size=max_size)

    @property
    def items(self) -> Sequence[T]:
        return self.page.items

    @property
    def nb_results(self) -> int:
        return self.page.total or 0

    @property
    def max_per_page(self) -> int:
        return self.page.size

    @property
    def current_page(self) -> int:
        return self.page.page

    @property
    def nb_pages(self) -> int:
        return max(1, self.page.pages or 0)

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @property
    def previous_page(self) -> int:
        if not self.has_previous_page:
            msg = "There is no previous page"
            raise LookupError(msg)
        return self.current_page - 1

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.nb_pages

    @property
    def next_page(self) -> int:
        if not self.has_next_page:
            msg = "There is no next page"
            raise LookupError(msg)
        return self.current_page + 1

    def __len__(self) -> int:
        return self.nb_results

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"<Pager page={self.current_page}/{self.nb_pages} results={self.nb_results}>"


def as_pager(value: Any) -> Pager[Any]:
    """Coerce a ``Pager`` or a fastapi-pagination page into a ``Pager``.

    Raises:
        TypeError: If ``value`` carries no page navigation data
    """
    if isinstance(value, Pager):
        return value
    if all(hasattr(value, attr) for attr in ("page", "size", "pages", "items")):
        return Pager(value)
    msg = f"Expected a Pager or a fastapi-pagination Page, got {type(value).__name__}"
    raise TypeError(msg)
