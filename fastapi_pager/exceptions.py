"""Pagination exceptions.

The hierarchy mirrors the failure modes of a paginated listing:
an invalid page size, an invalid current page, or a misconfigured
rendering call. Page size and current page errors subclass ValueError
since they describe bad input values.
"""

from __future__ import annotations


class PagerError(Exception):
    """Base exception for pagination errors."""


class NotValidMaxPerPageError(PagerError, ValueError):
    """Raised when the requested number of items per page is invalid.

    Translated to a 404 response by the pager exception handlers.
    """


class LessThan1MaxPerPageError(NotValidMaxPerPageError):
    """Raised when the requested page size is below 1."""


class NotValidCurrentPageError(PagerError, ValueError):
    """Raised when the requested current page is invalid."""


class LessThan1CurrentPageError(NotValidCurrentPageError):
    """Raised when the requested page is below 1."""


class OutOfRangeCurrentPageError(NotValidCurrentPageError):
    """Raised when the requested page is past the last page.

    Example:
        Requesting page 11 of a 10 page listing.
    """


class ViewNotFoundError(PagerError, LookupError):
    """Raised when no view is registered under the requested name."""


class NoCurrentRequestError(RuntimeError):
    """Raised when a route must be inferred outside of a request."""


class SubRequestRouteError(RuntimeError):
    """Raised when a route must be inferred during a sub-request.

    Pass ``route_name`` explicitly when rendering inside a sub-request.
    """
