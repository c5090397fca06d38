"""Session handles, outcomes and errors for paginated plan sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from plansearch.entities.core import Query

RawRow = List[str]


class PlanSearchError(RuntimeError):
    """Base class for failures raised while searching the registry."""


class SessionError(PlanSearchError):
    """The external source could not be opened or navigated."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ParseError(PlanSearchError):
    """A results page did not have the expected shape."""


@dataclass
class SessionHandle:
    """Open interaction with the source for one query.

    ``state`` belongs to the source implementation. ``total_pages`` is filled
    in once from the results summary and never changes afterwards.
    """

    query: Query
    state: Any = None
    page: int = 1
    total_pages: int | None = None
    closed: bool = False


@dataclass
class NoResults:
    """The source reported zero matches for ``query``.

    Not an error. Sources that hold resources while answering keep them in
    ``state`` so that :meth:`PaginatedSource.close` can release them.
    """

    query: Query
    state: Any = None
    closed: bool = False
    message: str = field(default="There aren't any results")


__all__ = [
    "NoResults",
    "ParseError",
    "PlanSearchError",
    "RawRow",
    "SessionError",
    "SessionHandle",
]
