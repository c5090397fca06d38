"""Abstract paginated source consumed by the aggregation engine."""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List

from plansearch.entities.core import Query
from plansearch.utils.logging import get_logger

from .models import NoResults, ParseError, RawRow, SessionHandle

DEFAULT_PAGE_SIZE = 10
_COUNT_PATTERN = re.compile(r"^(\d+|\d{1,3}(,\d{3})+)$")

_LOGGER = get_logger(module=__name__)


def parse_result_count(summary: str) -> int:
    """Return the result count from a summary such as ``"Records 1 - 10 of 57"``.

    The count is the last whitespace-separated token.
    """

    tokens = summary.split()
    if not tokens:
        raise ParseError("Results summary is empty")
    token = tokens[-1]
    if not _COUNT_PATTERN.match(token):
        raise ParseError(f"Results summary does not end in a number: {summary.strip()!r}")
    return int(token.replace(",", ""))


def compute_total_pages(summary: str, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(parse_result_count(summary) / page_size)


class PaginatedSource(ABC):
    """Contract for a source that answers one query with pages of rows.

    Implementations own the navigation mechanics. ``leading_lot`` is set by
    sources whose rows always start with the Lot cell. The driving loop lives in
    :class:`plansearch.pipeline.pagination.PageDriver`; every method here is
    called sequentially and waited on.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    leading_lot: bool = False

    @abstractmethod
    def open(self, query: Query) -> SessionHandle | NoResults:
        """Run ``query`` and position the session on its first page.

        Raises :class:`SessionError` when the source cannot be reached; the
        implementation releases anything it acquired before raising.
        """

    @abstractmethod
    def results_summary(self, handle: SessionHandle) -> str:
        """Return the results banner text for the open query."""

    def total_pages(self, handle: SessionHandle) -> int:
        if handle.total_pages is None:
            handle.total_pages = compute_total_pages(self.results_summary(handle), self.page_size)
        return handle.total_pages

    @abstractmethod
    def current_page_rows(self, handle: SessionHandle) -> List[RawRow]:
        """Return the cell text of every result row on the current page."""

    @abstractmethod
    def advance(self, handle: SessionHandle) -> bool:
        """Move to the next page; ``False`` when no further navigation is possible."""

    @abstractmethod
    def close(self, handle: SessionHandle | NoResults) -> None:
        """Release everything held for ``handle``."""

    def maintenance_notice(self) -> str | None:
        """Return a notice when the source is down for maintenance."""

        return None


@contextmanager
def opened(source: PaginatedSource, query: Query) -> Iterator[SessionHandle | NoResults]:
    """Open ``query`` on ``source`` and close it on every exit path."""

    handle = source.open(query)
    try:
        yield handle
    except BaseException:
        # a failing close must not replace the error already propagating
        try:
            source.close(handle)
        except Exception:
            _LOGGER.exception("Failed to close source session", query=query.describe())
        finally:
            handle.closed = True
        raise
    else:
        try:
            source.close(handle)
        finally:
            handle.closed = True
            _LOGGER.debug("Closed source session", query=query.describe())


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PaginatedSource",
    "compute_total_pages",
    "opened",
    "parse_result_count",
]
