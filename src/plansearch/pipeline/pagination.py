"""Drive a paginated source through every page of one query."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from plansearch.entities.core import Query, Record
from plansearch.progress import NullProgress, ProgressSink
from plansearch.source.base import PaginatedSource, opened
from plansearch.source.models import NoResults, SessionHandle
from plansearch.utils.logging import get_logger

from .accumulator import Accumulator
from .normalizer import normalize_row


@dataclass
class PageResult:
    """Records seen on one page, in page order, after normalisation."""

    page: int
    total_pages: int
    records: List[Record]


@dataclass
class FetchResult:
    """Outcome of one single-query fetch."""

    query: Query
    records: List[Record] = field(default_factory=list)
    pages_fetched: int = 0
    total_pages: int = 0
    no_results: bool = False

    @property
    def complete(self) -> bool:
        """Whether every expected page was reached."""

        return self.no_results or self.pages_fetched == self.total_pages


class PageDriver:
    """Walk the pages of an open session and fold their rows.

    The driver reads the page count once, then for each page reports progress,
    folds the normalised rows into the accumulator and asks the session to
    advance. A session that can no longer advance ends the walk early; that is
    a normal, successful outcome.
    """

    def __init__(
        self,
        source: PaginatedSource,
        handle: SessionHandle,
        accumulator: Accumulator,
        *,
        progress: ProgressSink | None = None,
        retain_lot: bool = False,
    ) -> None:
        self.source = source
        self.handle = handle
        self.accumulator = accumulator
        self.progress = progress or NullProgress()
        self.retain_lot = retain_lot
        self.pages_fetched = 0
        self.total_pages = 0
        self._log = get_logger(module=__name__, query=handle.query.describe())

    def iter_pages(self) -> Iterator[PageResult]:
        self.total_pages = self.source.total_pages(self.handle)
        for page in range(1, self.total_pages + 1):
            self.progress.report(f"Scraping page {page} of {self.total_pages}")
            rows = self.source.current_page_rows(self.handle)
            records = [
                normalize_row(row, retain_lot=self.retain_lot, lot_column=self.source.leading_lot) for row in rows
            ]
            for record in records:
                self.accumulator.fold(record)
            self.pages_fetched = page
            yield PageResult(page=page, total_pages=self.total_pages, records=records)

            if page == self.total_pages:
                break
            if not self.source.advance(self.handle):
                self._log.info(
                    "Session cannot advance; stopping early",
                    page=page,
                    total_pages=self.total_pages,
                )
                break

    def run(self) -> int:
        """Consume every page and return the number of pages fetched."""

        for _ in self.iter_pages():
            pass
        return self.pages_fetched


def fetch_records(
    query: Query,
    *,
    source: PaginatedSource,
    progress: ProgressSink | None = None,
    accumulator: Accumulator | None = None,
    retain_lot: bool = False,
) -> FetchResult:
    """Run one query through every reachable page.

    ``records`` holds the accumulator's contents afterwards, in insertion order.
    A zero-match query reports through ``progress.fail`` and returns no records.
    :class:`~plansearch.source.models.ParseError` and
    :class:`~plansearch.source.models.SessionError` propagate; the session is
    closed either way.
    """

    sink = progress or NullProgress()
    store = accumulator if accumulator is not None else Accumulator()
    log = get_logger(module=__name__)

    with opened(source, query) as handle:
        if isinstance(handle, NoResults):
            sink.fail(f"There aren't any results for {query.describe()}")
            return FetchResult(query=query, no_results=True)

        driver = PageDriver(source, handle, store, progress=sink, retain_lot=retain_lot)
        driver.run()

    sink.succeed(f"Scraped {driver.pages_fetched} pages")
    log.info(
        "Fetched query",
        query=query.describe(),
        pages=driver.pages_fetched,
        total_pages=driver.total_pages,
        records=len(store),
    )
    return FetchResult(
        query=query,
        records=store.values(),
        pages_fetched=driver.pages_fetched,
        total_pages=driver.total_pages,
    )


__all__ = ["FetchResult", "PageDriver", "PageResult", "fetch_records"]
