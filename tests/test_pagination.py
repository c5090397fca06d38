"""Tests for walking one query through its result pages."""

from __future__ import annotations

import pytest

from fakes import FakePlanSource, Scenario, row
from plansearch.entities.catalogue import lot_type_id, parish_id
from plansearch.entities.core import Query
from plansearch.pipeline.accumulator import Accumulator
from plansearch.pipeline.pagination import PageDriver, fetch_records
from plansearch.progress import RecordingProgress
from plansearch.source.base import opened
from plansearch.source.models import ParseError, SessionError

RIVER_LOT = lot_type_id("River Lot")
ST_ANDREWS = parish_id("Saint Andrews")


@pytest.fixture()
def query() -> Query:
    return Query(lot_number="5", lot_type=RIVER_LOT, parish=ST_ANDREWS)


def three_pages() -> Scenario:
    return Scenario(
        pages=[
            [row(f"D{i}") for i in range(1, 11)],
            [row(f"D{i}") for i in range(11, 21)],
            [row(f"D{i}") for i in range(21, 26)],
        ]
    )


def test_fetch_reads_every_page(query: Query) -> None:
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): three_pages()})
    progress = RecordingProgress()

    result = fetch_records(query, source=source, progress=progress)

    assert result.pages_fetched == 3
    assert result.total_pages == 3
    assert result.complete
    assert len(result.records) == 25
    assert source.pages_read == [1, 2, 3]
    assert source.advances == 2
    assert progress.messages("report") == [
        "Scraping page 1 of 3",
        "Scraping page 2 of 3",
        "Scraping page 3 of 3",
    ]
    assert progress.messages("succeed") == ["Scraped 3 pages"]
    assert source.closed == [query]


def test_fetch_stops_when_session_cannot_advance(query: Query) -> None:
    scenario = three_pages()
    scenario.advance_limit = 2
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): scenario})
    progress = RecordingProgress()

    result = fetch_records(query, source=source, progress=progress)

    assert source.pages_read == [1, 2]
    assert result.pages_fetched == 2
    assert result.total_pages == 3
    assert not result.complete
    assert len(result.records) == 20
    assert progress.messages("succeed") == ["Scraped 2 pages"]
    assert progress.messages("fail") == []
    assert source.closed == [query]


def test_zero_results_reports_failure_and_closes(query: Query) -> None:
    source = FakePlanSource()
    progress = RecordingProgress()

    result = fetch_records(query, source=source, progress=progress)

    assert result.no_results
    assert result.records == []
    assert result.pages_fetched == 0
    assert progress.messages("fail") == ["There aren't any results for lot 5 (River Lot, Saint Andrews)"]
    assert progress.messages("report") == []
    assert source.closed == [query]


def test_duplicates_across_pages_are_merged(query: Query) -> None:
    scenario = Scenario(pages=[[row("D1", comments="a")], [row("D1", comments="longer")]], count=11)
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): scenario})

    result = fetch_records(query, source=source)

    assert [record.comments for record in result.records] == ["longer"]


def test_caller_supplied_accumulator_receives_records(query: Query) -> None:
    scenario = Scenario(pages=[[row("D1"), row("D2")]])
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): scenario})
    accumulator = Accumulator()

    fetch_records(query, source=source, accumulator=accumulator)

    assert len(accumulator) == 2


def test_page_errors_propagate_and_session_is_closed(query: Query) -> None:
    scenario = three_pages()
    scenario.page_error = ParseError("table missing")
    scenario.error_page = 2
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): scenario})
    progress = RecordingProgress()

    with pytest.raises(ParseError):
        fetch_records(query, source=source, progress=progress)

    assert source.closed == [query]
    assert progress.messages("succeed") == []


def test_open_errors_propagate(query: Query) -> None:
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): Scenario(open_error=SessionError("down", retryable=True))})

    with pytest.raises(SessionError) as excinfo:
        fetch_records(query, source=source)

    assert excinfo.value.retryable
    assert source.closed == []


def test_page_driver_yields_page_results(query: Query) -> None:
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): three_pages()})

    with opened(source, query) as handle:
        driver = PageDriver(source, handle, Accumulator())
        pages = [(page.page, page.total_pages, len(page.records)) for page in driver.iter_pages()]

    assert pages == [(1, 3, 10), (2, 3, 10), (3, 3, 5)]
    assert handle.closed
    assert handle.total_pages == 3


def test_retained_lot_column_flows_through(query: Query) -> None:
    scenario = Scenario(pages=[[row("D1", lot="5")]])
    source = FakePlanSource({(RIVER_LOT, ST_ANDREWS): scenario})

    result = fetch_records(query, source=source, retain_lot=True)

    assert result.records[0].lot == "5"
    assert result.records[0].deposit == "D1"


class CloseFailingSource(FakePlanSource):
    def close(self, handle) -> None:
        super().close(handle)
        raise RuntimeError("socket already closed")


def test_close_failure_does_not_mask_the_page_error(query: Query) -> None:
    scenario = three_pages()
    scenario.page_error = ParseError("table missing")
    source = CloseFailingSource({(RIVER_LOT, ST_ANDREWS): scenario})

    with pytest.raises(ParseError, match="table missing"):
        fetch_records(query, source=source)

    assert source.closed == [query]


def test_close_failure_surfaces_after_a_clean_fetch(query: Query) -> None:
    source = CloseFailingSource({(RIVER_LOT, ST_ANDREWS): three_pages()})

    with pytest.raises(RuntimeError, match="socket already closed"):
        fetch_records(query, source=source)
