"""Tests for sweeping a lot number across lot types and parishes."""

from __future__ import annotations

import pytest

from fakes import FakePlanSource, Scenario, row
from plansearch.config.policies import AggregationPolicy
from plansearch.entities.catalogue import lot_type_id, parish_id
from plansearch.entities.core import QueryValidationError
from plansearch.pipeline.aggregator import QueryAggregator, all_records
from plansearch.progress import RecordingProgress
from plansearch.source.models import ParseError, SessionError

LOT_TYPES = ["Group Lot", "River Lot"]
PARISHES = ["Baie Saint Paul", "Kildonan", "Saint Andrews"]


def cell(lot_type: str, parish: str) -> tuple[int, int]:
    return lot_type_id(lot_type), parish_id(parish)


def test_cells_run_lot_type_outer_parish_inner() -> None:
    source = FakePlanSource()

    result = all_records("5", LOT_TYPES, PARISHES, source=source)

    visited = [(query.lot_type, query.parish) for query in source.opened]
    assert visited == [cell(lot_type, parish) for lot_type in LOT_TYPES for parish in PARISHES]
    assert [(outcome.lot_type, outcome.parish) for outcome in result.cells] == [
        (lot_type, parish) for lot_type in LOT_TYPES for parish in PARISHES
    ]
    assert all(outcome.status == "no_results" for outcome in result.cells)
    assert result.records == []
    assert len(source.closed) == 6


def test_records_are_concatenated_in_cell_order_without_cross_cell_dedupe() -> None:
    source = FakePlanSource(
        {
            cell("Group Lot", "Kildonan"): Scenario(pages=[[row("D1", comments="a"), row("D2")]]),
            cell("River Lot", "Baie Saint Paul"): Scenario(pages=[[row("D1", comments="longer")]]),
        }
    )

    result = all_records("5", LOT_TYPES, PARISHES, source=source)

    assert [(record.deposit, record.comments) for record in result.records] == [
        ("D1", "a"),
        ("D2", ""),
        ("D1", "longer"),
    ]
    assert result.stats["ok"] == 2
    assert result.stats["no_results"] == 4


def test_dedupe_across_cells_merges_by_deposit() -> None:
    source = FakePlanSource(
        {
            cell("Group Lot", "Kildonan"): Scenario(pages=[[row("D1", comments="a"), row("D2")]]),
            cell("River Lot", "Baie Saint Paul"): Scenario(pages=[[row("D1", comments="longer")]]),
        }
    )

    result = all_records(
        "5",
        LOT_TYPES,
        PARISHES,
        source=source,
        policy=AggregationPolicy(dedupe_across_cells=True),
    )

    by_deposit = {record.deposit: record.comments for record in result.records}
    assert by_deposit == {"D1": "longer", "D2": ""}


def test_failed_cell_is_reported_and_sweep_continues() -> None:
    progress = RecordingProgress()
    source = FakePlanSource(
        {
            cell("Group Lot", "Kildonan"): Scenario(open_error=SessionError("connection reset")),
            cell("River Lot", "Saint Andrews"): Scenario(pages=[[row("D9")]]),
        }
    )

    result = all_records("5", LOT_TYPES, PARISHES, source=source, progress=progress)

    assert len(result.cells) == 6
    assert result.failed
    assert [(outcome.lot_type, outcome.parish) for outcome in result.failures] == [("Group Lot", "Kildonan")]
    assert result.failures[0].error == "connection reset"
    assert [record.deposit for record in result.records] == ["D9"]
    assert "Failed Group Lot in Kildonan: connection reset" in progress.messages("fail")
    assert "Starting River Lot in Saint Andrews" in progress.messages("report")


def test_partial_records_of_a_failed_cell_are_dropped() -> None:
    scenario = Scenario(pages=[[row("D1")], [row("D2")]], count=12, page_error=ParseError("bad page"), error_page=2)
    source = FakePlanSource({cell("Group Lot", "Baie Saint Paul"): scenario})

    for dedupe in (False, True):
        result = all_records(
            "5",
            ["Group Lot"],
            ["Baie Saint Paul"],
            source=source,
            policy=AggregationPolicy(dedupe_across_cells=dedupe),
        )
        assert result.records == []
        assert result.failures[0].status == "failed"


def test_abort_mode_stops_at_first_failure() -> None:
    source = FakePlanSource({cell("Group Lot", "Kildonan"): Scenario(open_error=SessionError("down"))})

    result = all_records(
        "5",
        LOT_TYPES,
        PARISHES,
        source=source,
        policy=AggregationPolicy(failure_mode="abort"),
    )

    assert [(outcome.lot_type, outcome.parish) for outcome in result.cells] == [
        ("Group Lot", "Baie Saint Paul"),
        ("Group Lot", "Kildonan"),
    ]
    assert len(source.opened) == 1


def test_invalid_lot_number_fails_before_any_cell() -> None:
    source = FakePlanSource()

    with pytest.raises(QueryValidationError):
        QueryAggregator(source).sweep("5-", LOT_TYPES, PARISHES)

    assert source.opened == []


def test_unknown_parish_fails_before_any_cell() -> None:
    source = FakePlanSource()

    with pytest.raises(KeyError):
        QueryAggregator(source).sweep("5", LOT_TYPES, ["Atlantis"])

    assert source.opened == []


def test_empty_name_lists_produce_no_cells() -> None:
    result = all_records("5", [], PARISHES, source=FakePlanSource())

    assert result.cells == []
    assert result.records == []
