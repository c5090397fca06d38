"""Tests for CSV export and result file naming."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from plansearch.entities.core import Record
from plansearch.export import column_order, default_filename, format_day, write_records


def read_rows(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_write_records_uses_registry_labels(tmp_path: Path) -> None:
    records = [
        Record(deposit="D2", plan_no="10", comments='has "quotes", and commas'),
        Record(deposit="D1"),
    ]

    written = write_records(records, tmp_path / "out" / "results.csv")

    rows = read_rows(written)
    assert rows[0] == ["Deposit", "W. No", "Plan No", "D of S No", "CLSR No", "District", "Plan Type", "Comments"]
    assert rows[1] == ["D2", "", "10", "", "", "", "", 'has "quotes", and commas']
    assert rows[2][0] == "D1"
    assert len(rows) == 3
    assert not list(written.parent.glob("*.tmp"))


def test_write_records_with_lot_column(tmp_path: Path) -> None:
    written = write_records([Record(deposit="D1", lot="5")], tmp_path / "lots.csv", include_lot=True)

    rows = read_rows(written)
    assert rows[0][0] == "Lot"
    assert rows[1][:2] == ["5", "D1"]
    assert column_order(include_lot=True)[0] == "lot"


def test_write_replaces_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "results.csv"
    target.write_text("stale", encoding="utf-8")

    write_records([Record(deposit="D1")], target)

    assert read_rows(target)[1][0] == "D1"


def test_filenames_follow_search_mode() -> None:
    day = date(2026, 10, 9)

    assert format_day(day) == "Oct 9 2026"
    assert (
        default_filename(day=day, lot_number="1-7", lot_type="River Lot", parish="Saint Andrews")
        == "Saint Andrews - River Lot - 1-7 - Oct 9 2026.csv"
    )
    assert default_filename(day=day) == "Oct 9 2026.csv"
