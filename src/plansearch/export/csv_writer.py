"""CSV export of ordered plan records."""

from __future__ import annotations

import csv
import os
from datetime import date
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Callable, Dict, Sequence, TextIO

from plansearch.entities.core import RECORD_FIELDS, Record
from plansearch.utils.helpers import ensure_directory
from plansearch.utils.logging import get_logger

HEADER_LABELS: Dict[str, str] = {
    "lot": "Lot",
    "deposit": "Deposit",
    "w_no": "W. No",
    "plan_no": "Plan No",
    "dos_no": "D of S No",
    "clsr_no": "CLSR No",
    "district": "District",
    "plan_type": "Plan Type",
    "comments": "Comments",
}

_LOGGER = get_logger(module=__name__)


def column_order(*, include_lot: bool = False) -> list[str]:
    return (["lot"] if include_lot else []) + list(RECORD_FIELDS)


def format_day(day: date) -> str:
    """Render ``day`` as e.g. ``Oct 9 2026``."""

    return f"{day:%b} {day.day} {day:%Y}"


def default_filename(
    *,
    day: date | None = None,
    lot_number: str | None = None,
    lot_type: str | None = None,
    parish: str | None = None,
) -> str:
    """File name for a result set.

    A single search is named ``"{parish} - {lot type} - {lot} - {day}.csv"``;
    a sweep is named after the day alone.
    """

    stamp = format_day(day or date.today())
    if lot_number and lot_type and parish:
        return f"{parish} - {lot_type} - {lot_number} - {stamp}.csv"
    return f"{stamp}.csv"


def _atomic_write(destination: Path, writer: Callable[[TextIO], None], *, encoding: str) -> Path:
    """Write using a temporary file before atomically replacing the destination."""

    ensure_directory(destination.parent)
    tmp_path: Path | None = None
    tmp_handle = NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        newline="",
        dir=destination.parent,
        prefix=f".{destination.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        tmp_path = Path(tmp_handle.name)
        try:
            writer(tmp_handle)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        finally:
            tmp_handle.close()
        os.replace(tmp_path, destination)
    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
    return destination


def write_records(
    records: Sequence[Record],
    destination: str | Path,
    *,
    include_lot: bool = False,
    encoding: str = "utf-8",
) -> Path:
    """Write ``records`` in the given order with the registry's column labels."""

    path = Path(destination).expanduser()
    columns = column_order(include_lot=include_lot)

    def _writer(handle: TextIO) -> None:
        writer = csv.DictWriter(handle, fieldnames=columns)
        writer.writerow({name: HEADER_LABELS[name] for name in columns})
        for record in records:
            writer.writerow(record.as_row(include_lot=include_lot))

    written = _atomic_write(path, _writer, encoding=encoding)
    _LOGGER.info("Wrote records", path=str(written), records=len(records))
    return written


__all__ = ["HEADER_LABELS", "column_order", "default_filename", "format_day", "write_records"]
