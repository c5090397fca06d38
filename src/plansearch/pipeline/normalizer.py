"""Map raw result rows onto :class:`Record`."""

from __future__ import annotations

from typing import Sequence

from plansearch.entities.core import RECORD_FIELDS, Record
from plansearch.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)


def expected_width(*, retain_lot: bool = False) -> int:
    return len(RECORD_FIELDS) + (1 if retain_lot else 0)


def normalize_row(
    cells: Sequence[str],
    *,
    retain_lot: bool = False,
    lot_column: bool = False,
) -> Record:
    """Build a record from the cells of one result row.

    ``lot_column`` marks rows that always lead with a Lot cell; rows kept with
    ``retain_lot`` are assumed to carry one. Some result pages add one more
    leading cell, so a row exactly one cell wider than expected has its first
    cell dropped. The Lot cell is removed afterwards unless ``retain_lot`` is
    set. Missing trailing cells become empty strings and surplus trailing
    cells are ignored.
    """

    has_lot = retain_lot or lot_column
    width = expected_width(retain_lot=has_lot)
    values = [str(cell).strip() for cell in cells]
    if len(values) == width + 1:
        _LOGGER.debug("Dropped extra leading cell", cell=values[0])
        values = values[1:]
    if len(values) < width:
        values.extend([""] * (width - len(values)))
    if has_lot and not retain_lot:
        values = values[1:]

    names = (("lot",) if retain_lot else ()) + RECORD_FIELDS
    return Record(**dict(zip(names, values)))


__all__ = ["expected_width", "normalize_row"]
