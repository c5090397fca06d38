"""Deterministic output order for exported records."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from plansearch.entities.core import Record
from plansearch.utils.helpers import first_digit_run, parse_number

_SortKey = Tuple[int, float, str, str]


def plan_sort_key(record: Record) -> _SortKey:
    """Numeric plan numbers first, in numeric order, then the rest lexically."""

    number = parse_number(record.plan_no)
    if number is not None:
        return (0, number, record.plan_no, record.deposit)
    return (1, 0.0, record.plan_no, record.deposit)


def deposit_number(deposit: str) -> float | None:
    """Numeric value of a deposit: the whole string if numeric, else its first digit run."""

    number = parse_number(deposit)
    if number is not None:
        return number
    digits = first_digit_run(deposit)
    return float(digits) if digits is not None else None


def deposit_sort_key(record: Record) -> _SortKey:
    """Deposits by number; deposits without any digits go last, lexically."""

    number = deposit_number(record.deposit)
    if number is not None:
        return (0, number, record.deposit, record.deposit)
    return (1, 0.0, record.deposit, record.deposit)


def sort_records(records: Iterable[Record]) -> List[Record]:
    """Return plan-bearing records by plan number, followed by no-plan records by deposit."""

    with_plan: List[Record] = []
    without_plan: List[Record] = []
    for record in records:
        (with_plan if record.has_plan else without_plan).append(record)
    return sorted(with_plan, key=plan_sort_key) + sorted(without_plan, key=deposit_sort_key)


__all__ = ["deposit_number", "deposit_sort_key", "plan_sort_key", "sort_records"]
