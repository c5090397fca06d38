"""Sweep a lot number across lot-type x parish cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Sequence, Tuple

from plansearch.config.policies import AggregationPolicy, MergePolicy
from plansearch.entities.catalogue import lot_type_id, parish_id
from plansearch.entities.core import Query, Record, validate_lot_number
from plansearch.progress import NullProgress, ProgressSink
from plansearch.source.base import PaginatedSource
from plansearch.source.models import PlanSearchError
from plansearch.utils.logging import get_logger, logging_context

from .accumulator import Accumulator
from .pagination import fetch_records

CellStatus = Literal["ok", "no_results", "failed"]


@dataclass
class CellOutcome:
    """What happened for one lot type / parish pair."""

    lot_type: str
    parish: str
    status: CellStatus
    records: int = 0
    pages_fetched: int = 0
    error: str | None = None


@dataclass
class SweepResult:
    """Combined output of a sweep.

    ``records`` is the concatenation of every cell's records in cell order, or
    the sweep-wide accumulator contents when deduplicating across cells.
    """

    records: List[Record] = field(default_factory=list)
    cells: List[CellOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[CellOutcome]:
        return [cell for cell in self.cells if cell.status == "failed"]

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    @property
    def stats(self) -> Dict[str, int]:
        counts: Dict[str, int] = {"cells": len(self.cells), "records": len(self.records)}
        for cell in self.cells:
            counts[cell.status] = counts.get(cell.status, 0) + 1
        return counts


class QueryAggregator:
    """Run one fetch per lot type x parish cell and combine the results.

    Lot types form the outer loop and parishes the inner loop, both in the
    order given. Cells run one at a time, each into its own accumulator. A
    cell that raises a :class:`PlanSearchError` is reported, contributes no
    records, and either lets the sweep continue (``failure_mode="continue"``)
    or ends it (``failure_mode="abort"``).
    """

    def __init__(
        self,
        source: PaginatedSource,
        *,
        progress: ProgressSink | None = None,
        policy: AggregationPolicy | None = None,
        merge_policy: MergePolicy | None = None,
    ) -> None:
        self.source = source
        self.progress = progress or NullProgress()
        self.policy = policy or AggregationPolicy()
        self.merge_policy = merge_policy or MergePolicy()
        self._log = get_logger(module=__name__)

    def _cells(
        self, lot_number: str, lot_types: Sequence[str], parishes: Sequence[str]
    ) -> List[Tuple[str, str, Query]]:
        lot_number = validate_lot_number(lot_number)
        lot_ids = {name: lot_type_id(name) for name in lot_types}
        parish_ids = {name: parish_id(name) for name in parishes}
        return [
            (lot_type, parish, Query(lot_number=lot_number, lot_type=lot_ids[lot_type], parish=parish_ids[parish]))
            for lot_type in lot_types
            for parish in parishes
        ]

    def sweep(
        self,
        lot_number: str,
        lot_types: Sequence[str],
        parishes: Sequence[str],
    ) -> SweepResult:
        """Fetch every cell and return the combined records and per-cell outcomes.

        Unknown lot type or parish names raise ``KeyError`` and an invalid lot
        number raises :class:`~plansearch.entities.core.QueryValidationError`,
        both before any cell runs.
        """

        cells = self._cells(lot_number, lot_types, parishes)
        result = SweepResult()
        shared = Accumulator.from_policy(self.merge_policy) if self.policy.dedupe_across_cells else None

        for lot_type, parish, query in cells:
            outcome = self._run_cell(lot_type, parish, query, result, shared)
            result.cells.append(outcome)
            if outcome.status == "failed" and self.policy.failure_mode == "abort":
                self._log.warning("Aborting sweep after failed cell", lot_type=lot_type, parish=parish)
                break

        if shared is not None:
            result.records = shared.values()
        self._log.info("Sweep complete", **result.stats)
        return result

    def _run_cell(
        self,
        lot_type: str,
        parish: str,
        query: Query,
        result: SweepResult,
        shared: Accumulator | None,
    ) -> CellOutcome:
        self.progress.report(f"Starting {lot_type} in {parish}")
        accumulator = Accumulator.from_policy(self.merge_policy)

        with logging_context(step="sweep", lot_type=lot_type, parish=parish):
            try:
                fetched = fetch_records(query, source=self.source, progress=self.progress, accumulator=accumulator)
            except PlanSearchError as exc:
                self.progress.fail(f"Failed {lot_type} in {parish}: {exc}")
                self._log.warning("Cell failed", lot_type=lot_type, parish=parish, error=str(exc))
                return CellOutcome(lot_type=lot_type, parish=parish, status="failed", error=str(exc))

        if fetched.no_results:
            return CellOutcome(lot_type=lot_type, parish=parish, status="no_results")
        if shared is not None:
            shared.fold_all(fetched.records)
        else:
            result.records.extend(fetched.records)
        return CellOutcome(
            lot_type=lot_type,
            parish=parish,
            status="ok",
            records=len(fetched.records),
            pages_fetched=fetched.pages_fetched,
        )


def all_records(
    lot_number: str,
    lot_types: Sequence[str],
    parishes: Sequence[str],
    *,
    source: PaginatedSource,
    progress: ProgressSink | None = None,
    policy: AggregationPolicy | None = None,
    merge_policy: MergePolicy | None = None,
) -> SweepResult:
    """Convenience wrapper around :meth:`QueryAggregator.sweep`."""

    aggregator = QueryAggregator(source, progress=progress, policy=policy, merge_policy=merge_policy)
    return aggregator.sweep(lot_number, lot_types, parishes)


__all__ = ["CellOutcome", "QueryAggregator", "SweepResult", "all_records"]
