"""Deposit-keyed record accumulation with a deterministic merge policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Literal

from plansearch.config.policies import MergePolicy
from plansearch.entities.core import Record
from plansearch.utils.logging import get_logger

MergeFunction = Callable[[Record, Record], Record]

_LOGGER = get_logger(module=__name__)


def keep_longest_comments(existing: Record, candidate: Record) -> Record:
    """Prefer the observation with the longer comments; ties keep ``existing``."""

    if len(candidate.comments) > len(existing.comments):
        return candidate
    return existing


def keep_first_seen(existing: Record, candidate: Record) -> Record:
    return existing


MERGE_FUNCTIONS: Dict[str, MergeFunction] = {
    "longest_comments": keep_longest_comments,
    "first_seen": keep_first_seen,
}


def merge_function(strategy: Literal["longest_comments", "first_seen"] | str) -> MergeFunction:
    try:
        return MERGE_FUNCTIONS[strategy]
    except KeyError as exc:
        raise ValueError(f"Unknown merge strategy: {strategy!r}") from exc


@dataclass
class AccumulatorStats:
    inserted: int = 0
    replaced: int = 0
    discarded: int = 0

    @property
    def observed(self) -> int:
        return self.inserted + self.replaced + self.discarded


@dataclass
class Accumulator:
    """Mapping of deposit number to the best-known record for one run.

    Entries are only ever added or replaced, never removed. Folding is applied
    pairwise in arrival order, so the survivor for a deposit depends only on
    the sequence of observations.
    """

    merge: MergeFunction = keep_longest_comments
    stats: AccumulatorStats = field(default_factory=AccumulatorStats)
    _entries: Dict[str, Record] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_policy(cls, policy: MergePolicy | None = None) -> "Accumulator":
        strategy = (policy or MergePolicy()).strategy
        return cls(merge=merge_function(strategy))

    def fold(self, record: Record) -> Record:
        """Merge ``record`` into the accumulator and return the survivor."""

        existing = self._entries.get(record.deposit)
        if existing is None:
            self._entries[record.deposit] = record
            self.stats.inserted += 1
            return record

        survivor = self.merge(existing, record)
        if survivor is existing:
            self.stats.discarded += 1
        else:
            self._entries[record.deposit] = survivor
            self.stats.replaced += 1
            _LOGGER.debug("Replaced duplicate deposit", deposit=record.deposit)
        return survivor

    def fold_all(self, records: Iterable[Record]) -> None:
        for record in records:
            self.fold(record)

    def get(self, deposit: str) -> Record | None:
        return self._entries.get(deposit)

    def values(self) -> List[Record]:
        """Return the current records. Order is not meaningful; see ``sort_records``."""

        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, deposit: object) -> bool:
        return deposit in self._entries

    def __iter__(self) -> Iterator[Record]:
        return iter(self.values())


__all__ = [
    "Accumulator",
    "AccumulatorStats",
    "MERGE_FUNCTIONS",
    "MergeFunction",
    "keep_first_seen",
    "keep_longest_comments",
    "merge_function",
]
