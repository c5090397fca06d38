"""Record aggregation engine: normalise, fold, paginate, sweep and order."""

from .accumulator import Accumulator, AccumulatorStats, keep_first_seen, keep_longest_comments, merge_function
from .aggregator import CellOutcome, QueryAggregator, SweepResult, all_records
from .normalizer import normalize_row
from .ordering import sort_records
from .pagination import FetchResult, PageDriver, PageResult, fetch_records

__all__ = [
    "Accumulator",
    "AccumulatorStats",
    "CellOutcome",
    "FetchResult",
    "PageDriver",
    "PageResult",
    "QueryAggregator",
    "SweepResult",
    "all_records",
    "fetch_records",
    "keep_first_seen",
    "keep_longest_comments",
    "merge_function",
    "normalize_row",
    "sort_records",
]
