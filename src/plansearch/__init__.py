"""Search a land titles plan registry by parish/settlement and lot."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .config import Policies, Settings, get_settings
from .entities import Query, Record
from .pipeline import all_records, fetch_records, sort_records

try:
    __version__ = version("plansearch")
except PackageNotFoundError:  # pragma: no cover - source checkout without metadata
    __version__ = "0.0.0"

__all__ = [
    "Policies",
    "Query",
    "Record",
    "Settings",
    "__version__",
    "all_records",
    "fetch_records",
    "get_settings",
    "sort_records",
]
