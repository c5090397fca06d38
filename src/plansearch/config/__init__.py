"""Configuration utilities for plansearch."""

from .policies import (
    AggregationPolicy,
    ExportPolicy,
    MergePolicy,
    Policies,
    SourcePolicy,
    load_policies,
)
from .settings import PathsConfig, Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "PathsConfig",
    "Policies",
    "load_policies",
    "SourcePolicy",
    "MergePolicy",
    "AggregationPolicy",
    "ExportPolicy",
]
