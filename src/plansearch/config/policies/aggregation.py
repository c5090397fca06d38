"""Merge and sweep policy models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class MergePolicy(BaseModel):
    """How records sharing a deposit number are reconciled."""

    strategy: Literal["longest_comments", "first_seen"] = Field(
        default="longest_comments",
        description="Keep the observation with the longer comments, or the first one seen.",
    )


class AggregationPolicy(BaseModel):
    """Behaviour of lot-type x parish sweeps."""

    failure_mode: Literal["continue", "abort"] = Field(
        default="continue",
        description="Keep sweeping after a failed cell, or stop at the first failure.",
    )
    dedupe_across_cells: bool = Field(
        default=False,
        description="Fold every cell into a single sweep-wide accumulator.",
    )
