"""CSV export policy models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExportPolicy(BaseModel):
    """Controls for written result files."""

    encoding: str = Field(default="utf-8", min_length=3)
    skip_empty: bool = Field(
        default=True,
        description="Do not write a file when a search produced no records.",
    )
