"""Core domain entities: plan records and search queries."""

from __future__ import annotations

import re
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .catalogue import LOT_TYPES, PARISHES, lot_type_name, parish_name

LOT_NUMBER_PATTERN = re.compile(r"^\d+((-\d+)?|(,\d+)+)$")
LOT_NUMBER_HINT = "Please enter a lot number, range or list like 2 or 1-7 or 3,5,10"

RECORD_FIELDS: Tuple[str, ...] = (
    "deposit",
    "w_no",
    "plan_no",
    "dos_no",
    "clsr_no",
    "district",
    "plan_type",
    "comments",
)


class QueryValidationError(ValueError):
    """Raised when query parameters fall outside the accepted forms."""


def validate_lot_number(value: str) -> str:
    """Return ``value`` trimmed, or raise :class:`QueryValidationError`."""

    candidate = value.strip()
    if not LOT_NUMBER_PATTERN.match(candidate):
        raise QueryValidationError(LOT_NUMBER_HINT)
    return candidate


class Record(BaseModel):
    """One plan entry as listed by the registry search.

    ``deposit`` is the natural key. An empty ``plan_no`` means the entry has no
    plan; it is never ``None``. ``lot`` is only populated by fetch modes that
    keep the leading Lot column.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    deposit: str = Field(default="", description="Registry deposit identifier")
    w_no: str = Field(default="", alias="wNo")
    plan_no: str = Field(default="", alias="planNo")
    dos_no: str = Field(default="", alias="dosNo")
    clsr_no: str = Field(default="", alias="clsrNo")
    district: str = Field(default="")
    plan_type: str = Field(default="", alias="planType")
    comments: str = Field(default="")
    lot: str | None = Field(default=None)

    @field_validator(*RECORD_FIELDS, mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("lot", mode="before")
    @classmethod
    def _strip_lot(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value).strip()

    @property
    def has_plan(self) -> bool:
        return bool(self.plan_no)

    def as_row(self, *, include_lot: bool = False) -> Dict[str, str]:
        """Return the export row keyed by field name."""

        row: Dict[str, str] = {}
        if include_lot:
            row["lot"] = self.lot or ""
        for name in RECORD_FIELDS:
            row[name] = getattr(self, name)
        return row


class Query(BaseModel):
    """A single lot number / lot type / parish search."""

    model_config = ConfigDict(frozen=True)

    lot_number: str = Field(..., min_length=1)
    lot_type: int = Field(..., ge=1)
    parish: int = Field(..., ge=1)

    @field_validator("lot_number")
    @classmethod
    def _validate_lot_number(cls, value: str) -> str:
        return validate_lot_number(value)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "Query":
        if self.lot_type > len(LOT_TYPES):
            raise ValueError(f"lot_type must be between 1 and {len(LOT_TYPES)}")
        if self.parish > len(PARISHES):
            raise ValueError(f"parish must be between 1 and {len(PARISHES)}")
        return self

    @property
    def lot_type_name(self) -> str:
        return lot_type_name(self.lot_type)

    @property
    def parish_name(self) -> str:
        return parish_name(self.parish)

    def describe(self) -> str:
        return f"lot {self.lot_number} ({self.lot_type_name}, {self.parish_name})"


__all__ = [
    "LOT_NUMBER_HINT",
    "LOT_NUMBER_PATTERN",
    "Query",
    "QueryValidationError",
    "RECORD_FIELDS",
    "Record",
    "validate_lot_number",
]
