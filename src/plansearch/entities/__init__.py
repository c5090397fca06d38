"""Domain entities for plansearch."""

from .catalogue import LOT_TYPES, PARISHES, lot_type_id, lot_type_name, parish_id, parish_name
from .core import (
    LOT_NUMBER_HINT,
    LOT_NUMBER_PATTERN,
    Query,
    QueryValidationError,
    Record,
    validate_lot_number,
)

__all__ = [
    "LOT_TYPES",
    "PARISHES",
    "LOT_NUMBER_HINT",
    "LOT_NUMBER_PATTERN",
    "Query",
    "QueryValidationError",
    "Record",
    "lot_type_id",
    "lot_type_name",
    "parish_id",
    "parish_name",
    "validate_lot_number",
]
