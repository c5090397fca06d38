"""Export helpers for ordered plan records."""

from .csv_writer import HEADER_LABELS, column_order, default_filename, format_day, write_records

__all__ = ["HEADER_LABELS", "column_order", "default_filename", "format_day", "write_records"]
