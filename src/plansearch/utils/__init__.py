"""Utility helpers shared across plansearch modules."""

from .helpers import ensure_directory, first_digit_run, normalize_whitespace, parse_number
from .logging import configure_logging, get_logger, log_timing, logging_context

__all__ = [
    "configure_logging",
    "get_logger",
    "logging_context",
    "log_timing",
    "ensure_directory",
    "first_digit_run",
    "normalize_whitespace",
    "parse_number",
]
