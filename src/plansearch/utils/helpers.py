"""General-purpose helpers shared across plansearch modules."""

from __future__ import annotations

import re
from pathlib import Path

_WHITESPACE_PATTERN = re.compile(r"\s+")
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_DIGIT_RUN_PATTERN = re.compile(r"\d+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace into single spaces."""

    return _WHITESPACE_PATTERN.sub(" ", text.strip())


def parse_number(text: str) -> float | None:
    """Return ``text`` as a number when the whole (trimmed) string is numeric."""

    candidate = text.strip()
    if not candidate or not _NUMBER_PATTERN.match(candidate):
        return None
    return float(candidate)


def first_digit_run(text: str) -> int | None:
    """Return the first embedded run of digits in ``text`` as an integer."""

    match = _DIGIT_RUN_PATTERN.search(text)
    if match is None:
        return None
    return int(match.group(0))


def ensure_directory(path: Path | str) -> Path:
    """Ensure that a directory exists and return the resolved Path."""

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


__all__ = [
    "normalize_whitespace",
    "parse_number",
    "first_digit_run",
    "ensure_directory",
]
