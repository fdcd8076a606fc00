"""CLI helper utilities for roomsearch."""

from __future__ import annotations

import re

from roomsearch.core.errors import RoomSearchValueError

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_thread_count(raw: str) -> int:
    """Parse the positional thread-count argument.

    Follows C ``atoi`` rules: leading whitespace, an optional sign and digits are read and
    anything after them is ignored; text without a leading number reads as ``0``. Counts below
    one are rejected.
    """
    match = _LEADING_INT_RE.match(raw)
    value = int(match.group(1)) if match else 0
    if value < 1:
        raise RoomSearchValueError(f"Thread count must be a positive integer (got '{raw}')")
    return value


__all__ = ["parse_thread_count"]
