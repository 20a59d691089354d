"""Size and timestamp text formatting used by render components."""

from __future__ import annotations

import math
from datetime import datetime

SIZE_UNITS = ("B", "K", "M", "G", "T", "P", "E", "Z", "Y")
DISTANT_MONTHS = 6


def _round_half_up(value: float, digits: int) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def format_size(size: int, compact: bool = False) -> str:
    """Format ``size`` bytes with a binary unit suffix.

    Byte counts under 1024 print as-is. Larger values use the smallest unit
    whose rounded mantissa stays below 1024, with one decimal place, or none
    when ``compact`` is set.
    """
    if size < 1024:
        return f"{size}B"

    digits = 0 if compact else 1
    last = len(SIZE_UNITS) - 1
    for exponent in range(1, len(SIZE_UNITS)):
        mantissa = _round_half_up(size / (1024**exponent), digits)
        if mantissa < 1024 or exponent == last:
            if compact:
                return f"{int(mantissa)}{SIZE_UNITS[exponent]}"
            return f"{mantissa:.1f}{SIZE_UNITS[exponent]}"
    raise AssertionError("unreachable")


def months_between(start: datetime, end: datetime) -> int:
    """Count whole calendar months from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    start_rest = (start.day, start.hour, start.minute, start.second, start.microsecond)
    end_rest = (end.day, end.hour, end.minute, end.second, end.microsecond)
    if months > 0 and end_rest < start_rest:
        months -= 1
    elif months < 0 and end_rest > start_rest:
        months += 1
    return months


def is_distant(timestamp: datetime, now: datetime) -> bool:
    """Return whether ``timestamp`` lies six or more calendar months from ``now``.

    Far-future timestamps are distant too.
    """
    return abs(months_between(timestamp.astimezone(), now.astimezone())) >= DISTANT_MONTHS


def format_timestamp(timestamp: datetime, now: datetime, recent_pattern: str, distant_pattern: str) -> str:
    """Render ``timestamp`` in local time with the pattern its age selects."""
    pattern = distant_pattern if is_distant(timestamp, now) else recent_pattern
    return timestamp.astimezone().strftime(pattern)


__all__ = [
    "SIZE_UNITS",
    "DISTANT_MONTHS",
    "format_size",
    "months_between",
    "is_distant",
    "format_timestamp",
]
