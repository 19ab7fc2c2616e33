"""Rounding and time helpers shared by the check-in and cardio code."""

from __future__ import annotations

import math
import re
from datetime import date, timedelta
from typing import Optional, Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going toward +infinity.

    Python's built-in ``round`` uses banker's rounding (``round(12.5) == 12``),
    so stored targets would drift depending on parity. We always round .5 up.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-12.5)
        -12
    """
    return int(math.floor(value + 0.5))


def as_duration(value: Optional[Number]) -> int:
    """Coerce a planned duration to whole non-negative seconds.

    Unknown, NaN, infinite or negative durations become 0.
    """
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(number)


def minutes_from_seconds(seconds: Number) -> int:
    """Convert seconds to whole minutes (half-up)."""
    return round_half_up(seconds / 60)


def week_start(day: date, week_starts_on: int = 0) -> date:
    """Return the first day of the week containing ``day``.

    Args:
        day: Any date
        week_starts_on: Weekday index the week starts on (0 = Monday)

    Returns:
        The week-start date (Monday by default)
    """
    offset = (day.weekday() - week_starts_on) % 7
    return day - timedelta(days=offset)


def format_duration(seconds: Number) -> str:
    """Format seconds as MM:SS."""
    total = as_duration(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_duration(text: str) -> int:
    """Parse "MM:SS" or plain seconds. Garbage yields 0."""
    cleaned = re.sub(r"[^0-9:]", "", text or "")
    if ":" not in cleaned:
        return int(cleaned) if cleaned else 0
    minutes, _, seconds = cleaned.partition(":")
    seconds = seconds.split(":")[0]
    return (int(minutes) if minutes else 0) * 60 + (int(seconds) if seconds else 0)
