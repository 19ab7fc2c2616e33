"""LISS (low-intensity steady state) qualification rules."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from fitcoach.cardio.models import (
    STEADY_STATE_MODES,
    CardioInterval,
    CardioMode,
    CardioSessionSummary,
    IntervalType,
    LoggedCardioInterval,
)
from fitcoach.units import minutes_from_seconds

AnyInterval = Union[CardioInterval, LoggedCardioInterval]


def _is_steady(interval: AnyInterval) -> bool:
    # Logged intervals carry no type; only planned intervals can prove steadiness.
    return isinstance(interval, CardioInterval) and interval.type is IntervalType.STEADY


def is_liss_session(
    mode: Union[str, CardioMode, None],
    intervals: Sequence[AnyInterval],
    marked: bool = False,
) -> bool:
    """
    Decide whether a cardio session counts as LISS.

    A session qualifies if any of these hold:
    - the user explicitly marked it as LISS
    - it is a single steady interval on a steady-state machine
      (treadmill, stairmaster, bike, run, row)
    - any interval label contains "liss" (case-insensitive)

    Args:
        mode: Cardio mode of the plan
        intervals: Planned or logged intervals
        marked: User ticked "count as LISS"

    Returns:
        True if the session qualifies
    """
    if marked:
        return True
    if not intervals:
        return False

    mode_name = mode.value if isinstance(mode, CardioMode) else str(mode or "")
    if len(intervals) == 1 and _is_steady(intervals[0]):
        if mode_name.lower() in STEADY_STATE_MODES:
            return True

    return any(
        isinstance(interval.label, str) and "liss" in interval.label.lower()
        for interval in intervals
    )


def liss_minutes(summary: Optional[CardioSessionSummary]) -> int:
    """
    Minutes a finished session contributes to weekly LISS.

    ``count_as_liss`` is final: it was defaulted from the planned intervals
    when the session started and may have been overridden by the user, so
    interval labels are not consulted again here.
    """
    if summary is None or not summary.count_as_liss:
        return 0
    if summary.total_time_sec is None or summary.total_time_sec <= 0:
        return 0
    return minutes_from_seconds(summary.total_time_sec)
