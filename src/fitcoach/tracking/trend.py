"""Short-term weight trend classification.

The check-in looks at the trailing week of weigh-ins and compares the newest
entry to the oldest one. The raw two-point delta is deliberately simple: the
smoothed EMA trend (see ``fitcoach.tracking.ema``) is only used for display.

Thresholds (kg over the window):
    |delta| <= 0.1                 stagnant, whatever the goal
    Maintenance  delta > 0.3       gaining too fast
                 delta < -0.3      losing too fast
    Fat Loss     delta >= -0.1     stagnant
    Gain goals   delta <= 0.1      stagnant
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from fitcoach.tracking.models import (
    Drift,
    Goal,
    TrendStatus,
    WeightAnalysis,
    WeightEntry,
)

WINDOW_DAYS = 7
STAGNANT_BAND_KG = 0.1
MAINTENANCE_BAND_KG = 0.3


def entries_in_window(
    weights: Iterable[WeightEntry],
    today: date,
    window_days: int = WINDOW_DAYS,
) -> list[WeightEntry]:
    """Return entries from the last ``window_days`` days (today inclusive), oldest first."""
    in_window = [
        w for w in weights if 0 <= (today - w.measured_at).days < window_days
    ]
    return sorted(in_window, key=lambda w: w.measured_at)


def analyze_weights(
    weights: Iterable[WeightEntry],
    goal: Goal,
    today: Optional[date] = None,
    window_days: int = WINDOW_DAYS,
) -> WeightAnalysis:
    """
    Classify the weight trend over the trailing window against a goal.

    Args:
        weights: Weight entries (any order, any date range)
        goal: The user's active goal
        today: Reference date for the window (default: today)
        window_days: Window length in days, today inclusive

    Returns:
        WeightAnalysis with status and newest-minus-oldest delta in kg.
        With fewer than two entries in the window the status is
        INSUFFICIENT and delta is 0.

    Example:
        >>> from datetime import date
        >>> entries = [WeightEntry(date(2025, 1, 1), 80.0),
        ...            WeightEntry(date(2025, 1, 5), 79.5)]
        >>> analyze_weights(entries, Goal.FAT_LOSS, today=date(2025, 1, 6)).status
        <TrendStatus.ON_TRACK: 'on_track'>
    """
    if today is None:
        today = date.today()
    goal = Goal.parse(goal)

    window = entries_in_window(weights, today, window_days)
    if len(window) < 2:
        return WeightAnalysis(status=TrendStatus.INSUFFICIENT, delta=0.0, entries=len(window))

    # Scale readings carry one decimal; round away float noise so 80.1 - 80.0
    # lands exactly on the 0.1 band edge.
    delta = round(window[-1].weight_kg - window[0].weight_kg, 3)

    return WeightAnalysis(
        status=classify_delta(delta, goal),
        delta=delta,
        entries=len(window),
    )


def classify_delta(delta: float, goal: Goal) -> TrendStatus:
    """Map a window delta (kg) to a trend status for the goal."""
    if abs(delta) <= STAGNANT_BAND_KG:
        return TrendStatus.STAGNANT

    if goal is Goal.MAINTENANCE:
        if delta > MAINTENANCE_BAND_KG:
            return TrendStatus.GAIN_TOO_FAST
        if delta < -MAINTENANCE_BAND_KG:
            return TrendStatus.LOSS_TOO_FAST
        return TrendStatus.ON_TRACK

    if goal is Goal.FAT_LOSS:
        return TrendStatus.STAGNANT if delta >= -STAGNANT_BAND_KG else TrendStatus.ON_TRACK

    # Muscle Gain, Strength & Conditioning
    return TrendStatus.STAGNANT if delta <= STAGNANT_BAND_KG else TrendStatus.ON_TRACK


def drift_for(goal: Goal, delta: float) -> Optional[Drift]:
    """Direction of weight change, reported for Maintenance users only."""
    if Goal.parse(goal) is not Goal.MAINTENANCE:
        return None
    if delta > 0:
        return Drift.UP
    if delta < 0:
        return Drift.DOWN
    return None
