"""Exponentially smoothed weight trend for display.

Daily scale readings jump around by half a kilo from water and gut
contents. Weight listings show a Hacker's Diet style trend next to each
reading:

    T_n = T_{n-1} + α × (W_n - T_{n-1})

with α adjusted for gaps between weigh-ins (α_t = 1 - (1 - α)^t). The
check-in classification does not use this value.
"""

from __future__ import annotations

from fitcoach.tracking.models import WeightEntry

DEFAULT_SMOOTHING = 0.1


def time_scaled_alpha(base_alpha: float, days_elapsed: int) -> float:
    """Adjust the smoothing factor for ``days_elapsed`` days without a reading."""
    if days_elapsed <= 0:
        days_elapsed = 1
    return 1 - (1 - base_alpha) ** days_elapsed


def update_trend(
    prev_trend: float,
    today_weight: float,
    smoothing: float = DEFAULT_SMOOTHING,
    days_elapsed: int = 1,
) -> float:
    """Return the next trend value given the previous one and a new reading."""
    adjusted_alpha = time_scaled_alpha(smoothing, days_elapsed)
    return prev_trend + adjusted_alpha * (today_weight - prev_trend)


def trend_series(
    entries: list[WeightEntry],
    smoothing: float = DEFAULT_SMOOTHING,
) -> list[float]:
    """
    Compute trend values for weight entries in chronological order.

    The first reading seeds the trend; later readings are gap-aware.

    Args:
        entries: Weight entries sorted by measured_at ascending
        smoothing: Base smoothing factor

    Returns:
        Trend values, same length as entries
    """
    if not entries:
        return []

    trends = [entries[0].weight_kg]
    for prev, curr in zip(entries, entries[1:]):
        days_elapsed = (curr.measured_at - prev.measured_at).days
        trends.append(update_trend(trends[-1], curr.weight_kg, smoothing, days_elapsed))
    return trends
