"""Escalation ladder across consecutive stagnant check-ins."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fitcoach.tracking.models import MAX_ESCALATION_LEVEL, PlanHistoryEntry, TrendStatus

# A follow-up check-in escalates only if it happens within this many whole
# days of the previous stagnant one.
ESCALATION_WINDOW_DAYS = 4


def days_since(timestamp: datetime, now: datetime) -> int:
    """Whole days elapsed between two timestamps (floored)."""
    return int((now - timestamp).total_seconds() // 86400)


def resolve_escalation_level(
    prior: Optional[PlanHistoryEntry],
    now: datetime,
) -> int:
    """
    Derive the escalation level for a new check-in.

    Level 0 unless the most recent history entry was stagnant and no more
    than ESCALATION_WINDOW_DAYS whole days old, in which case it is one
    step above the prior level (capped at 2). Any gap or any non-stagnant
    status resets the ladder.

    Args:
        prior: Most recent history entry, or None if there is none
        now: Current time (same timezone awareness as the entry timestamp)

    Returns:
        Escalation level 0, 1 or 2
    """
    if prior is None:
        return 0
    if prior.status is not TrendStatus.STAGNANT:
        return 0
    if days_since(prior.timestamp, now) > ESCALATION_WINDOW_DAYS:
        return 0
    return min(MAX_ESCALATION_LEVEL, (prior.level or 0) + 1)
