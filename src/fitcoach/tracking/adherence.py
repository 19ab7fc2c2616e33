"""Weekly LISS adherence aggregation."""

from __future__ import annotations

from dataclasses import dataclass

from fitcoach.cardio.liss import liss_minutes
from fitcoach.cardio.models import CardioSessionSummary
from fitcoach.tracking.models import Adherence, CheckinPlan, TrendStatus


@dataclass(frozen=True)
class SessionContribution:
    """What one finished cardio session adds to the week's counters."""

    liss_minutes: int
    counts_as_liss_session: bool

    def to_dict(self) -> dict:
        return {
            "liss_minutes": self.liss_minutes,
            "counts_as_liss_session": self.counts_as_liss_session,
        }


def session_contribution(
    summary: CardioSessionSummary,
    liss_min_per_session: int,
) -> SessionContribution:
    """
    Score a finished session against the current per-session LISS threshold.

    Minutes count only when the session is flagged ``count_as_liss``; it
    counts as a LISS session only if those minutes reach the threshold in
    force when it is recorded.
    """
    minutes = liss_minutes(summary)
    eligible = summary.count_as_liss
    return SessionContribution(
        liss_minutes=minutes,
        counts_as_liss_session=eligible and minutes >= liss_min_per_session,
    )


def fold_session(current: Adherence, contribution: SessionContribution) -> Adherence:
    """Return the week's counters after one more cardio session. Never decreases."""
    return Adherence(
        liss_minutes=current.liss_minutes + max(0, contribution.liss_minutes),
        liss_sessions=current.liss_sessions + (1 if contribution.counts_as_liss_session else 0),
        sessions_total=current.sessions_total + 1,
    )


def needs_adherence_warning(
    status: TrendStatus,
    adherence: Adherence,
    checkin: CheckinPlan,
) -> bool:
    """
    Flag a stagnant trend while the week's LISS plan is not yet met.

    Shown next to the check-in so calories are not cut further before the
    prescribed cardio has actually been done.
    """
    if status is not TrendStatus.STAGNANT:
        return False
    minutes_goal = checkin.weekly_liss_minutes
    sessions_goal = checkin.liss_sessions_per_week
    below_minutes = minutes_goal > 0 and adherence.liss_minutes < minutes_goal
    below_sessions = sessions_goal > 0 and adherence.liss_sessions < sessions_goal
    return below_minutes or below_sessions
