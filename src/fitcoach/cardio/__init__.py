"""Interval cardio sessions: plans, live engine, LISS scoring and templates."""

from __future__ import annotations

from fitcoach.cardio.liss import is_liss_session, liss_minutes
from fitcoach.cardio.models import (
    CardioInterval,
    CardioMode,
    CardioPlan,
    CardioSessionSummary,
    HeartRateRange,
    IntervalType,
    LoggedCardioInterval,
)
from fitcoach.cardio.session import CardioSession, SessionState, summarize_session
from fitcoach.cardio.ticker import SessionTicker

__all__ = [
    "CardioInterval",
    "CardioMode",
    "CardioPlan",
    "CardioSession",
    "CardioSessionSummary",
    "HeartRateRange",
    "IntervalType",
    "LoggedCardioInterval",
    "SessionState",
    "SessionTicker",
    "is_liss_session",
    "liss_minutes",
    "summarize_session",
]
