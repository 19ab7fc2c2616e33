"""Live interval cardio session engine.

A CardioSession walks through a plan's intervals one second at a time:

    IDLE --start--> RUNNING <--toggle--> PAUSED
                       |
                  last interval done
                       v
                   COMPLETE

``finish()`` is allowed from any state and returns the scored summary;
``cancel()`` discards everything. All mutators take the same lock, so timer
ticks from ``SessionTicker`` and user actions never interleave.
"""

from __future__ import annotations

import logging
import math
import threading
from enum import Enum
from typing import Optional

import numpy as np

from fitcoach.cardio.liss import is_liss_session
from fitcoach.cardio.models import (
    EDITABLE_LOG_FIELDS,
    CardioInterval,
    CardioPlan,
    CardioSessionSummary,
    IntervalType,
    LoggedCardioInterval,
)
from fitcoach.exceptions import SessionClosedError
from fitcoach.units import as_duration, round_half_up

logger = logging.getLogger(__name__)

COOLDOWN_LABEL = "Cooldown"


class SessionState(Enum):
    """Lifecycle state of a cardio session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETE = "complete"
    FINISHED = "finished"
    CANCELLED = "cancelled"


def session_intervals(plan: CardioPlan) -> list[CardioInterval]:
    """Plan intervals plus a trailing steady cooldown when the plan has one."""
    intervals = list(plan.intervals)
    if as_duration(plan.cooldown_sec) > 0:
        intervals.append(
            CardioInterval(
                type=IntervalType.STEADY,
                label=COOLDOWN_LABEL,
                duration_sec=as_duration(plan.cooldown_sec),
            )
        )
    return intervals


def _known(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value != 0


def summarize_session(
    mode: str,
    logs: list[LoggedCardioInterval],
    count_as_liss: bool,
    notes: Optional[str] = None,
) -> CardioSessionSummary:
    """
    Score frozen interval logs.

    total_time_sec is the sum of logged times. Distance sums speed × time
    over intervals with a known speed. Average HR is time-weighted over
    intervals that report HR and divided by the whole session time.

    Args:
        mode: Cardio mode of the plan
        logs: One log per interval, already defaulted
        count_as_liss: Resolved LISS flag for the session
        notes: Free-text notes

    Returns:
        CardioSessionSummary
    """
    times = np.array([max(0.0, float(log.actual_time_sec or 0)) for log in logs], dtype=float)
    speeds = np.array(
        [float(log.speed_kmh) if _known(log.speed_kmh) else 0.0 for log in logs], dtype=float
    )
    hrs = np.array(
        [float(log.avg_hr) if _known(log.avg_hr) else 0.0 for log in logs], dtype=float
    )

    total_time_sec = float(times.sum())
    total_distance_km = float((speeds * times).sum() / 3600)
    weighted_hr = float((hrs * times).sum())

    avg_hr: Optional[int] = None
    if total_time_sec > 0 and weighted_hr > 0:
        avg_hr = round_half_up(weighted_hr / total_time_sec)

    if total_time_sec.is_integer():
        total_time_sec = int(total_time_sec)

    return CardioSessionSummary(
        mode=mode,
        total_time_sec=total_time_sec,
        total_distance_km=round(total_distance_km, 2) if total_distance_km > 0 else None,
        avg_hr=avg_hr,
        count_as_liss=count_as_liss,
        intervals=logs,
        notes=(notes or "").strip() or None,
    )


class CardioSession:
    """
    Single-owner controller for one live cardio workout.

    Attributes:
        plan: The workout template (never modified)
        intervals: Plan intervals plus the implicit cooldown
        logs: One editable log per interval
        count_as_liss: Whether the session should count toward weekly LISS.
            Defaults to the automatic LISS rule on the planned intervals.
    """

    def __init__(self, plan: CardioPlan, count_as_liss: Optional[bool] = None):
        self.plan = plan
        self.intervals = session_intervals(plan)
        self.logs = [
            LoggedCardioInterval(
                label=interval.label,
                actual_time_sec=0,
                avg_hr=None,
                speed_kmh=interval.target_speed_kmh,
                incline_pct=interval.target_incline_pct,
                level=interval.target_level,
            )
            for interval in self.intervals
        ]
        if count_as_liss is None:
            count_as_liss = is_liss_session(plan.mode, plan.intervals)
        self.count_as_liss = count_as_liss

        self._lock = threading.Lock()
        self._index = 0
        self._elapsed = 0
        self._running = False
        self._started = False
        self._closed_as: Optional[SessionState] = None
        self._summary: Optional[CardioSessionSummary] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def index(self) -> int:
        return self._index

    @property
    def elapsed_sec(self) -> int:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> SessionState:
        if self._closed_as is not None:
            return self._closed_as
        if self._index >= len(self.intervals):
            return SessionState.COMPLETE
        if self._running:
            return SessionState.RUNNING
        return SessionState.PAUSED if self._started else SessionState.IDLE

    @property
    def current(self) -> Optional[CardioInterval]:
        if self._index < len(self.intervals):
            return self.intervals[self._index]
        return None

    @property
    def remaining_sec(self) -> int:
        """Seconds left in the current interval (0 when complete)."""
        current = self.current
        if current is None:
            return 0
        return max(as_duration(current.duration_sec) - self._elapsed, 0)

    @property
    def summary(self) -> Optional[CardioSessionSummary]:
        return self._summary

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed_as is not None:
            raise SessionClosedError(
                f"Session already {self._closed_as.value}",
                details={"state": self._closed_as.value},
            )

    def start(self) -> None:
        """Start or resume the timer."""
        with self._lock:
            self._ensure_open()
            self._start()

    def pause(self) -> None:
        """Freeze the timer."""
        with self._lock:
            self._ensure_open()
            self._running = False

    def toggle(self) -> None:
        """Start/Pause button."""
        with self._lock:
            self._ensure_open()
            if self._running:
                self._running = False
            else:
                self._start()

    def tick(self) -> None:
        """Advance the clock by one second if running."""
        with self._lock:
            self._ensure_open()
            if not self._running:
                return
            if self.current is None:
                self._running = False
                return
            self._elapsed += 1
            self._advance_if_due()

    def skip(self) -> None:
        """Finish the current interval now, at the time spent so far."""
        with self._lock:
            self._ensure_open()
            if self.current is None:
                return
            self._finalize_current(max(self._elapsed, 0))
            self._advance_if_due()

    def prev(self) -> None:
        """Go back one interval and clear its logged time. Stops the timer."""
        with self._lock:
            self._ensure_open()
            self._running = False
            self._elapsed = 0
            self._index = max(0, self._index - 1)
            if self._index < len(self.logs):
                self.logs[self._index].actual_time_sec = 0

    def update_log(self, index: int, field: str, value: Optional[float]) -> None:
        """
        Manually correct a logged value.

        Args:
            index: Interval index
            field: One of actual_time_sec, avg_hr, speed_kmh, incline_pct, level
            value: New value, or None to clear

        Raises:
            ValueError: Unknown field
            IndexError: No such interval
        """
        if field not in EDITABLE_LOG_FIELDS:
            raise ValueError(f"field must be one of {EDITABLE_LOG_FIELDS}, got '{field}'")
        with self._lock:
            self._ensure_open()
            if not 0 <= index < len(self.logs):
                raise IndexError(f"interval index {index} out of range")
            if field == "actual_time_sec":
                value = as_duration(value)
            elif value is not None and not math.isfinite(value):
                value = None
            setattr(self.logs[index], field, value)

    def finish(self, notes: Optional[str] = None) -> CardioSessionSummary:
        """
        End the workout and score it.

        Valid in any state. Intervals never logged are reported at their
        planned duration; unset machine fields fall back to the plan.
        """
        with self._lock:
            self._ensure_open()
            self._running = False
            frozen = [self._frozen_log(i) for i in range(len(self.intervals))]
            self._summary = summarize_session(
                self.plan.mode, frozen, self.count_as_liss, notes
            )
            self._closed_as = SessionState.FINISHED
            logger.info(
                "Cardio session finished: %s s over %d intervals (liss=%s)",
                self._summary.total_time_sec,
                len(frozen),
                self.count_as_liss,
            )
            return self._summary

    def cancel(self) -> None:
        """Abort without producing a summary."""
        with self._lock:
            self._ensure_open()
            self._running = False
            self._closed_as = SessionState.CANCELLED
            logger.info("Cardio session cancelled at interval %d", self._index)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _start(self) -> None:
        if self.current is None:
            return
        self._running = True
        self._started = True
        self._advance_if_due()

    def _advance_if_due(self) -> None:
        # Zero-length intervals are passed straight through while running.
        while self._running and self.current is not None:
            duration = as_duration(self.current.duration_sec)
            if self._elapsed < duration:
                return
            self._finalize_current(duration)

    def _finalize_current(self, actual_time: int) -> None:
        log = self.logs[self._index]
        log.label = self.intervals[self._index].label
        log.actual_time_sec = max(actual_time, 0)
        logger.debug("Interval %d logged at %s s", self._index, log.actual_time_sec)
        self._elapsed = 0
        self._index += 1
        if self._index >= len(self.intervals):
            self._index = len(self.intervals)
            self._running = False

    def _frozen_log(self, i: int) -> LoggedCardioInterval:
        interval = self.intervals[i]
        log = self.logs[i]
        actual = log.actual_time_sec if log.actual_time_sec and log.actual_time_sec > 0 else None
        return LoggedCardioInterval(
            label=interval.label,
            actual_time_sec=actual if actual is not None else as_duration(interval.duration_sec),
            avg_hr=log.avg_hr,
            speed_kmh=log.speed_kmh if log.speed_kmh is not None else interval.target_speed_kmh,
            incline_pct=(
                log.incline_pct if log.incline_pct is not None else interval.target_incline_pct
            ),
            level=log.level if log.level is not None else interval.target_level,
        )
