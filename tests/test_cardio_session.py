"""Tests for the live cardio session engine."""

from __future__ import annotations

import time

import pytest

from fitcoach.cardio.models import (
    CardioInterval,
    CardioMode,
    CardioPlan,
    IntervalType,
    LoggedCardioInterval,
)
from fitcoach.cardio.session import (
    CardioSession,
    SessionState,
    session_intervals,
    summarize_session,
)
from fitcoach.cardio.templates import sprint_template
from fitcoach.cardio.ticker import SessionTicker
from fitcoach.exceptions import SessionClosedError


def steady(seconds: float, label: str = "Block") -> CardioInterval:
    return CardioInterval(type=IntervalType.STEADY, duration_sec=seconds, label=label)


def plan_of(*durations: float, mode: CardioMode = CardioMode.OTHER, cooldown=None) -> CardioPlan:
    return CardioPlan(
        mode=mode,
        intervals=tuple(steady(d, f"Block {i}") for i, d in enumerate(durations)),
        cooldown_sec=cooldown,
    )


def tick(session: CardioSession, n: int) -> None:
    for _ in range(n):
        session.tick()


class TestSessionIntervals:
    def test_cooldown_appended(self) -> None:
        intervals = session_intervals(plan_of(60, cooldown=180))
        assert len(intervals) == 2
        assert intervals[-1].label == "Cooldown"
        assert intervals[-1].duration_sec == 180
        assert intervals[-1].type is IntervalType.STEADY

    def test_no_cooldown(self) -> None:
        assert len(session_intervals(plan_of(60))) == 1
        assert len(session_intervals(plan_of(60, cooldown=0))) == 1


class TestTimer:
    """Start, tick and auto-advance."""

    def test_initial_state(self) -> None:
        session = CardioSession(plan_of(60, 30))
        assert session.state is SessionState.IDLE
        assert session.index == 0
        assert session.remaining_sec == 60

    def test_tick_before_start_does_nothing(self) -> None:
        session = CardioSession(plan_of(60, 30))
        tick(session, 5)
        assert session.elapsed_sec == 0

    def test_auto_advance_through_plan(self) -> None:
        session = CardioSession(plan_of(60, 30))
        session.start()
        tick(session, 60)
        assert session.index == 1
        assert session.elapsed_sec == 0
        assert session.logs[0].actual_time_sec == 60

        tick(session, 30)
        assert session.index == 2
        assert session.state is SessionState.COMPLETE
        assert not session.running
        assert session.logs[1].actual_time_sec == 30

    def test_extra_ticks_after_complete_are_ignored(self) -> None:
        session = CardioSession(plan_of(5))
        session.start()
        tick(session, 10)
        assert session.index == 1
        assert session.logs[0].actual_time_sec == 5

    def test_toggle_pauses(self) -> None:
        session = CardioSession(plan_of(60))
        session.toggle()
        tick(session, 10)
        session.toggle()
        assert session.state is SessionState.PAUSED
        tick(session, 10)
        assert session.elapsed_sec == 10
        session.toggle()
        assert session.state is SessionState.RUNNING

    def test_zero_length_intervals_pass_through(self) -> None:
        session = CardioSession(plan_of(0, float("nan"), 30))
        session.start()
        assert session.index == 2
        assert session.logs[0].actual_time_sec == 0


class TestNavigation:
    """Skip and previous."""

    def test_skip_logs_time_spent(self) -> None:
        session = CardioSession(plan_of(60, 30))
        session.start()
        tick(session, 10)
        session.skip()
        assert session.index == 1
        assert session.logs[0].actual_time_sec == 10
        assert session.elapsed_sec == 0

    def test_skip_on_complete_is_noop(self) -> None:
        session = CardioSession(plan_of(1))
        session.start()
        tick(session, 1)
        session.skip()
        assert session.index == 1

    def test_prev_resets_interval(self) -> None:
        session = CardioSession(plan_of(60, 30))
        session.start()
        tick(session, 60)
        session.prev()
        assert session.index == 0
        assert session.logs[0].actual_time_sec == 0
        assert not session.running

    def test_prev_at_start_stays(self) -> None:
        session = CardioSession(plan_of(60))
        session.prev()
        assert session.index == 0


class TestUpdateLog:
    def test_sets_value(self) -> None:
        session = CardioSession(plan_of(60))
        session.update_log(0, "avg_hr", 150)
        assert session.logs[0].avg_hr == 150

    def test_bad_field(self) -> None:
        session = CardioSession(plan_of(60))
        with pytest.raises(ValueError):
            session.update_log(0, "label", 1)

    def test_bad_index(self) -> None:
        session = CardioSession(plan_of(60))
        with pytest.raises(IndexError):
            session.update_log(3, "avg_hr", 150)

    def test_bad_numbers_are_cleaned(self) -> None:
        session = CardioSession(plan_of(60))
        session.update_log(0, "actual_time_sec", -20)
        session.update_log(0, "avg_hr", float("nan"))
        assert session.logs[0].actual_time_sec == 0
        assert session.logs[0].avg_hr is None


class TestFinish:
    """Scoring at the end of a session."""

    def test_unlogged_intervals_use_planned_duration(self) -> None:
        summary = CardioSession(plan_of(60, 30)).finish()
        assert summary.total_time_sec == 90
        assert [log.actual_time_sec for log in summary.intervals] == [60, 30]

    def test_skipped_and_planned_mix(self) -> None:
        session = CardioSession(plan_of(60, 30))
        session.start()
        tick(session, 10)
        session.skip()
        summary = session.finish()
        assert summary.total_time_sec == 40

    def test_machine_fields_fall_back_to_plan(self) -> None:
        plan = CardioPlan(
            mode=CardioMode.TREADMILL,
            intervals=(
                CardioInterval(
                    type=IntervalType.INTERVAL,
                    duration_sec=360,
                    target_speed_kmh=10,
                    target_incline_pct=1,
                ),
            ),
        )
        session = CardioSession(plan)
        session.update_log(0, "speed_kmh", None)
        summary = session.finish()
        assert summary.intervals[0].speed_kmh == 10
        assert summary.intervals[0].incline_pct == 1
        assert summary.total_distance_km == 1.0

    def test_notes_trimmed(self) -> None:
        assert CardioSession(plan_of(60)).finish("  ").notes is None
        assert CardioSession(plan_of(60)).finish(" felt good ").notes == "felt good"

    def test_closed_session_rejects_actions(self) -> None:
        session = CardioSession(plan_of(60))
        session.finish()
        assert session.state is SessionState.FINISHED
        with pytest.raises(SessionClosedError):
            session.start()
        with pytest.raises(SessionClosedError):
            session.finish()

    def test_cancel_produces_nothing(self) -> None:
        session = CardioSession(plan_of(60))
        session.start()
        session.cancel()
        assert session.summary is None
        assert session.state is SessionState.CANCELLED
        with pytest.raises(SessionClosedError):
            session.tick()


class TestCountAsLiss:
    def test_single_steady_machine_block(self) -> None:
        assert CardioSession(plan_of(1200, mode=CardioMode.STAIRMASTER)).count_as_liss

    def test_cooldown_does_not_disqualify(self) -> None:
        plan = plan_of(1200, mode=CardioMode.BIKE, cooldown=180)
        assert CardioSession(plan).count_as_liss

    def test_sprints_are_not_liss(self) -> None:
        assert not CardioSession(sprint_template()).count_as_liss

    def test_override(self) -> None:
        plan = plan_of(1200, mode=CardioMode.STAIRMASTER)
        assert not CardioSession(plan, count_as_liss=False).count_as_liss
        assert CardioSession(sprint_template(), count_as_liss=True).finish().count_as_liss


class TestSummarizeSession:
    """Tests for summarize_session arithmetic."""

    def test_time_weighted_hr_over_whole_session(self) -> None:
        logs = [
            LoggedCardioInterval(actual_time_sec=600, avg_hr=140, speed_kmh=6),
            LoggedCardioInterval(actual_time_sec=600),
        ]
        summary = summarize_session("Treadmill", logs, count_as_liss=False)
        assert summary.total_time_sec == 1200
        assert summary.total_distance_km == 1.0
        assert summary.avg_hr == 70

    def test_no_hr_or_speed(self) -> None:
        summary = summarize_session("Bike", [LoggedCardioInterval(actual_time_sec=600)], False)
        assert summary.avg_hr is None
        assert summary.total_distance_km is None

    def test_empty_session(self) -> None:
        summary = summarize_session("Other", [], False)
        assert summary.total_time_sec == 0
        assert summary.avg_hr is None

    def test_hr_rounds_half_up(self) -> None:
        logs = [
            LoggedCardioInterval(actual_time_sec=1, avg_hr=141),
            LoggedCardioInterval(actual_time_sec=1, avg_hr=140),
        ]
        assert summarize_session("Run", logs, False).avg_hr == 141


class TestSessionTicker:
    def test_drives_session_to_completion(self) -> None:
        session = CardioSession(plan_of(2, 1))
        ticker = SessionTicker(session, tick_seconds=0.01)
        session.start()
        ticker.start()
        deadline = time.monotonic() + 5
        while session.state is not SessionState.COMPLETE and time.monotonic() < deadline:
            time.sleep(0.01)
        ticker.stop(timeout=1)
        assert session.state is SessionState.COMPLETE
        assert not ticker.is_running

    def test_stops_when_session_closed(self) -> None:
        session = CardioSession(plan_of(60))
        ticker = SessionTicker(session, tick_seconds=0.01)
        session.start()
        ticker.start()
        session.cancel()
        deadline = time.monotonic() + 5
        while ticker.is_running and time.monotonic() < deadline:
            time.sleep(0.01)
        assert not ticker.is_running
