"""Tests for weekly weight trend classification."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from fitcoach.tracking.models import Drift, Goal, TrendStatus, WeightEntry
from fitcoach.tracking.trend import (
    analyze_weights,
    classify_delta,
    drift_for,
    entries_in_window,
)

TODAY = date(2025, 3, 10)


def weights_from(today: date, readings: dict[int, float]) -> list[WeightEntry]:
    """Build weigh-ins from {days_ago: kg}."""
    return [
        WeightEntry(measured_at=today - timedelta(days=days_ago), weight_kg=kg)
        for days_ago, kg in readings.items()
    ]


class TestWindow:
    """Tests for the trailing 7-day window."""

    def test_seven_days_ago_is_excluded(self) -> None:
        entries = weights_from(TODAY, {7: 81.0, 6: 80.0, 0: 79.0})
        window = entries_in_window(entries, TODAY)
        assert [e.weight_kg for e in window] == [80.0, 79.0]

    def test_future_entries_are_excluded(self) -> None:
        entries = [
            WeightEntry(TODAY + timedelta(days=1), 70.0),
            WeightEntry(TODAY, 80.0),
        ]
        assert len(entries_in_window(entries, TODAY)) == 1

    def test_sorted_oldest_first(self) -> None:
        entries = weights_from(TODAY, {0: 79.0, 5: 80.0, 2: 79.5})
        window = entries_in_window(entries, TODAY)
        assert [e.measured_at for e in window] == sorted(e.measured_at for e in entries)


class TestAnalyzeWeights:
    """Tests for analyze_weights."""

    def test_no_entries_is_insufficient(self) -> None:
        result = analyze_weights([], Goal.FAT_LOSS, today=TODAY)
        assert result.status is TrendStatus.INSUFFICIENT
        assert result.delta == 0

    def test_one_entry_is_insufficient(self) -> None:
        result = analyze_weights(weights_from(TODAY, {0: 80.0}), Goal.FAT_LOSS, today=TODAY)
        assert result.status is TrendStatus.INSUFFICIENT
        assert result.entries == 1

    def test_old_entries_do_not_count(self) -> None:
        entries = weights_from(TODAY, {10: 82.0, 0: 80.0})
        result = analyze_weights(entries, Goal.FAT_LOSS, today=TODAY)
        assert result.status is TrendStatus.INSUFFICIENT

    def test_delta_is_newest_minus_oldest(self) -> None:
        entries = weights_from(TODAY, {5: 80.0, 3: 78.0, 1: 79.5})
        result = analyze_weights(entries, Goal.FAT_LOSS, today=TODAY)
        assert result.delta == pytest.approx(-0.5)
        assert result.entries == 3

    def test_fat_loss_on_track(self) -> None:
        entries = weights_from(TODAY, {5: 80.0, 1: 79.5})
        assert analyze_weights(entries, Goal.FAT_LOSS, today=TODAY).status is TrendStatus.ON_TRACK

    def test_fat_loss_band_edge_is_stagnant(self) -> None:
        entries = weights_from(TODAY, {6: 80.0, 0: 79.9})
        assert analyze_weights(entries, Goal.FAT_LOSS, today=TODAY).status is TrendStatus.STAGNANT

    def test_fat_loss_gaining_is_stagnant(self) -> None:
        entries = weights_from(TODAY, {6: 80.0, 0: 80.5})
        assert analyze_weights(entries, Goal.FAT_LOSS, today=TODAY).status is TrendStatus.STAGNANT

    def test_goal_label_accepted(self) -> None:
        entries = weights_from(TODAY, {5: 80.0, 1: 79.5})
        assert analyze_weights(entries, "Fat Loss", today=TODAY).status is TrendStatus.ON_TRACK


class TestClassifyDelta:
    """Threshold table per goal."""

    @pytest.mark.parametrize(
        "delta,goal,expected",
        [
            (0.0, Goal.FAT_LOSS, TrendStatus.STAGNANT),
            (0.1, Goal.MUSCLE_GAIN, TrendStatus.STAGNANT),
            (-0.1, Goal.MAINTENANCE, TrendStatus.STAGNANT),
            (-0.5, Goal.FAT_LOSS, TrendStatus.ON_TRACK),
            (0.5, Goal.FAT_LOSS, TrendStatus.STAGNANT),
            (0.5, Goal.MUSCLE_GAIN, TrendStatus.ON_TRACK),
            (0.5, Goal.STRENGTH, TrendStatus.ON_TRACK),
            (-0.5, Goal.MUSCLE_GAIN, TrendStatus.STAGNANT),
            (-0.5, Goal.STRENGTH, TrendStatus.STAGNANT),
            (0.4, Goal.MAINTENANCE, TrendStatus.GAIN_TOO_FAST),
            (-0.4, Goal.MAINTENANCE, TrendStatus.LOSS_TOO_FAST),
            (0.2, Goal.MAINTENANCE, TrendStatus.ON_TRACK),
            (0.3, Goal.MAINTENANCE, TrendStatus.ON_TRACK),
            (-0.3, Goal.MAINTENANCE, TrendStatus.ON_TRACK),
        ],
    )
    def test_table(self, delta: float, goal: Goal, expected: TrendStatus) -> None:
        assert classify_delta(delta, goal) is expected


class TestDrift:
    """Drift is reported for Maintenance only."""

    def test_maintenance_up_and_down(self) -> None:
        assert drift_for(Goal.MAINTENANCE, 0.05) is Drift.UP
        assert drift_for(Goal.MAINTENANCE, -0.05) is Drift.DOWN

    def test_maintenance_flat(self) -> None:
        assert drift_for(Goal.MAINTENANCE, 0.0) is None

    def test_other_goals(self) -> None:
        assert drift_for(Goal.FAT_LOSS, 0.5) is None
