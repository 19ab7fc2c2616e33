"""Tests for rounding and time helpers."""

from __future__ import annotations

from datetime import date

from fitcoach.units import (
    as_duration,
    format_duration,
    minutes_from_seconds,
    parse_duration,
    round_half_up,
    week_start,
)


class TestRoundHalfUp:
    """Half values always round toward +infinity."""

    def test_positive_half(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(12.5) == 13

    def test_negative_half(self) -> None:
        assert round_half_up(-12.5) == -12
        assert round_half_up(-25.0) == -25

    def test_non_half(self) -> None:
        assert round_half_up(2.49) == 2
        assert round_half_up(-2.51) == -3


class TestAsDuration:
    """Bad durations are treated as zero."""

    def test_unknown_values(self) -> None:
        assert as_duration(None) == 0
        assert as_duration(float("nan")) == 0
        assert as_duration(float("inf")) == 0
        assert as_duration(-5) == 0
        assert as_duration("abc") == 0  # type: ignore[arg-type]

    def test_truncates_fraction(self) -> None:
        assert as_duration(90.7) == 90
        assert as_duration(60) == 60


class TestMinutes:
    def test_half_minute_rounds_up(self) -> None:
        assert minutes_from_seconds(1230) == 21
        assert minutes_from_seconds(1229) == 20


class TestWeekStart:
    """Weeks start on Monday."""

    def test_midweek(self) -> None:
        assert week_start(date(2025, 3, 13)) == date(2025, 3, 10)

    def test_monday_is_own_start(self) -> None:
        assert week_start(date(2025, 3, 10)) == date(2025, 3, 10)

    def test_sunday_belongs_to_previous_monday(self) -> None:
        assert week_start(date(2025, 3, 16)) == date(2025, 3, 10)


class TestDurationText:
    def test_format(self) -> None:
        assert format_duration(125) == "02:05"
        assert format_duration(None) == "00:00"  # type: ignore[arg-type]

    def test_parse(self) -> None:
        assert parse_duration("02:05") == 125
        assert parse_duration("90") == 90
        assert parse_duration("") == 0
        assert parse_duration("1:") == 60
