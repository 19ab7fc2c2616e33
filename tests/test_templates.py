"""Tests for heart-rate zones and stock cardio templates."""

from __future__ import annotations

import pytest

from fitcoach.cardio.models import CardioMode, HeartRateRange, IntervalType
from fitcoach.cardio.liss import is_liss_session
from fitcoach.cardio.templates import (
    TEMPLATES,
    build_template,
    liss_target_hr,
    liss_template,
    max_hr,
    sprint_template,
    sum_duration_sec,
    zone_range,
    zone_template,
)


class TestHeartRate:
    """Tests for zone calculations."""

    def test_max_hr(self) -> None:
        assert max_hr(30) == 190
        assert max_hr(150) == 120

    def test_zone_two(self) -> None:
        assert zone_range(30, 2) == HeartRateRange(min=114, max=133)

    def test_unknown_zone(self) -> None:
        with pytest.raises(ValueError):
            zone_range(30, 5)

    def test_liss_anchor_clamped_into_zone(self) -> None:
        assert liss_target_hr(20) == HeartRateRange(min=140, max=140)
        assert liss_target_hr(30) == HeartRateRange(min=133, max=133)
        assert liss_target_hr(10) == HeartRateRange(min=140, max=140)


class TestTemplates:
    """Tests for template builders."""

    def test_sprint_ladder(self) -> None:
        plan = sprint_template()
        assert plan.mode == "Treadmill"
        assert len(plan.intervals) == 23
        assert plan.cooldown_sec == 180
        speeds = {i.target_speed_kmh for i in plan.intervals if i.type is IntervalType.INTERVAL}
        assert speeds == {13, 14, 15}
        assert sum_duration_sec(plan) == 1290

    def test_zone_two(self) -> None:
        plan = zone_template("Z2", 30, CardioMode.STAIRMASTER)
        assert len(plan.intervals) == 1
        assert plan.intervals[0].target_hr == zone_range(30, 2)
        assert plan.intervals[0].target_level == 5
        assert sum_duration_sec(plan) == 40 * 60 + 180

    def test_zone_three_four(self) -> None:
        plan = zone_template("z3-4", 30, CardioMode.TREADMILL)
        interval = plan.intervals[0]
        assert interval.duration_sec == 25 * 60
        assert interval.target_hr == HeartRateRange(min=133, max=171)
        assert interval.target_incline_pct == 1

    def test_unknown_zone_goal(self) -> None:
        with pytest.raises(ValueError):
            zone_template("Z5", 30, CardioMode.BIKE)

    def test_liss(self) -> None:
        plan = liss_template(30)
        assert plan.intervals[0].label == "LISS @140"
        assert sum_duration_sec(plan) == 1380

    def test_liss_qualification(self) -> None:
        assert is_liss_session(liss_template(30).mode, liss_template(30).intervals)
        assert not is_liss_session(sprint_template().mode, sprint_template().intervals)

    def test_build_by_name(self) -> None:
        for name in TEMPLATES:
            assert build_template(name, 30).intervals

    def test_build_unknown(self) -> None:
        with pytest.raises(ValueError):
            build_template("tempo", 30)
