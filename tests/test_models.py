"""Tests for tracking and cardio data models."""

from __future__ import annotations

import pytest

from fitcoach.cardio.models import (
    CardioInterval,
    CardioMode,
    CardioPlan,
    CardioSessionSummary,
    HeartRateRange,
    IntervalType,
    LoggedCardioInterval,
)
from fitcoach.tracking.models import (
    ActivityLevel,
    AdjustmentProposal,
    CheckinPlan,
    Goal,
    MacroShift,
    Targets,
    TrendStatus,
    UserProfile,
)


class TestGoal:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Fat Loss", Goal.FAT_LOSS),
            ("fat_loss", Goal.FAT_LOSS),
            ("Strength & Conditioning", Goal.STRENGTH),
            ("strength_and_conditioning", Goal.STRENGTH),
            ("muscle-gain", Goal.MUSCLE_GAIN),
            ("gain", Goal.MUSCLE_GAIN),
            ("MAINTENANCE", Goal.MAINTENANCE),
        ],
    )
    def test_parse(self, text: str, expected: Goal) -> None:
        assert Goal.parse(text) is expected

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            Goal.parse("bulk forever")

    def test_gains_weight(self) -> None:
        assert Goal.STRENGTH.gains_weight
        assert not Goal.MAINTENANCE.gains_weight


class TestActivityLevel:
    def test_parse(self) -> None:
        assert ActivityLevel.parse("4-5/wk") is ActivityLevel.MODERATE
        assert ActivityLevel.parse("none") is ActivityLevel.NONE
        assert ActivityLevel.parse("6-7/wk+") is ActivityLevel.HIGH

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            ActivityLevel.parse("daily")


class TestPrescription:
    def test_targets_reject_negative(self) -> None:
        with pytest.raises(ValueError):
            Targets(calories=-1, protein_g=0, carbs_g=0, fats_g=0)

    def test_checkin_reject_negative(self) -> None:
        with pytest.raises(ValueError):
            CheckinPlan(step_target=-5, liss_min_per_session=20, liss_sessions_per_week=3)

    def test_proposal_dict_round_trip(self) -> None:
        proposal = AdjustmentProposal(calories_delta=-100, macro_shift=MacroShift.CARBS)
        assert AdjustmentProposal.from_dict(proposal.to_dict()) == proposal

    def test_zero_proposal(self) -> None:
        assert AdjustmentProposal().is_zero
        assert AdjustmentProposal(macro_shift=MacroShift.CARBS).is_zero
        assert not AdjustmentProposal(steps_delta=-700).is_zero

    def test_status_label(self) -> None:
        assert TrendStatus.GAIN_TOO_FAST.label == "Gain Too Fast"


class TestUserProfile:
    def test_normalizes_fields(self) -> None:
        profile = UserProfile(
            user_id=None,
            goal="fat_loss",  # type: ignore[arg-type]
            sex="Male",
            weight_kg=80,
            height_cm=180,
            activity="1-3/wk",  # type: ignore[arg-type]
        )
        assert profile.goal is Goal.FAT_LOSS
        assert profile.sex == "male"
        assert profile.activity is ActivityLevel.LIGHT

    def test_rejects_unknown_sex(self) -> None:
        with pytest.raises(ValueError):
            UserProfile(
                user_id=None,
                goal=None,
                sex="other",
                weight_kg=80,
                height_cm=180,
                activity=ActivityLevel.NONE,
            )


class TestCardioModels:
    def test_plan_accepts_mode_enum(self) -> None:
        plan = CardioPlan(mode=CardioMode.BIKE, intervals=[])
        assert plan.mode == "Bike"
        assert plan.intervals == ()

    def test_plan_from_dict(self) -> None:
        plan = CardioPlan(
            mode="Treadmill",
            intervals=(
                CardioInterval(
                    type=IntervalType.STEADY,
                    duration_sec=600,
                    label="Walk",
                    target_hr=HeartRateRange(120, 140),
                ),
            ),
            cooldown_sec=180,
        )
        assert CardioPlan.from_dict(plan.to_dict()) == plan

    def test_summary_from_dict_defaults(self) -> None:
        summary = CardioSessionSummary.from_dict(
            {"mode": "Row", "intervals": [{"label": "x", "actual_time_sec": 60}]}
        )
        assert summary.total_time_sec == 0
        assert summary.count_as_liss is False
        assert summary.intervals == [LoggedCardioInterval(label="x", actual_time_sec=60)]
