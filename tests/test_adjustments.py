"""Tests for the adjustment policy and its application."""

from __future__ import annotations

import pytest

from fitcoach.tracking.adjustments import apply_adjustments, propose_adjustments
from fitcoach.tracking.models import (
    ZERO_PROPOSAL,
    AdjustmentProposal,
    CheckinPlan,
    Drift,
    Goal,
    MacroShift,
    Targets,
    TrendStatus,
)

TARGETS = Targets(calories=2000, protein_g=150, carbs_g=200, fats_g=60)
PLAN = CheckinPlan(step_target=8000, liss_min_per_session=20, liss_sessions_per_week=3)


class TestProposeAdjustments:
    """Policy table for stagnant check-ins."""

    @pytest.mark.parametrize(
        "goal,level,expected",
        [
            (Goal.FAT_LOSS, 0, AdjustmentProposal(cardio_minutes_delta=5)),
            (Goal.MUSCLE_GAIN, 0, AdjustmentProposal(cardio_minutes_delta=-5)),
            (Goal.STRENGTH, 0, AdjustmentProposal(cardio_minutes_delta=-5)),
            (
                Goal.FAT_LOSS,
                1,
                AdjustmentProposal(calories_delta=-100, macro_shift=MacroShift.CARBS),
            ),
            (Goal.MUSCLE_GAIN, 1, AdjustmentProposal(calories_delta=100)),
            (Goal.STRENGTH, 1, AdjustmentProposal(calories_delta=100)),
            (Goal.FAT_LOSS, 2, AdjustmentProposal(steps_delta=-700)),
            (Goal.MUSCLE_GAIN, 2, AdjustmentProposal(steps_delta=-700)),
            (Goal.STRENGTH, 2, AdjustmentProposal(steps_delta=-700)),
        ],
    )
    def test_stagnant_table(
        self, goal: Goal, level: int, expected: AdjustmentProposal
    ) -> None:
        assert propose_adjustments(TrendStatus.STAGNANT, goal, level) == expected

    @pytest.mark.parametrize(
        "status",
        [
            TrendStatus.INSUFFICIENT,
            TrendStatus.ON_TRACK,
            TrendStatus.GAIN_TOO_FAST,
            TrendStatus.LOSS_TOO_FAST,
        ],
    )
    def test_non_stagnant_is_zero(self, status: TrendStatus) -> None:
        for goal in Goal:
            assert propose_adjustments(status, goal, 1, Drift.UP).is_zero

    def test_maintenance_level_one_follows_drift(self) -> None:
        up = propose_adjustments(TrendStatus.STAGNANT, Goal.MAINTENANCE, 1, Drift.UP)
        down = propose_adjustments(TrendStatus.STAGNANT, Goal.MAINTENANCE, 1, Drift.DOWN)
        assert up.calories_delta == 100
        assert down.calories_delta == -100
        assert down.macro_shift is MacroShift.CARBS

    def test_maintenance_other_levels_are_zero(self) -> None:
        for level in (0, 2):
            result = propose_adjustments(TrendStatus.STAGNANT, Goal.MAINTENANCE, level, Drift.UP)
            assert result == ZERO_PROPOSAL

    def test_maintenance_without_drift_is_zero(self) -> None:
        assert propose_adjustments(TrendStatus.STAGNANT, Goal.MAINTENANCE, 1).is_zero


class TestApplyAdjustments:
    """Tests for apply_adjustments."""

    def test_zero_proposal_is_identity(self) -> None:
        targets, plan = apply_adjustments(TARGETS, PLAN, ZERO_PROPOSAL)
        assert targets == TARGETS
        assert plan == PLAN

    def test_calorie_cut_comes_from_carbs(self) -> None:
        proposal = AdjustmentProposal(calories_delta=-100, macro_shift=MacroShift.CARBS)
        targets, plan = apply_adjustments(TARGETS, PLAN, proposal)
        assert targets.calories == 1900
        assert targets.carbs_g == 175
        assert targets.protein_g == 150
        assert targets.fats_g == 60
        assert plan == PLAN

    def test_calorie_increase_goes_to_carbs(self) -> None:
        targets, _ = apply_adjustments(TARGETS, PLAN, AdjustmentProposal(calories_delta=100))
        assert targets.calories == 2100
        assert targets.carbs_g == 225

    def test_carbs_and_calories_floor_at_zero(self) -> None:
        low = Targets(calories=50, protein_g=0, carbs_g=10, fats_g=0)
        targets, _ = apply_adjustments(low, PLAN, AdjustmentProposal(calories_delta=-100))
        assert targets.calories == 0
        assert targets.carbs_g == 0

    def test_cardio_minutes(self) -> None:
        _, plan = apply_adjustments(TARGETS, PLAN, AdjustmentProposal(cardio_minutes_delta=5))
        assert plan.liss_min_per_session == 25
        assert plan.liss_sessions_per_week == 3

    def test_cardio_minutes_floor_at_zero(self) -> None:
        short = CheckinPlan(step_target=8000, liss_min_per_session=3, liss_sessions_per_week=3)
        _, plan = apply_adjustments(TARGETS, short, AdjustmentProposal(cardio_minutes_delta=-5))
        assert plan.liss_min_per_session == 0

    def test_steps(self) -> None:
        _, plan = apply_adjustments(TARGETS, PLAN, AdjustmentProposal(steps_delta=-700))
        assert plan.step_target == 7300

    def test_steps_floor_at_zero(self) -> None:
        few = CheckinPlan(step_target=500, liss_min_per_session=20, liss_sessions_per_week=3)
        _, plan = apply_adjustments(TARGETS, few, AdjustmentProposal(steps_delta=-700))
        assert plan.step_target == 0

    def test_inputs_not_mutated(self) -> None:
        apply_adjustments(TARGETS, PLAN, AdjustmentProposal(calories_delta=-100, steps_delta=-700))
        assert TARGETS.calories == 2000
        assert PLAN.step_target == 8000
