"""Check-in adjustment policy and its application to targets.

The policy only reacts to stagnation. The first stagnant check-in nudges
cardio, the second changes calories, the third changes the step target:

    level  Fat Loss           Muscle Gain / Strength   Maintenance
    0      +5 min LISS        -5 min LISS              no change
    1      -100 kcal (carbs)  +100 kcal                follows drift
    2      -700 steps         -700 steps               no change

Maintenance users at level 1 borrow the gain branch when drifting up and
the fat-loss branch when drifting down.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

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
from fitcoach.units import round_half_up

KCAL_PER_GRAM_CARBS = 4

_ADD_CARDIO = AdjustmentProposal(cardio_minutes_delta=5)
_REDUCE_CARDIO = AdjustmentProposal(cardio_minutes_delta=-5)
_CUT_CALORIES = AdjustmentProposal(calories_delta=-100, macro_shift=MacroShift.CARBS)
_ADD_CALORIES = AdjustmentProposal(calories_delta=100)
_CUT_STEPS = AdjustmentProposal(steps_delta=-700)

# (goal, level) -> proposal for a stagnant check-in
STAGNANT_POLICY: dict[tuple[Goal, int], AdjustmentProposal] = {
    (Goal.FAT_LOSS, 0): _ADD_CARDIO,
    (Goal.MUSCLE_GAIN, 0): _REDUCE_CARDIO,
    (Goal.STRENGTH, 0): _REDUCE_CARDIO,
    (Goal.FAT_LOSS, 1): _CUT_CALORIES,
    (Goal.MUSCLE_GAIN, 1): _ADD_CALORIES,
    (Goal.STRENGTH, 1): _ADD_CALORIES,
    (Goal.FAT_LOSS, 2): _CUT_STEPS,
    (Goal.MUSCLE_GAIN, 2): _CUT_STEPS,
    (Goal.STRENGTH, 2): _CUT_STEPS,
}

MAINTENANCE_DRIFT_POLICY: dict[Drift, AdjustmentProposal] = {
    Drift.UP: _ADD_CALORIES,
    Drift.DOWN: _CUT_CALORIES,
}


def propose_adjustments(
    status: TrendStatus,
    goal: Goal,
    level: int,
    drift: Optional[Drift] = None,
) -> AdjustmentProposal:
    """
    Look up the adjustment for a check-in.

    Args:
        status: Trend status from analyze_weights
        goal: User's goal
        level: Escalation level (0, 1 or 2)
        drift: Weight drift direction, only meaningful for Maintenance

    Returns:
        The policy proposal, or the zero proposal for anything that is
        not a stagnant check-in covered by the table.
    """
    if status is not TrendStatus.STAGNANT:
        return ZERO_PROPOSAL

    goal = Goal.parse(goal)
    if goal is Goal.MAINTENANCE:
        if level == 1 and drift is not None:
            return MAINTENANCE_DRIFT_POLICY[drift]
        return ZERO_PROPOSAL

    return STAGNANT_POLICY.get((goal, level), ZERO_PROPOSAL)


def apply_adjustments(
    targets: Targets,
    checkin: CheckinPlan,
    proposal: AdjustmentProposal,
    goal: Optional[Goal] = None,
) -> tuple[Targets, CheckinPlan]:
    """
    Apply a proposal to the current targets and check-in plan.

    A calorie change is carried entirely by carbohydrates (4 kcal/g),
    whichever macro_shift tag the proposal has. Carbs, calories, LISS
    minutes and steps all floor at zero. ``goal`` is accepted so callers
    can pass the full check-in context; the arithmetic does not depend on it.

    Args:
        targets: Current nutrition targets
        checkin: Current cardio/step plan
        proposal: Deltas to apply
        goal: User's goal (unused)

    Returns:
        Tuple of (new_targets, new_checkin). Inputs are never mutated.
    """
    new_targets = targets
    if proposal.calories_delta != 0:
        carbs_delta_g = round_half_up(proposal.calories_delta / KCAL_PER_GRAM_CARBS)
        new_targets = replace(
            targets,
            calories=max(0, round_half_up(targets.calories + proposal.calories_delta)),
            carbs_g=max(0, targets.carbs_g + carbs_delta_g),
        )

    new_checkin = replace(
        checkin,
        liss_min_per_session=max(
            0, checkin.liss_min_per_session + proposal.cardio_minutes_delta
        ),
        step_target=max(0, checkin.step_target + proposal.steps_delta),
    )

    return new_targets, new_checkin
