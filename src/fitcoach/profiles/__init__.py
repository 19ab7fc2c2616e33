"""Baseline nutrition targets from body metrics."""

from fitcoach.profiles.body_calc import (
    NutritionPlan,
    calculate_age,
    calculate_plan,
    default_checkin_plan,
    ensure_targets,
    plan_from_profile,
    rest_day_calories,
)

__all__ = [
    "NutritionPlan",
    "calculate_age",
    "calculate_plan",
    "default_checkin_plan",
    "ensure_targets",
    "plan_from_profile",
    "rest_day_calories",
]
