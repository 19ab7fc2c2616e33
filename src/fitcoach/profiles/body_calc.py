"""Baseline calorie and macro targets from body metrics.

Uses the Mifflin-St Jeor equation for BMR, a training-frequency multiplier
for maintenance, and a fixed offset per goal. These are the starting
targets a new profile gets; after that only check-ins change them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from fitcoach.tracking.models import (
    ActivityLevel,
    CheckinPlan,
    Goal,
    Targets,
    UserProfile,
)
from fitcoach.units import round_half_up

# Maintenance multipliers by weekly training frequency
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.NONE: 1.2,
    ActivityLevel.LIGHT: 1.4,
    ActivityLevel.MODERATE: 1.5,
    ActivityLevel.HIGH: 1.7,
}

# Calorie offset from maintenance by goal
GOAL_OFFSETS = {
    Goal.FAT_LOSS: -300,
    Goal.MUSCLE_GAIN: 200,
    Goal.STRENGTH: 100,
    Goal.MAINTENANCE: 0,
}

LBS_PER_KG = 2.20462
PROTEIN_G_PER_LB = 1.2
CARB_CALORIE_SHARE = 0.4
REST_DAY_DEFICIT = 200


@dataclass
class NutritionPlan:
    """Calculated baseline plan."""

    bmr: int
    maintenance: int
    target: int
    protein_g: int
    carbs_g: int
    fat_g: int

    def to_targets(self) -> Targets:
        return Targets(
            calories=self.target,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fats_g=self.fat_g,
        )

    def summary(self) -> str:
        """Human-readable summary of the plan."""
        return "\n".join(
            [
                f"BMR: {self.bmr} kcal/day",
                f"Maintenance: {self.maintenance} kcal/day",
                f"Target: {self.target} kcal/day",
                f"Protein: {self.protein_g}g  Carbs: {self.carbs_g}g  Fat: {self.fat_g}g",
            ]
        )


def calculate_bmr(sex: str, weight_kg: float, height_cm: float, age: int) -> int:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        sex: "male" or "female"
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years

    Returns:
        BMR in calories per day (rounded)
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    sex_factor = 5 if sex.lower() == "male" else -161
    return round_half_up(base + sex_factor)


def calculate_maintenance(bmr: int, activity: ActivityLevel) -> int:
    """Maintenance calories for a training frequency."""
    multiplier = ACTIVITY_MULTIPLIERS.get(ActivityLevel.parse(activity), 1.2)
    return round_half_up(bmr * multiplier)


def calculate_target_calories(goal: Goal, maintenance: int) -> int:
    """Target calories: maintenance plus the goal offset."""
    return round_half_up(maintenance + GOAL_OFFSETS[Goal.parse(goal)])


def calculate_macros(weight_kg: float, target_calories: int) -> tuple[int, int, int]:
    """Split target calories into (protein_g, carbs_g, fat_g).

    Protein is 1.2 g per lb of body weight, carbs take 40% of calories and
    fat gets the remainder (never negative).
    """
    protein_g = round_half_up(PROTEIN_G_PER_LB * weight_kg * LBS_PER_KG)
    protein_calories = protein_g * 4

    carb_calories = round_half_up(target_calories * CARB_CALORIE_SHARE)
    carbs_g = round_half_up(carb_calories / 4)

    fat_calories = target_calories - protein_calories - carb_calories
    fat_g = max(0, round_half_up(fat_calories / 9))

    return protein_g, carbs_g, fat_g


def calculate_plan(
    sex: str,
    weight_kg: float,
    height_cm: float,
    age: int,
    activity: ActivityLevel,
    goal: Goal,
) -> NutritionPlan:
    """Full baseline plan from body metrics."""
    bmr = calculate_bmr(sex, weight_kg, height_cm, age)
    maintenance = calculate_maintenance(bmr, activity)
    target = calculate_target_calories(goal, maintenance)
    protein_g, carbs_g, fat_g = calculate_macros(weight_kg, target)
    return NutritionPlan(
        bmr=bmr,
        maintenance=maintenance,
        target=target,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
    )


def calculate_age(dob: date, today: Optional[date] = None) -> int:
    """Age in whole years on ``today``."""
    if today is None:
        today = date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def plan_from_profile(
    profile: UserProfile, today: Optional[date] = None
) -> Optional[NutritionPlan]:
    """Baseline plan for a profile, or None if required metrics are missing."""
    if not profile.weight_kg or not profile.height_cm or profile.goal is None:
        return None

    age = profile.age
    if not age and profile.dob is not None:
        age = calculate_age(profile.dob, today)
    if not age or age < 1:
        return None

    return calculate_plan(
        profile.sex,
        profile.weight_kg,
        profile.height_cm,
        age,
        profile.activity,
        profile.goal,
    )


def has_valid_targets(targets: Optional[Targets]) -> bool:
    """Targets exist and every field is positive."""
    if targets is None:
        return False
    return all(
        value > 0
        for value in (targets.calories, targets.protein_g, targets.carbs_g, targets.fats_g)
    )


def ensure_targets(profile: UserProfile, today: Optional[date] = None) -> bool:
    """
    Fill in baseline targets when the profile has none (or invalid ones).

    Returns:
        True if the profile was changed
    """
    if has_valid_targets(profile.targets):
        return False
    plan = plan_from_profile(profile, today)
    if plan is None:
        return False
    profile.targets = plan.to_targets()
    return True


def default_checkin_plan(
    step_target: int = 8000,
    liss_min_per_session: int = 20,
    liss_sessions_per_week: int = 3,
) -> CheckinPlan:
    """Starting cardio/step prescription for a new profile."""
    return CheckinPlan(
        step_target=step_target,
        liss_min_per_session=liss_min_per_session,
        liss_sessions_per_week=liss_sessions_per_week,
    )


def rest_day_calories(targets: Targets, goal: Goal) -> float:
    """Fat-loss users eat 200 kcal less on rest days; everyone else eats the target."""
    if Goal.parse(goal) is Goal.FAT_LOSS:
        return targets.calories - REST_DAY_DEFICIT
    return targets.calories
