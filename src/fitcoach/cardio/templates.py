"""Heart-rate zones and stock cardio workout templates."""

from __future__ import annotations

from fitcoach.cardio.models import (
    CardioInterval,
    CardioMode,
    CardioPlan,
    HeartRateRange,
    IntervalType,
)
from fitcoach.units import as_duration, round_half_up

# Fraction of max HR bounding each training zone
ZONE_FRACTIONS = {
    2: (0.6, 0.7),
    3: (0.7, 0.8),
    4: (0.8, 0.9),
}

LISS_HR_ANCHOR = 140
DEFAULT_STAIRMASTER_LEVEL = 5
DEFAULT_TREADMILL_INCLINE = 1
DEFAULT_COOLDOWN_SEC = 180


def max_hr(age: int) -> int:
    """Age-predicted max heart rate (220 - age), never below 120."""
    return max(120, 220 - age)


def zone_range(age: int, zone: int) -> HeartRateRange:
    """Heart-rate band for training zone 2, 3 or 4."""
    if zone not in ZONE_FRACTIONS:
        raise ValueError(f"zone must be one of {sorted(ZONE_FRACTIONS)}, got {zone}")
    m = max_hr(age)
    lo, hi = ZONE_FRACTIONS[zone]
    return HeartRateRange(min=round_half_up(m * lo), max=round_half_up(m * hi))


def liss_target_hr(age: int) -> HeartRateRange:
    """Zone 2 band pulled toward the 140 bpm LISS anchor."""
    z2 = zone_range(age, 2)
    return HeartRateRange(
        min=min(max(z2.min, LISS_HR_ANCHOR), z2.max),
        max=max(min(z2.max, LISS_HR_ANCHOR), z2.min),
    )


def _machine_targets(mode: CardioMode, level_bump: int = 0) -> dict:
    return {
        "target_incline_pct": (
            DEFAULT_TREADMILL_INCLINE if mode is CardioMode.TREADMILL else None
        ),
        "target_level": (
            DEFAULT_STAIRMASTER_LEVEL + level_bump
            if mode is CardioMode.STAIRMASTER
            else None
        ),
    }


def sprint_template() -> CardioPlan:
    """Treadmill sprint ladder: 3×2 min @13, 4×1 min @14, 4×30 s @15 km/h."""
    intervals: list[CardioInterval] = []

    for i in range(1, 4):
        intervals.append(
            CardioInterval(
                type=IntervalType.INTERVAL,
                label=f"2 min @ 13 km/h ({i}/3)",
                duration_sec=120,
                target_speed_kmh=13,
            )
        )
        intervals.append(
            CardioInterval(type=IntervalType.STEADY, label=f"Rest {i}/3", duration_sec=60)
        )

    intervals.append(
        CardioInterval(type=IntervalType.STEADY, label="Transition Rest", duration_sec=30)
    )

    for speed, work_sec, rest_sec, label in ((14, 60, 30, "1 min"), (15, 30, 15, "30s")):
        for i in range(1, 5):
            intervals.append(
                CardioInterval(
                    type=IntervalType.INTERVAL,
                    label=f"{label} @ {speed} km/h ({i}/4)",
                    duration_sec=work_sec,
                    target_speed_kmh=speed,
                )
            )
            intervals.append(
                CardioInterval(
                    type=IntervalType.STEADY, label=f"Rest {i}/4", duration_sec=rest_sec
                )
            )

    return CardioPlan(
        mode=CardioMode.TREADMILL.value,
        intervals=tuple(intervals),
        cooldown_sec=DEFAULT_COOLDOWN_SEC,
    )


def zone_template(goal: str, age: int, mode: CardioMode) -> CardioPlan:
    """
    Single steady block at zone 2 (40 min) or zones 3-4 (25 min).

    Args:
        goal: "Z2" or "Z3-4"
        age: User age for HR zones
        mode: Cardio machine

    Returns:
        CardioPlan with a 3 minute cooldown
    """
    if goal.upper() == "Z2":
        interval = CardioInterval(
            type=IntervalType.STEADY,
            label="Zone 2 Steady",
            duration_sec=40 * 60,
            target_hr=zone_range(age, 2),
            **_machine_targets(mode),
        )
    elif goal.upper() == "Z3-4":
        interval = CardioInterval(
            type=IntervalType.STEADY,
            label="Zone 3-4 Effort",
            duration_sec=25 * 60,
            target_hr=HeartRateRange(
                min=zone_range(age, 3).min, max=zone_range(age, 4).max
            ),
            **_machine_targets(mode, level_bump=1),
        )
    else:
        raise ValueError(f"goal must be 'Z2' or 'Z3-4', got '{goal}'")

    return CardioPlan(
        mode=mode.value, intervals=(interval,), cooldown_sec=DEFAULT_COOLDOWN_SEC
    )


def liss_template(age: int, mode: CardioMode = CardioMode.STAIRMASTER) -> CardioPlan:
    """20 minute steady LISS block around 140 bpm."""
    is_treadmill = mode is CardioMode.TREADMILL
    interval = CardioInterval(
        type=IntervalType.STEADY,
        label="LISS @140",
        duration_sec=20 * 60,
        target_hr=liss_target_hr(age),
        target_incline_pct=12 if is_treadmill else None,
        target_level=DEFAULT_STAIRMASTER_LEVEL if mode is CardioMode.STAIRMASTER else None,
        target_speed_kmh=4.5 if is_treadmill else None,
    )
    return CardioPlan(
        mode=mode.value, intervals=(interval,), cooldown_sec=DEFAULT_COOLDOWN_SEC
    )


def sum_duration_sec(plan: CardioPlan) -> int:
    """Planned length of a workout including cooldown."""
    base = sum(as_duration(i.duration_sec) for i in plan.intervals)
    return base + as_duration(plan.cooldown_sec)


TEMPLATES = ("sprint", "z2", "z3-4", "liss")


def build_template(name: str, age: int, mode: CardioMode = CardioMode.STAIRMASTER) -> CardioPlan:
    """Build a stock template by name (see TEMPLATES)."""
    key = name.lower()
    if key == "sprint":
        return sprint_template()
    if key in ("z2", "z3-4"):
        return zone_template(key, age, mode)
    if key == "liss":
        return liss_template(age, mode)
    raise ValueError(f"template must be one of {TEMPLATES}, got '{name}'")
