"""Data models for weight tracking, targets and check-in history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

MAX_ESCALATION_LEVEL = 2

VALID_SEXES = ("male", "female")


class Goal(Enum):
    """User's body composition goal."""

    FAT_LOSS = "Fat Loss"
    STRENGTH = "Strength & Conditioning"
    MUSCLE_GAIN = "Muscle Gain"
    MAINTENANCE = "Maintenance"

    @classmethod
    def parse(cls, value: "str | Goal") -> "Goal":
        """Parse a goal from its label ('Fat Loss') or key ('fat_loss')."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for goal in cls:
            if normalized in (goal.name.lower(), goal.value.lower().replace(" ", "_")):
                return goal
        aliases = {
            "strength_and_conditioning": cls.STRENGTH,
            "gain": cls.MUSCLE_GAIN,
        }
        if normalized in aliases:
            return aliases[normalized]
        valid = [g.value for g in cls]
        raise ValueError(f"goal must be one of {valid}, got '{value}'")

    @property
    def gains_weight(self) -> bool:
        return self in (Goal.MUSCLE_GAIN, Goal.STRENGTH)


class ActivityLevel(Enum):
    """Weekly training frequency, used for the maintenance multiplier."""

    NONE = "none"
    LIGHT = "1-3/wk"
    MODERATE = "4-5/wk"
    HIGH = "6-7/wk"

    @classmethod
    def parse(cls, value: "str | ActivityLevel") -> "ActivityLevel":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for level in cls:
            if normalized in (level.value, level.name.lower()):
                return level
        if normalized.startswith("6-7"):
            return cls.HIGH
        valid = [a.value for a in cls]
        raise ValueError(f"activity must be one of {valid}, got '{value}'")


class TrendStatus(Enum):
    """Classification of the short-term weight trend."""

    INSUFFICIENT = "insufficient"
    ON_TRACK = "on_track"
    STAGNANT = "stagnant"
    GAIN_TOO_FAST = "gain_too_fast"
    LOSS_TOO_FAST = "loss_too_fast"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Drift(Enum):
    """Direction of recent weight change for Maintenance users."""

    UP = "up"
    DOWN = "down"


class MacroShift(Enum):
    """Which macro absorbs a calorie change."""

    CARBS = "carbs"
    NONE = "none"


@dataclass
class WeightEntry:
    """A single daily weigh-in."""

    measured_at: date
    weight_kg: float
    user_id: Optional[int] = None
    log_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Targets:
    """Daily nutrition prescription."""

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float

    def __post_init__(self) -> None:
        for name in ("calories", "protein_g", "carbs_g", "fats_g"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def to_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fats_g": self.fats_g,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Targets":
        return cls(
            calories=data["calories"],
            protein_g=data["protein_g"],
            carbs_g=data["carbs_g"],
            fats_g=data["fats_g"],
        )


@dataclass(frozen=True)
class CheckinPlan:
    """Cardio and step prescription."""

    step_target: int
    liss_min_per_session: int
    liss_sessions_per_week: int

    def __post_init__(self) -> None:
        for name in ("step_target", "liss_min_per_session", "liss_sessions_per_week"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @property
    def weekly_liss_minutes(self) -> int:
        return self.liss_min_per_session * self.liss_sessions_per_week

    def to_dict(self) -> dict[str, int]:
        return {
            "step_target": self.step_target,
            "liss_min_per_session": self.liss_min_per_session,
            "liss_sessions_per_week": self.liss_sessions_per_week,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CheckinPlan":
        return cls(
            step_target=data["step_target"],
            liss_min_per_session=data["liss_min_per_session"],
            liss_sessions_per_week=data["liss_sessions_per_week"],
        )


@dataclass(frozen=True)
class AdjustmentProposal:
    """Deltas proposed by one check-in."""

    calories_delta: int = 0
    cardio_minutes_delta: int = 0
    steps_delta: int = 0
    macro_shift: MacroShift = MacroShift.NONE

    @property
    def is_zero(self) -> bool:
        return (
            self.calories_delta == 0
            and self.cardio_minutes_delta == 0
            and self.steps_delta == 0
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "calories_delta": self.calories_delta,
            "cardio_minutes_delta": self.cardio_minutes_delta,
            "steps_delta": self.steps_delta,
            "macro_shift": self.macro_shift.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdjustmentProposal":
        return cls(
            calories_delta=data.get("calories_delta", 0),
            cardio_minutes_delta=data.get("cardio_minutes_delta", 0),
            steps_delta=data.get("steps_delta", 0),
            macro_shift=MacroShift(data.get("macro_shift", "none")),
        )


ZERO_PROPOSAL = AdjustmentProposal()


@dataclass(frozen=True)
class WeightAnalysis:
    """Result of classifying the trailing weight window."""

    status: TrendStatus
    delta: float
    entries: int = 0


@dataclass(frozen=True)
class PlanSnapshot:
    """Targets and check-in plan as they stood after a check-in."""

    targets: Targets
    checkin: CheckinPlan


@dataclass(frozen=True)
class PlanHistoryEntry:
    """One executed check-in. Append-only."""

    timestamp: datetime
    status: TrendStatus
    level: int
    delta: float
    proposal: AdjustmentProposal
    snapshot: PlanSnapshot
    entry_id: Optional[int] = None


@dataclass
class Adherence:
    """Weekly cardio adherence counters."""

    liss_minutes: int = 0
    liss_sessions: int = 0
    sessions_total: int = 0


@dataclass
class UserProfile:
    """User profile with current prescription."""

    user_id: Optional[int]
    goal: Optional[Goal]
    sex: str  # 'male' or 'female'
    weight_kg: float
    height_cm: float
    activity: ActivityLevel
    age: Optional[int] = None
    dob: Optional[date] = None
    targets: Optional[Targets] = None
    checkin: Optional[CheckinPlan] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.sex = self.sex.lower()
        if self.sex not in VALID_SEXES:
            raise ValueError(f"sex must be one of {VALID_SEXES}, got '{self.sex}'")
        if self.goal is not None:
            self.goal = Goal.parse(self.goal)
        self.activity = ActivityLevel.parse(self.activity)
