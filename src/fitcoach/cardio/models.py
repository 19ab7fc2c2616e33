"""Data models for cardio workouts and logged sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class IntervalType(Enum):
    """Steady-state block or work interval."""

    STEADY = "steady"
    INTERVAL = "interval"


class CardioMode(Enum):
    """Machine or activity a cardio plan is written for."""

    RUN = "Run"
    TREADMILL = "Treadmill"
    STAIRMASTER = "Stairmaster"
    BIKE = "Bike"
    ROW = "Row"
    OTHER = "Other"


# Modes whose single steady block counts as LISS without an explicit flag.
# Compared case-insensitively against the plan's mode string.
STEADY_STATE_MODES = frozenset(
    {"treadmill", "stairmaster", "bike", "run", "row", "rowing", "rower"}
)

# Fields of a logged interval the user may correct by hand
EDITABLE_LOG_FIELDS = ("actual_time_sec", "avg_hr", "speed_kmh", "incline_pct", "level")


@dataclass(frozen=True)
class HeartRateRange:
    """Target heart-rate band in bpm."""

    min: int
    max: int


@dataclass(frozen=True)
class CardioInterval:
    """One planned block of a cardio workout."""

    type: IntervalType
    duration_sec: float
    label: Optional[str] = None
    target_hr: Optional[HeartRateRange] = None
    target_speed_kmh: Optional[float] = None
    target_incline_pct: Optional[float] = None
    target_level: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "duration_sec": self.duration_sec,
            "target_hr": (
                {"min": self.target_hr.min, "max": self.target_hr.max}
                if self.target_hr
                else None
            ),
            "target_speed_kmh": self.target_speed_kmh,
            "target_incline_pct": self.target_incline_pct,
            "target_level": self.target_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardioInterval":
        hr = data.get("target_hr")
        return cls(
            type=IntervalType(str(data.get("type", "steady")).lower()),
            duration_sec=data.get("duration_sec", 0),
            label=data.get("label"),
            target_hr=HeartRateRange(min=hr["min"], max=hr["max"]) if hr else None,
            target_speed_kmh=data.get("target_speed_kmh"),
            target_incline_pct=data.get("target_incline_pct"),
            target_level=data.get("target_level"),
        )


@dataclass(frozen=True)
class CardioPlan:
    """A cardio workout template."""

    mode: str
    intervals: tuple[CardioInterval, ...]
    cooldown_sec: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.mode, CardioMode):
            object.__setattr__(self, "mode", self.mode.value)
        object.__setattr__(self, "intervals", tuple(self.intervals))

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "intervals": [i.to_dict() for i in self.intervals],
            "cooldown_sec": self.cooldown_sec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardioPlan":
        return cls(
            mode=data.get("mode", CardioMode.OTHER.value),
            intervals=tuple(CardioInterval.from_dict(i) for i in data.get("intervals", [])),
            cooldown_sec=data.get("cooldown_sec"),
        )


@dataclass
class LoggedCardioInterval:
    """What actually happened during one interval. Editable until the session ends."""

    label: Optional[str] = None
    actual_time_sec: float = 0
    avg_hr: Optional[float] = None
    speed_kmh: Optional[float] = None
    incline_pct: Optional[float] = None
    level: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "actual_time_sec": self.actual_time_sec,
            "avg_hr": self.avg_hr,
            "speed_kmh": self.speed_kmh,
            "incline_pct": self.incline_pct,
            "level": self.level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LoggedCardioInterval":
        return cls(
            label=data.get("label"),
            actual_time_sec=data.get("actual_time_sec", 0),
            avg_hr=data.get("avg_hr"),
            speed_kmh=data.get("speed_kmh"),
            incline_pct=data.get("incline_pct"),
            level=data.get("level"),
        )


@dataclass
class CardioSessionSummary:
    """Scored result of a finished cardio session."""

    mode: str
    total_time_sec: float
    total_distance_km: Optional[float]
    avg_hr: Optional[int]
    count_as_liss: bool
    intervals: list[LoggedCardioInterval] = field(default_factory=list)
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "total_time_sec": self.total_time_sec,
            "total_distance_km": self.total_distance_km,
            "avg_hr": self.avg_hr,
            "count_as_liss": self.count_as_liss,
            "notes": self.notes,
            "intervals": [i.to_dict() for i in self.intervals],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardioSessionSummary":
        return cls(
            mode=data["mode"],
            total_time_sec=data.get("total_time_sec", 0),
            total_distance_km=data.get("total_distance_km"),
            avg_hr=data.get("avg_hr"),
            count_as_liss=bool(data.get("count_as_liss", False)),
            intervals=[LoggedCardioInterval.from_dict(i) for i in data.get("intervals", [])],
            notes=data.get("notes"),
        )
