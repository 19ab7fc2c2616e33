"""Weekly check-in: analyze weights, escalate, propose and apply adjustments.

``evaluate_checkin`` is pure and decides everything. ``run_checkin`` loads
its inputs from SQLite and writes the result back inside the caller's
transaction, so the new targets and the history entry land together.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable, Optional

from fitcoach.exceptions import ProfileNotFoundError, ProfileValidationError
from fitcoach.tracking.adherence import needs_adherence_warning
from fitcoach.tracking.adjustments import apply_adjustments, propose_adjustments
from fitcoach.tracking.escalation import resolve_escalation_level
from fitcoach.tracking.models import (
    ZERO_PROPOSAL,
    Adherence,
    AdjustmentProposal,
    CheckinPlan,
    Drift,
    Goal,
    PlanHistoryEntry,
    PlanSnapshot,
    Targets,
    TrendStatus,
    UserProfile,
    WeightAnalysis,
    WeightEntry,
)
from fitcoach.tracking.queries import (
    AdherenceQueries,
    PlanHistoryQueries,
    UserQueries,
    WeightQueries,
)
from fitcoach.tracking.trend import WINDOW_DAYS, analyze_weights, drift_for

logger = logging.getLogger(__name__)


@dataclass
class CheckinResult:
    """Outcome of one check-in.

    ``entry`` is set only when the check-in changed the plan; ``targets``
    and ``checkin`` are the values in force afterwards.
    """

    analysis: WeightAnalysis
    level: int
    drift: Optional[Drift]
    proposal: AdjustmentProposal
    targets: Targets
    checkin: CheckinPlan
    entry: Optional[PlanHistoryEntry] = None
    adherence_warning: bool = False

    @property
    def changed(self) -> bool:
        return self.entry is not None

    def message(self, goal: Optional[Goal] = None) -> str:
        """One-line human summary."""
        status = self.analysis.status
        if status is TrendStatus.INSUFFICIENT:
            return "Not enough weigh-ins in the last 7 days to check in."
        if not self.changed:
            return "On track, no changes."
        p = self.proposal
        if p.cardio_minutes_delta and goal is Goal.FAT_LOSS and self.level == 0:
            return f"LISS per session will become {self.checkin.liss_min_per_session} min."
        parts = []
        if p.calories_delta:
            parts.append(f"calories {p.calories_delta:+d} kcal")
        if p.cardio_minutes_delta:
            parts.append(f"LISS {p.cardio_minutes_delta:+d} min/session")
        if p.steps_delta:
            parts.append(f"steps {p.steps_delta:+d}")
        return "Plan updated: " + ", ".join(parts) + "."

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.analysis.status.value,
            "delta_kg": self.analysis.delta,
            "entries": self.analysis.entries,
            "level": self.level,
            "drift": self.drift.value if self.drift else None,
            "proposal": self.proposal.to_dict(),
            "targets": self.targets.to_dict(),
            "checkin": self.checkin.to_dict(),
            "changed": self.changed,
            "entry_id": self.entry.entry_id if self.entry else None,
            "adherence_warning": self.adherence_warning,
        }


def _require_plan(profile: UserProfile) -> None:
    missing = []
    if profile.goal is None:
        missing.append("goal")
    if profile.targets is None:
        missing.append("targets")
    if profile.checkin is None:
        missing.append("checkin")
    if missing:
        raise ProfileValidationError(missing)


def evaluate_checkin(
    profile: UserProfile,
    weights: Iterable[WeightEntry],
    prior_entry: Optional[PlanHistoryEntry],
    now: datetime,
    adherence: Optional[Adherence] = None,
) -> CheckinResult:
    """
    Decide the outcome of a check-in without touching storage.

    Args:
        profile: User profile with goal, targets and check-in plan
        weights: Weigh-ins (only the trailing 7 days ending ``now`` are used)
        prior_entry: Most recent plan history entry, if any
        now: Check-in time
        adherence: This week's LISS counters, for the adherence warning

    Returns:
        CheckinResult. ``entry`` is None when nothing changes.

    Raises:
        ProfileValidationError: If goal, targets or check-in plan is missing
    """
    _require_plan(profile)
    goal = profile.goal
    targets = profile.targets
    checkin = profile.checkin

    analysis = analyze_weights(weights, goal, today=now.date(), window_days=WINDOW_DAYS)
    level = resolve_escalation_level(prior_entry, now)

    if analysis.status is TrendStatus.INSUFFICIENT:
        return CheckinResult(
            analysis=analysis,
            level=level,
            drift=None,
            proposal=ZERO_PROPOSAL,
            targets=targets,
            checkin=checkin,
        )

    drift = drift_for(goal, analysis.delta)
    proposal = propose_adjustments(analysis.status, goal, level, drift)
    warning = needs_adherence_warning(analysis.status, adherence or Adherence(), checkin)

    if analysis.status is TrendStatus.ON_TRACK or proposal.is_zero:
        return CheckinResult(
            analysis=analysis,
            level=level,
            drift=drift,
            proposal=proposal,
            targets=targets,
            checkin=checkin,
            adherence_warning=warning,
        )

    new_targets, new_checkin = apply_adjustments(targets, checkin, proposal, goal)
    entry = PlanHistoryEntry(
        timestamp=now,
        status=analysis.status,
        level=level,
        delta=analysis.delta,
        proposal=proposal,
        snapshot=PlanSnapshot(targets=new_targets, checkin=new_checkin),
    )
    return CheckinResult(
        analysis=analysis,
        level=level,
        drift=drift,
        proposal=proposal,
        targets=new_targets,
        checkin=new_checkin,
        entry=entry,
        adherence_warning=warning,
    )


def run_checkin(
    conn: sqlite3.Connection,
    user_id: int,
    now: Optional[datetime] = None,
) -> CheckinResult:
    """
    Run a check-in against the database.

    Reads the profile, trailing weigh-ins, latest history entry and this
    week's adherence, then writes the new prescription and history entry.
    Run it inside one ``get_connection()`` block so a failure leaves no
    partial writes.

    Raises:
        ProfileNotFoundError: If the user does not exist
        ProfileValidationError: If the profile lacks goal, targets or plan
    """
    if now is None:
        now = datetime.now()

    profile = UserQueries.get_user(conn, user_id)
    if profile is None:
        raise ProfileNotFoundError(
            f"No user profile with id {user_id}", details={"user_id": user_id}
        )

    weights = WeightQueries.get_window(conn, user_id, now.date(), WINDOW_DAYS)
    prior = PlanHistoryQueries.get_latest(conn, user_id)
    adherence = AdherenceQueries.get_week(conn, user_id, now.date())

    result = evaluate_checkin(profile, weights, prior, now, adherence=adherence)
    logger.info(
        "Check-in for user %s: %s (delta %.3f kg, level %d)",
        user_id,
        result.analysis.status.value,
        result.analysis.delta,
        result.level,
    )

    if result.entry is not None:
        UserQueries.update_prescription(conn, user_id, result.targets, result.checkin)
        entry_id = PlanHistoryQueries.append(conn, user_id, result.entry)
        result.entry = replace(result.entry, entry_id=entry_id)
        logger.debug("Stored plan history entry %d", entry_id)

    if result.adherence_warning:
        logger.warning("User %s is stagnant with LISS adherence below plan", user_id)

    return result
