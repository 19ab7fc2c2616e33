"""Weight trend analysis and the adaptive check-in loop.

Key components:
- Trend classification over the trailing 7 days of weigh-ins
- Escalation ladder across consecutive stagnant check-ins
- Adjustment policy (cardio, then calories, then steps) and its application
- Weekly LISS adherence counters
- EMA weight trend for display
- SQLite queries for profiles, weigh-ins, history and adherence
"""

from __future__ import annotations

from fitcoach.tracking.adherence import (
    SessionContribution,
    fold_session,
    needs_adherence_warning,
    session_contribution,
)
from fitcoach.tracking.adjustments import apply_adjustments, propose_adjustments
from fitcoach.tracking.checkin import CheckinResult, evaluate_checkin, run_checkin
from fitcoach.tracking.ema import trend_series, update_trend
from fitcoach.tracking.escalation import resolve_escalation_level
from fitcoach.tracking.models import (
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
from fitcoach.tracking.trend import analyze_weights

__all__ = [
    "Adherence",
    "AdjustmentProposal",
    "CheckinPlan",
    "CheckinResult",
    "Drift",
    "Goal",
    "PlanHistoryEntry",
    "PlanSnapshot",
    "SessionContribution",
    "Targets",
    "TrendStatus",
    "UserProfile",
    "WeightAnalysis",
    "WeightEntry",
    "analyze_weights",
    "apply_adjustments",
    "evaluate_checkin",
    "fold_session",
    "needs_adherence_warning",
    "propose_adjustments",
    "resolve_escalation_level",
    "run_checkin",
    "session_contribution",
    "trend_series",
    "update_trend",
]
