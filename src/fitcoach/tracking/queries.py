"""Database queries for profiles, weigh-ins, check-in history and adherence.

Query methods never commit on their own. Callers group them inside one
``DatabaseConnection.get_connection()`` block, which commits or rolls back
the whole unit of work.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date, datetime, timedelta
from typing import Optional

from fitcoach.cardio.models import CardioSessionSummary
from fitcoach.tracking.adherence import (
    SessionContribution,
    fold_session,
    session_contribution,
)
from fitcoach.tracking.models import (
    AdjustmentProposal,
    Adherence,
    CheckinPlan,
    PlanHistoryEntry,
    PlanSnapshot,
    Targets,
    TrendStatus,
    UserProfile,
    WeightEntry,
)
from fitcoach.units import week_start

logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = """
    user_id, goal, sex, weight_kg, height_cm, activity, age, dob,
    calories, protein_g, carbs_g, fats_g,
    step_target, liss_min_per_session, liss_sessions_per_week, created_at
"""


def _profile_from_row(row: sqlite3.Row) -> UserProfile:
    targets = None
    if row["calories"] is not None:
        targets = Targets(
            calories=row["calories"],
            protein_g=row["protein_g"],
            carbs_g=row["carbs_g"],
            fats_g=row["fats_g"],
        )
    checkin = None
    if row["step_target"] is not None:
        checkin = CheckinPlan(
            step_target=row["step_target"],
            liss_min_per_session=row["liss_min_per_session"],
            liss_sessions_per_week=row["liss_sessions_per_week"],
        )
    return UserProfile(
        user_id=row["user_id"],
        goal=row["goal"],
        sex=row["sex"],
        weight_kg=row["weight_kg"],
        height_cm=row["height_cm"],
        activity=row["activity"],
        age=row["age"],
        dob=date.fromisoformat(row["dob"]) if row["dob"] else None,
        targets=targets,
        checkin=checkin,
        created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
    )


def _prescription_params(profile: UserProfile) -> tuple:
    t = profile.targets
    c = profile.checkin
    return (
        t.calories if t else None,
        t.protein_g if t else None,
        t.carbs_g if t else None,
        t.fats_g if t else None,
        c.step_target if c else None,
        c.liss_min_per_session if c else None,
        c.liss_sessions_per_week if c else None,
    )


class UserQueries:
    """Database queries for user profiles and their current prescription."""

    @staticmethod
    def create_user(conn: sqlite3.Connection, profile: UserProfile) -> int:
        """Create a new user profile and return the user_id."""
        cursor = conn.execute(
            """
            INSERT INTO user_profiles (goal, sex, weight_kg, height_cm, activity, age, dob,
                                       calories, protein_g, carbs_g, fats_g,
                                       step_target, liss_min_per_session,
                                       liss_sessions_per_week)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.goal.value if profile.goal else None,
                profile.sex,
                profile.weight_kg,
                profile.height_cm,
                profile.activity.value,
                profile.age,
                profile.dob.isoformat() if profile.dob else None,
                *_prescription_params(profile),
            ),
        )
        profile.user_id = cursor.lastrowid
        return cursor.lastrowid or 0

    @staticmethod
    def get_user(conn: sqlite3.Connection, user_id: int) -> Optional[UserProfile]:
        """Get user profile by ID."""
        row = conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM user_profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return _profile_from_row(row) if row else None

    @staticmethod
    def get_default_user(conn: sqlite3.Connection) -> Optional[UserProfile]:
        """Get the first (default) user profile."""
        row = conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM user_profiles ORDER BY user_id LIMIT 1"
        ).fetchone()
        return _profile_from_row(row) if row else None

    @staticmethod
    def update_user(conn: sqlite3.Connection, profile: UserProfile) -> None:
        """Update an existing user profile, prescription included."""
        if profile.user_id is None:
            raise ValueError("Cannot update profile without user_id")

        conn.execute(
            """
            UPDATE user_profiles
            SET goal = ?, sex = ?, weight_kg = ?, height_cm = ?, activity = ?,
                age = ?, dob = ?,
                calories = ?, protein_g = ?, carbs_g = ?, fats_g = ?,
                step_target = ?, liss_min_per_session = ?, liss_sessions_per_week = ?
            WHERE user_id = ?
            """,
            (
                profile.goal.value if profile.goal else None,
                profile.sex,
                profile.weight_kg,
                profile.height_cm,
                profile.activity.value,
                profile.age,
                profile.dob.isoformat() if profile.dob else None,
                *_prescription_params(profile),
                profile.user_id,
            ),
        )

    @staticmethod
    def update_prescription(
        conn: sqlite3.Connection,
        user_id: int,
        targets: Targets,
        checkin: CheckinPlan,
    ) -> None:
        """Overwrite only the targets and check-in plan of a profile."""
        conn.execute(
            """
            UPDATE user_profiles
            SET calories = ?, protein_g = ?, carbs_g = ?, fats_g = ?,
                step_target = ?, liss_min_per_session = ?, liss_sessions_per_week = ?
            WHERE user_id = ?
            """,
            (
                targets.calories,
                targets.protein_g,
                targets.carbs_g,
                targets.fats_g,
                checkin.step_target,
                checkin.liss_min_per_session,
                checkin.liss_sessions_per_week,
                user_id,
            ),
        )


class WeightQueries:
    """Database queries for weight log entries."""

    @staticmethod
    def add_weight(
        conn: sqlite3.Connection,
        user_id: int,
        weight_kg: float,
        measured_at: date,
        notes: Optional[str] = None,
    ) -> WeightEntry:
        """
        Add a weigh-in.

        If an entry already exists for this date, it will be replaced.
        """
        if weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {weight_kg}")

        cursor = conn.execute(
            """
            INSERT OR REPLACE INTO weight_log (user_id, weight_kg, measured_at, notes)
            VALUES (?, ?, ?, ?)
            """,
            (user_id, weight_kg, measured_at.isoformat(), notes),
        )

        return WeightEntry(
            measured_at=measured_at,
            weight_kg=weight_kg,
            user_id=user_id,
            log_id=cursor.lastrowid,
            notes=notes,
        )

    @staticmethod
    def get_weight_history(
        conn: sqlite3.Connection,
        user_id: int,
        days: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[WeightEntry]:
        """
        Get weight history for a user, oldest first.

        Args:
            user_id: User ID
            days: If set, return the last N entries
            start_date: If set, return entries on or after this date
            end_date: If set, return entries on or before this date
        """
        query = """
            SELECT log_id, user_id, weight_kg, measured_at, notes
            FROM weight_log
            WHERE user_id = ?
        """
        params: list = [user_id]

        if start_date:
            query += " AND measured_at >= ?"
            params.append(start_date.isoformat())
        if end_date:
            query += " AND measured_at <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY measured_at DESC"

        if days:
            query += " LIMIT ?"
            params.append(days)

        rows = conn.execute(query, params).fetchall()

        return [
            WeightEntry(
                measured_at=date.fromisoformat(row["measured_at"]),
                weight_kg=row["weight_kg"],
                user_id=row["user_id"],
                log_id=row["log_id"],
                notes=row["notes"],
            )
            for row in reversed(rows)  # Return in chronological order
        ]

    @staticmethod
    def get_window(
        conn: sqlite3.Connection,
        user_id: int,
        today: date,
        window_days: int = 7,
    ) -> list[WeightEntry]:
        """Entries from the trailing window ending on ``today`` (inclusive)."""
        return WeightQueries.get_weight_history(
            conn,
            user_id,
            start_date=today - timedelta(days=window_days - 1),
            end_date=today,
        )

    @staticmethod
    def get_latest_weight(
        conn: sqlite3.Connection, user_id: int
    ) -> Optional[WeightEntry]:
        """Get the most recent weight entry."""
        entries = WeightQueries.get_weight_history(conn, user_id, days=1)
        return entries[0] if entries else None


def _entry_from_row(row: sqlite3.Row) -> PlanHistoryEntry:
    snapshot = json.loads(row["snapshot_json"])
    return PlanHistoryEntry(
        timestamp=datetime.fromisoformat(row["created_at"]),
        status=TrendStatus(row["status"]),
        level=row["level"],
        delta=row["delta"],
        proposal=AdjustmentProposal.from_dict(json.loads(row["proposal_json"])),
        snapshot=PlanSnapshot(
            targets=Targets.from_dict(snapshot["targets"]),
            checkin=CheckinPlan.from_dict(snapshot["checkin"]),
        ),
        entry_id=row["entry_id"],
    )


class PlanHistoryQueries:
    """Append-only log of executed check-ins."""

    @staticmethod
    def append(
        conn: sqlite3.Connection, user_id: int, entry: PlanHistoryEntry
    ) -> int:
        """Store a check-in entry and return its id."""
        snapshot = {
            "targets": entry.snapshot.targets.to_dict(),
            "checkin": entry.snapshot.checkin.to_dict(),
        }
        cursor = conn.execute(
            """
            INSERT INTO plan_history (user_id, created_at, status, level, delta,
                                      proposal_json, snapshot_json)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                entry.timestamp.isoformat(),
                entry.status.value,
                entry.level,
                entry.delta,
                json.dumps(entry.proposal.to_dict()),
                json.dumps(snapshot),
            ),
        )
        return cursor.lastrowid or 0

    @staticmethod
    def get_latest(
        conn: sqlite3.Connection, user_id: int
    ) -> Optional[PlanHistoryEntry]:
        """Most recent check-in entry, or None."""
        row = conn.execute(
            """
            SELECT entry_id, created_at, status, level, delta, proposal_json, snapshot_json
            FROM plan_history
            WHERE user_id = ?
            ORDER BY created_at DESC, entry_id DESC LIMIT 1
            """,
            (user_id,),
        ).fetchone()
        return _entry_from_row(row) if row else None

    @staticmethod
    def get_history(
        conn: sqlite3.Connection, user_id: int, limit: int = 10
    ) -> list[PlanHistoryEntry]:
        """Recent check-in entries in chronological order."""
        rows = conn.execute(
            """
            SELECT entry_id, created_at, status, level, delta, proposal_json, snapshot_json
            FROM plan_history
            WHERE user_id = ?
            ORDER BY created_at DESC, entry_id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [_entry_from_row(row) for row in reversed(rows)]


class AdherenceQueries:
    """Weekly LISS adherence counters."""

    @staticmethod
    def bump(
        conn: sqlite3.Connection,
        user_id: int,
        on_date: date,
        contribution: SessionContribution,
    ) -> Adherence:
        """
        Add one finished session to the week containing ``on_date``.

        The increment is ``fold_session`` applied to an empty week, written
        as a single upsert so two writers never lose each other's increment.

        Returns:
            The week's counters after the update
        """
        week = week_start(on_date).isoformat()
        step = fold_session(Adherence(), contribution)
        conn.execute(
            """
            INSERT INTO adherence (user_id, week_start, liss_minutes, liss_sessions,
                                   sessions_total, updated_at)
            VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(user_id, week_start) DO UPDATE SET
                liss_minutes = liss_minutes + excluded.liss_minutes,
                liss_sessions = liss_sessions + excluded.liss_sessions,
                sessions_total = sessions_total + excluded.sessions_total,
                updated_at = CURRENT_TIMESTAMP
            """,
            (user_id, week, step.liss_minutes, step.liss_sessions, step.sessions_total),
        )
        return AdherenceQueries.get_week(conn, user_id, on_date)

    @staticmethod
    def get_week(
        conn: sqlite3.Connection, user_id: int, on_date: date
    ) -> Adherence:
        """Counters for the week containing ``on_date`` (zeros if none yet)."""
        row = conn.execute(
            """
            SELECT liss_minutes, liss_sessions, sessions_total
            FROM adherence
            WHERE user_id = ? AND week_start = ?
            """,
            (user_id, week_start(on_date).isoformat()),
        ).fetchone()
        if row is None:
            return Adherence()
        return Adherence(
            liss_minutes=row["liss_minutes"],
            liss_sessions=row["liss_sessions"],
            sessions_total=row["sessions_total"],
        )

    @staticmethod
    def get_recent_weeks(
        conn: sqlite3.Connection, user_id: int, limit: int = 8
    ) -> list[tuple[date, Adherence]]:
        """Recent weeks as (week_start, counters), oldest first."""
        rows = conn.execute(
            """
            SELECT week_start, liss_minutes, liss_sessions, sessions_total
            FROM adherence
            WHERE user_id = ?
            ORDER BY week_start DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [
            (
                date.fromisoformat(row["week_start"]),
                Adherence(
                    liss_minutes=row["liss_minutes"],
                    liss_sessions=row["liss_sessions"],
                    sessions_total=row["sessions_total"],
                ),
            )
            for row in reversed(rows)
        ]


class CardioSessionQueries:
    """Append-only store of finished cardio session summaries."""

    @staticmethod
    def append(
        conn: sqlite3.Connection,
        user_id: int,
        summary: CardioSessionSummary,
        session_date: date,
    ) -> int:
        """Store a session summary and return its id."""
        cursor = conn.execute(
            """
            INSERT INTO cardio_sessions (user_id, session_date, mode, total_time_sec,
                                         summary_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                user_id,
                session_date.isoformat(),
                summary.mode,
                summary.total_time_sec,
                json.dumps(summary.to_dict()),
            ),
        )
        return cursor.lastrowid or 0

    @staticmethod
    def get_sessions(
        conn: sqlite3.Connection,
        user_id: int,
        start_date: Optional[date] = None,
        limit: int = 20,
    ) -> list[tuple[date, CardioSessionSummary]]:
        """Recent sessions as (session_date, summary), oldest first."""
        query = """
            SELECT session_date, summary_json
            FROM cardio_sessions
            WHERE user_id = ?
        """
        params: list = [user_id]
        if start_date:
            query += " AND session_date >= ?"
            params.append(start_date.isoformat())
        query += " ORDER BY session_date DESC, session_id DESC LIMIT ?"
        params.append(limit)

        rows = conn.execute(query, params).fetchall()
        return [
            (
                date.fromisoformat(row["session_date"]),
                CardioSessionSummary.from_dict(json.loads(row["summary_json"])),
            )
            for row in reversed(rows)
        ]


def record_cardio_session(
    conn: sqlite3.Connection,
    user_id: int,
    summary: CardioSessionSummary,
    on_date: date,
    default_liss_min_per_session: int = 20,
) -> tuple[SessionContribution, Adherence]:
    """
    Persist a finished session and fold it into the week's adherence.

    The per-session LISS threshold comes from the profile's check-in plan at
    write time, falling back to ``default_liss_min_per_session``.

    Returns:
        Tuple of (contribution, week counters after the update)
    """
    profile = UserQueries.get_user(conn, user_id)
    threshold = default_liss_min_per_session
    if profile is not None and profile.checkin is not None:
        threshold = profile.checkin.liss_min_per_session

    contribution = session_contribution(summary, threshold)
    CardioSessionQueries.append(conn, user_id, summary, on_date)
    adherence = AdherenceQueries.bump(conn, user_id, on_date, contribution)
    logger.info(
        "Recorded %s session for user %s: %d LISS min (counts=%s)",
        summary.mode,
        user_id,
        contribution.liss_minutes,
        contribution.counts_as_liss_session,
    )
    return contribution, adherence
