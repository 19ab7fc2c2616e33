"""CLI interface using Typer."""

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from fitcoach.agent import AgentResponse, create_response, error_response
from fitcoach.config import get_settings
from fitcoach.db import get_db
from fitcoach.exceptions import FitcoachError, ProfileNotFoundError

app = typer.Typer(
    help="Adaptive coaching loop: weigh-ins, weekly check-ins and cardio sessions",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
user_app = typer.Typer(help="Manage the user profile and prescription")
weight_app = typer.Typer(help="Log weigh-ins and inspect the weekly trend")
checkin_app = typer.Typer(help="Run the weekly check-in")
cardio_app = typer.Typer(help="Run and log cardio sessions")
adherence_app = typer.Typer(help="Weekly LISS adherence")

app.add_typer(user_app, name="user")
app.add_typer(weight_app, name="weight")
app.add_typer(checkin_app, name="checkin")
app.add_typer(cardio_app, name="cardio")
app.add_typer(adherence_app, name="adherence")

NO_PROFILE_HINT = (
    "Create a profile with: fitcoach user create --sex male --weight 80 "
    "--height 180 --age 30 --goal fat_loss"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Adaptive coaching loop."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: AgentResponse) -> None:
    """Print a response envelope to stdout."""
    print(response.to_json())


def ensure_tables() -> None:
    """Ensure tables exist (idempotent)."""
    get_db().initialize_schema()


def fail(
    command: str,
    error: "str | Exception",
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> None:
    """Report an error in the requested format and exit with code 1."""
    response = error_response(command, error, suggestions)
    if json_output:
        output_json(response)
    else:
        console.print(f"[red]{response.errors[0]}[/red]")
        for suggestion in response.suggestions:
            console.print(suggestion)
    raise typer.Exit(response.exit_code)


def resolve_user(conn: sqlite3.Connection, user_id: Optional[int]):
    """Load a profile by id, or the default profile."""
    from fitcoach.tracking.queries import UserQueries

    if user_id:
        profile = UserQueries.get_user(conn, user_id)
    else:
        profile = UserQueries.get_default_user(conn)
    if profile is None:
        raise ProfileNotFoundError(
            "No user profile found", details={"user_id": user_id}
        )
    return profile


def parse_day(value: Optional[str]) -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    return date.fromisoformat(value) if value else date.today()


def profile_dict(profile) -> dict:
    return {
        "user_id": profile.user_id,
        "goal": profile.goal.value if profile.goal else None,
        "sex": profile.sex,
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "activity": profile.activity.value,
        "age": profile.age,
        "dob": profile.dob.isoformat() if profile.dob else None,
        "targets": profile.targets.to_dict() if profile.targets else None,
        "checkin": profile.checkin.to_dict() if profile.checkin else None,
    }


def print_prescription(targets, checkin) -> None:
    """Print targets and the cardio/step plan."""
    if targets is not None:
        console.print(
            f"  Calories: {targets.calories:.0f} kcal  "
            f"P {targets.protein_g:.0f}g  C {targets.carbs_g:.0f}g  F {targets.fats_g:.0f}g"
        )
    else:
        console.print("  Targets: [yellow]not set[/yellow]")
    if checkin is not None:
        console.print(
            f"  Steps: {checkin.step_target}  "
            f"LISS: {checkin.liss_min_per_session} min x {checkin.liss_sessions_per_week}/wk"
        )
    else:
        console.print("  Check-in plan: [yellow]not set[/yellow]")


# Callbacks for sub-apps to auto-create tables on first use
@user_app.callback()
def user_callback() -> None:
    """Ensure tables exist before any user command."""
    ensure_tables()


@weight_app.callback()
def weight_callback() -> None:
    """Ensure tables exist before any weight command."""
    ensure_tables()


@checkin_app.callback()
def checkin_callback() -> None:
    """Ensure tables exist before any check-in command."""
    ensure_tables()


@cardio_app.callback()
def cardio_callback() -> None:
    """Ensure tables exist before any cardio command."""
    ensure_tables()


@adherence_app.callback()
def adherence_callback() -> None:
    """Ensure tables exist before any adherence command."""
    ensure_tables()


# ============================================================================
# Main Commands
# ============================================================================


@app.command()
def init(
    db_path: Optional[Path] = typer.Option(None, "--db", help="Custom database path"),
    write_config: bool = typer.Option(
        False, "--write-config", help="Also write the default config.yaml"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create the database (and optionally the config file)."""
    from fitcoach.db.connection import DatabaseConnection

    db = DatabaseConnection(db_path) if db_path else get_db()
    db.initialize_schema()
    missing = db.missing_tables()
    if missing:
        fail("init", f"Tables not created: {', '.join(missing)}", json_output)

    if write_config:
        settings = get_settings()
        if db_path:
            settings.database.path = db_path
        settings.save()

    if json_output:
        output_json(
            create_response(
                "init",
                data={"db_path": str(db.db_path), "config_written": write_config},
                human_summary=f"Initialized database at {db.db_path}",
            )
        )
    else:
        console.print(f"[green]Initialized database at:[/green] {db.db_path}")
        if write_config:
            console.print("[green]Wrote default config.yaml[/green]")


# ============================================================================
# User Profile Commands
# ============================================================================


@user_app.command("create")
def user_create(
    sex: str = typer.Option(..., "--sex", help="Sex (male/female)"),
    weight: float = typer.Option(..., "--weight", help="Current weight in kg"),
    height: float = typer.Option(..., "--height", help="Height in cm"),
    goal: str = typer.Option(
        ..., "--goal", help="Goal (fat_loss/muscle_gain/strength/maintenance)"
    ),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    dob: Optional[str] = typer.Option(None, "--dob", help="Date of birth (YYYY-MM-DD)"),
    activity: str = typer.Option(
        "1-3/wk", "--activity", help="Training frequency (none/1-3/wk/4-5/wk/6-7/wk)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a profile with baseline targets and the default check-in plan."""
    from fitcoach.profiles import default_checkin_plan, ensure_targets
    from fitcoach.tracking.models import UserProfile
    from fitcoach.tracking.queries import UserQueries

    if age is None and dob is None:
        fail("user create", "Provide --age or --dob", json_output)

    try:
        profile = UserProfile(
            user_id=None,
            goal=goal,
            sex=sex,
            weight_kg=weight,
            height_cm=height,
            activity=activity,
            age=age,
            dob=date.fromisoformat(dob) if dob else None,
        )
    except ValueError as e:
        fail("user create", str(e), json_output)

    defaults = get_settings().defaults
    ensure_targets(profile)
    profile.checkin = default_checkin_plan(
        step_target=defaults.step_target,
        liss_min_per_session=defaults.liss_min_per_session,
        liss_sessions_per_week=defaults.liss_sessions_per_week,
    )

    db = get_db()
    with db.get_connection() as conn:
        user_id = UserQueries.create_user(conn, profile)

    if json_output:
        output_json(
            create_response(
                "user create",
                data={"user_id": user_id, "profile": profile_dict(profile)},
                human_summary=f"Created user profile (ID: {user_id})",
            )
        )
    else:
        console.print(f"[green]Created user profile (ID: {user_id})[/green]")
        print_prescription(profile.targets, profile.checkin)


@user_app.command("show")
def user_show(
    user_id: Optional[int] = typer.Option(None, "--id", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the profile and current prescription."""
    from fitcoach.profiles import plan_from_profile, rest_day_calories

    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
    except ProfileNotFoundError as e:
        fail("user show", e, json_output, [NO_PROFILE_HINT])

    baseline = plan_from_profile(profile)

    if json_output:
        data = profile_dict(profile)
        data["baseline"] = (
            {
                "bmr": baseline.bmr,
                "maintenance": baseline.maintenance,
                "target": baseline.target,
            }
            if baseline
            else None
        )
        if profile.targets and profile.goal:
            data["rest_day_calories"] = rest_day_calories(profile.targets, profile.goal)
        output_json(
            create_response(
                "user show",
                data=data,
                human_summary=(
                    f"User {profile.user_id}: {profile.goal.value if profile.goal else 'no goal'}, "
                    f"{profile.weight_kg} kg"
                ),
            )
        )
        return

    console.print(f"[bold]User Profile (ID: {profile.user_id})[/bold]")
    console.print(f"  Goal: {profile.goal.value if profile.goal else '-'}")
    console.print(f"  Sex: {profile.sex}")
    console.print(f"  Weight: {profile.weight_kg} kg")
    console.print(f"  Height: {profile.height_cm} cm")
    if profile.age:
        console.print(f"  Age: {profile.age}")
    if profile.dob:
        console.print(f"  Date of birth: {profile.dob}")
    console.print(f"  Activity: {profile.activity.value}")
    console.print()
    console.print("[bold]Prescription[/bold]")
    print_prescription(profile.targets, profile.checkin)
    if profile.targets and profile.goal:
        console.print(
            f"  Rest day: {rest_day_calories(profile.targets, profile.goal):.0f} kcal"
        )
    if baseline:
        console.print()
        console.print(f"[dim]{baseline.summary()}[/dim]")


@user_app.command("update")
def user_update(
    user_id: Optional[int] = typer.Option(None, "--id", help="User ID (default: first user)"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    goal: Optional[str] = typer.Option(None, "--goal", help="Goal"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Training frequency"),
    calories: Optional[float] = typer.Option(None, "--calories", help="Override calories"),
    steps: Optional[int] = typer.Option(None, "--steps", help="Override step target"),
    liss_min: Optional[int] = typer.Option(
        None, "--liss-min", help="Override LISS minutes per session"
    ),
    liss_sessions: Optional[int] = typer.Option(
        None, "--liss-sessions", help="Override LISS sessions per week"
    ),
    recalculate: bool = typer.Option(
        False, "--recalculate", help="Reset targets to the baseline for the new metrics"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Update profile metrics or override the prescription."""
    from dataclasses import replace

    from fitcoach.profiles import default_checkin_plan, ensure_targets
    from fitcoach.tracking.models import ActivityLevel, Goal
    from fitcoach.tracking.queries import UserQueries

    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)

            if weight is not None:
                profile.weight_kg = weight
            if height is not None:
                profile.height_cm = height
            if age is not None:
                profile.age = age
            if goal is not None:
                profile.goal = Goal.parse(goal)
            if activity is not None:
                profile.activity = ActivityLevel.parse(activity)

            if recalculate:
                profile.targets = None
            ensure_targets(profile)

            if calories is not None and profile.targets is not None:
                profile.targets = replace(profile.targets, calories=calories)

            if profile.checkin is None:
                defaults = get_settings().defaults
                profile.checkin = default_checkin_plan(
                    defaults.step_target,
                    defaults.liss_min_per_session,
                    defaults.liss_sessions_per_week,
                )
            overrides = {
                k: v
                for k, v in (
                    ("step_target", steps),
                    ("liss_min_per_session", liss_min),
                    ("liss_sessions_per_week", liss_sessions),
                )
                if v is not None
            }
            if overrides:
                profile.checkin = replace(profile.checkin, **overrides)

            UserQueries.update_user(conn, profile)
    except ProfileNotFoundError as e:
        fail("user update", e, json_output, [NO_PROFILE_HINT])
    except ValueError as e:
        fail("user update", str(e), json_output)

    if json_output:
        output_json(
            create_response(
                "user update",
                data=profile_dict(profile),
                human_summary="Profile updated",
            )
        )
    else:
        console.print("[green]Profile updated[/green]")
        print_prescription(profile.targets, profile.checkin)


# ============================================================================
# Weight Tracking Commands
# ============================================================================


@weight_app.command("add")
def weight_add(
    weight: float = typer.Argument(..., help="Weight in kg"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID (default: first user)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a weigh-in (replaces any entry for the same day)."""
    from fitcoach.tracking.queries import WeightQueries

    measured_at = parse_day(date_str)
    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            entry = WeightQueries.add_weight(
                conn, profile.user_id, weight, measured_at, notes  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("weight add", e, json_output, [NO_PROFILE_HINT])
    except ValueError as e:
        fail("weight add", str(e), json_output)

    if json_output:
        output_json(
            create_response(
                "weight add",
                data={
                    "weight_kg": entry.weight_kg,
                    "measured_at": entry.measured_at.isoformat(),
                },
                human_summary=f"Logged {weight:.1f} kg on {measured_at}",
            )
        )
    else:
        console.print(f"[green]Logged:[/green] {weight:.1f} kg on {measured_at}")


@weight_app.command("list")
def weight_list(
    days: int = typer.Option(30, "--days", "-d", help="Number of entries to show"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List weigh-ins with the smoothed trend."""
    from fitcoach.tracking.ema import trend_series
    from fitcoach.tracking.queries import WeightQueries

    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            history = WeightQueries.get_weight_history(
                conn, profile.user_id, days=days  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("weight list", e, json_output, [NO_PROFILE_HINT])

    trends = trend_series(history)

    if json_output:
        output_json(
            create_response(
                "weight list",
                data={
                    "entries": [
                        {
                            "date": e.measured_at.isoformat(),
                            "weight_kg": e.weight_kg,
                            "trend_kg": round(t, 2),
                            "notes": e.notes,
                        }
                        for e, t in zip(history, trends)
                    ]
                },
                human_summary=f"{len(history)} entries",
            )
        )
        return

    if not history:
        console.print("No weight entries found")
        return

    table = Table(title=f"Weight History (last {days} entries)")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Trend", justify="right", style="blue")
    table.add_column("", justify="right")
    table.add_column("Notes", style="dim")

    prev_trend = None
    for entry, trend in zip(history, trends):
        delta = f"{trend - prev_trend:+.2f}" if prev_trend is not None else ""
        prev_trend = trend
        table.add_row(
            entry.measured_at.isoformat(),
            f"{entry.weight_kg:.1f}",
            f"{trend:.2f}",
            delta,
            entry.notes or "",
        )

    console.print(table)


@weight_app.command("status")
def weight_status(
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Reference date (default: today)"
    ),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Classify the last 7 days of weigh-ins against the goal."""
    from fitcoach.tracking.queries import WeightQueries
    from fitcoach.tracking.trend import WINDOW_DAYS, analyze_weights

    today = parse_day(date_str)
    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            window = WeightQueries.get_window(
                conn, profile.user_id, today, WINDOW_DAYS  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("weight status", e, json_output, [NO_PROFILE_HINT])

    if profile.goal is None:
        fail("weight status", "Profile has no goal", json_output)

    analysis = analyze_weights(window, profile.goal, today=today)

    if json_output:
        output_json(
            create_response(
                "weight status",
                data={
                    "status": analysis.status.value,
                    "delta_kg": analysis.delta,
                    "entries": analysis.entries,
                    "goal": profile.goal.value,
                    "as_of": today.isoformat(),
                },
                human_summary=f"{analysis.status.label} ({analysis.delta:+.2f} kg)",
            )
        )
    else:
        console.print(f"[bold]Weekly trend as of {today}[/bold] ({profile.goal.value})")
        console.print(f"  Weigh-ins in window: {analysis.entries}")
        console.print(f"  Change: {analysis.delta:+.2f} kg")
        console.print(f"  Status: [cyan]{analysis.status.label}[/cyan]")


# ============================================================================
# Check-in Commands
# ============================================================================


@checkin_app.command("run")
def checkin_run(
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the outcome without saving it"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Analyze the week and adjust the plan if weight has stalled."""
    from fitcoach.tracking.checkin import evaluate_checkin, run_checkin
    from fitcoach.tracking.queries import (
        AdherenceQueries,
        PlanHistoryQueries,
        WeightQueries,
    )

    now = datetime.now()
    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            if dry_run:
                result = evaluate_checkin(
                    profile,
                    WeightQueries.get_window(conn, profile.user_id, now.date()),  # type: ignore[arg-type]
                    PlanHistoryQueries.get_latest(conn, profile.user_id),  # type: ignore[arg-type]
                    now,
                    adherence=AdherenceQueries.get_week(conn, profile.user_id, now.date()),  # type: ignore[arg-type]
                )
            else:
                result = run_checkin(conn, profile.user_id, now)  # type: ignore[arg-type]
    except ProfileNotFoundError as e:
        fail("checkin run", e, json_output, [NO_PROFILE_HINT])
    except FitcoachError as e:
        fail(
            "checkin run",
            e,
            json_output,
            ["Set the missing fields with: fitcoach user update --recalculate"],
        )

    message = result.message(profile.goal)
    warnings = []
    if result.adherence_warning:
        warnings.append(
            "Weight is stagnant but this week's LISS plan is not done yet. "
            "Finish the planned cardio before cutting further."
        )

    if json_output:
        data = result.to_dict()
        data["dry_run"] = dry_run
        output_json(
            create_response(
                "checkin run", data=data, warnings=warnings, human_summary=message
            )
        )
        return

    a = result.analysis
    lines = [
        f"Status: [cyan]{a.status.label}[/cyan]  ({a.delta:+.2f} kg over {a.entries} weigh-ins)",
        f"Escalation level: {result.level}",
    ]
    if result.drift is not None:
        lines.append(f"Drift: {result.drift.value}")
    lines.append("")
    lines.append(f"[bold]{message}[/bold]")
    if dry_run and result.changed:
        lines.append("[dim](dry run, nothing saved)[/dim]")
    console.print(Panel("\n".join(lines), title="Check-in"))
    if result.changed:
        print_prescription(result.targets, result.checkin)
    for warning in warnings:
        console.print(f"[yellow]{warning}[/yellow]")


@checkin_app.command("history")
def checkin_history(
    limit: int = typer.Option(10, "--limit", "-n", help="Entries to show"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show executed check-ins."""
    from fitcoach.tracking.queries import PlanHistoryQueries

    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            entries = PlanHistoryQueries.get_history(
                conn, profile.user_id, limit  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("checkin history", e, json_output, [NO_PROFILE_HINT])

    if json_output:
        output_json(
            create_response(
                "checkin history",
                data={
                    "entries": [
                        {
                            "entry_id": e.entry_id,
                            "timestamp": e.timestamp.isoformat(),
                            "status": e.status.value,
                            "level": e.level,
                            "delta_kg": e.delta,
                            "proposal": e.proposal.to_dict(),
                            "targets": e.snapshot.targets.to_dict(),
                            "checkin": e.snapshot.checkin.to_dict(),
                        }
                        for e in entries
                    ]
                },
                human_summary=f"{len(entries)} check-ins",
            )
        )
        return

    if not entries:
        console.print("No check-ins recorded yet")
        return

    table = Table(title="Check-in History")
    table.add_column("Date", style="cyan")
    table.add_column("Status")
    table.add_column("Lvl", justify="right")
    table.add_column("Δ kg", justify="right")
    table.add_column("kcal", justify="right")
    table.add_column("LISS", justify="right")
    table.add_column("Steps", justify="right")

    for e in entries:
        table.add_row(
            e.timestamp.strftime("%Y-%m-%d %H:%M"),
            e.status.label,
            str(e.level),
            f"{e.delta:+.2f}",
            f"{e.snapshot.targets.calories:.0f}",
            f"{e.snapshot.checkin.liss_min_per_session}",
            f"{e.snapshot.checkin.step_target}",
        )

    console.print(table)


# ============================================================================
# Cardio Commands
# ============================================================================


def _age_for_templates(conn: sqlite3.Connection, user_id: Optional[int]) -> int:
    from fitcoach.profiles import calculate_age

    profile = resolve_user(conn, user_id)
    if profile.age:
        return profile.age
    if profile.dob:
        return calculate_age(profile.dob)
    raise FitcoachError("Profile has no age; pass --age")


def _parse_mode(mode: str):
    from fitcoach.cardio.models import CardioMode

    for m in CardioMode:
        if mode.lower() in (m.value.lower(), m.name.lower()):
            return m
    raise ValueError(f"mode must be one of {[m.value for m in CardioMode]}, got '{mode}'")


SESSION_ACTIONS = ("resume", "skip", "prev", "finish", "cancel")


def parse_interval_times(values: list[str]) -> list[tuple[int, int]]:
    """
    Parse "N=MM:SS" corrections into (0-based index, seconds) pairs.

    N is the 1-based interval number shown during a session.

    Raises:
        ValueError: Malformed entry or N below 1
    """
    from fitcoach.units import parse_duration

    parsed = []
    for value in values:
        number, sep, time_text = value.partition("=")
        if not sep or not number.strip().isdigit() or int(number) < 1:
            raise ValueError(f"Expected N=MM:SS with N >= 1, got '{value}'")
        parsed.append((int(number) - 1, parse_duration(time_text)))
    return parsed


def apply_session_action(session, action: str) -> bool:
    """
    Apply a choice from the pause menu of a live session.

    Returns:
        True if the workout continues, False once it should end
        (finished by the caller, or already cancelled)

    Raises:
        ValueError: Unknown action
    """
    if action == "resume":
        session.start()
    elif action == "skip":
        session.skip()
        session.start()
    elif action == "prev":
        session.prev()
        session.start()
    elif action == "cancel":
        session.cancel()
        return False
    elif action == "finish":
        return False
    else:
        raise ValueError(f"action must be one of {SESSION_ACTIONS}, got '{action}'")
    return True


def _render_session(session) -> Panel:
    from fitcoach.units import format_duration

    current = session.current
    lines = []
    if current is None:
        lines.append("[bold green]Workout complete[/bold green]")
    else:
        lines.append(
            f"[bold]{current.label or current.type.value}[/bold]  "
            f"({session.index + 1}/{len(session.intervals)})"
        )
        lines.append(f"Remaining: [cyan]{format_duration(session.remaining_sec)}[/cyan]")
        targets = []
        if current.target_hr:
            targets.append(f"HR {current.target_hr.min}-{current.target_hr.max}")
        if current.target_speed_kmh:
            targets.append(f"{current.target_speed_kmh} km/h")
        if current.target_incline_pct:
            targets.append(f"incline {current.target_incline_pct}%")
        if current.target_level:
            targets.append(f"level {current.target_level}")
        if targets:
            lines.append("Target: " + ", ".join(targets))
    lines.append("")
    lines.append("[dim]Ctrl+C to pause[/dim]")
    return Panel("\n".join(lines), title=f"{session.plan.mode} · {session.state.value}")


def _pause_menu(session) -> bool:
    """Prompt until a valid action is applied. Ctrl+C at the prompt finishes."""
    while True:
        try:
            action = typer.prompt(
                "/".join(SESSION_ACTIONS), default="resume", err=True
            ).strip().lower()
        except typer.Abort:
            return False
        try:
            return apply_session_action(session, action)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")


def _summary_data(summary, contribution, adherence, on_date: date) -> dict:
    return {
        "date": on_date.isoformat(),
        "summary": summary.to_dict(),
        "contribution": contribution.to_dict(),
        "week": {
            "liss_minutes": adherence.liss_minutes,
            "liss_sessions": adherence.liss_sessions,
            "sessions_total": adherence.sessions_total,
        },
    }


def _print_summary(summary, contribution, adherence) -> None:
    from fitcoach.units import format_duration

    console.print("[bold green]Session saved[/bold green]")
    console.print(f"  Time: {format_duration(summary.total_time_sec)}")
    if summary.total_distance_km is not None:
        console.print(f"  Distance: {summary.total_distance_km:.2f} km")
    if summary.avg_hr is not None:
        console.print(f"  Avg HR: {summary.avg_hr} bpm")
    console.print(
        f"  LISS: {contribution.liss_minutes} min"
        + (" (counts as a session)" if contribution.counts_as_liss_session else "")
    )
    console.print(
        f"  This week: {adherence.liss_minutes} LISS min, "
        f"{adherence.liss_sessions} LISS sessions, {adherence.sessions_total} total"
    )


@cardio_app.command("templates")
def cardio_templates(
    age: Optional[int] = typer.Option(None, "--age", help="Age for HR zones"),
    mode: str = typer.Option("Stairmaster", "--mode", help="Machine for zone/LISS templates"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List the stock workout templates."""
    from fitcoach.cardio.templates import TEMPLATES, build_template, sum_duration_sec
    from fitcoach.units import format_duration

    try:
        cardio_mode = _parse_mode(mode)
        if age is None:
            with get_db().get_connection() as conn:
                age = _age_for_templates(conn, user_id)
    except (FitcoachError, ValueError) as e:
        fail("cardio templates", e, json_output)

    plans = {name: build_template(name, age, cardio_mode) for name in TEMPLATES}

    if json_output:
        output_json(
            create_response(
                "cardio templates",
                data={
                    "age": age,
                    "templates": {
                        name: {**plan.to_dict(), "total_sec": sum_duration_sec(plan)}
                        for name, plan in plans.items()
                    },
                },
                human_summary=f"{len(plans)} templates",
            )
        )
        return

    table = Table(title=f"Cardio Templates (age {age})")
    table.add_column("Name", style="cyan")
    table.add_column("Mode")
    table.add_column("Intervals", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("First block")
    for name, plan in plans.items():
        first = plan.intervals[0] if plan.intervals else None
        table.add_row(
            name,
            plan.mode,
            str(len(plan.intervals)),
            format_duration(sum_duration_sec(plan)),
            (first.label or "") if first else "",
        )
    console.print(table)


@cardio_app.command("run")
def cardio_run(
    template: str = typer.Argument(..., help="Template name (sprint/z2/z3-4/liss)"),
    mode: str = typer.Option("Stairmaster", "--mode", help="Machine for zone/LISS templates"),
    age: Optional[int] = typer.Option(None, "--age", help="Age for HR zones"),
    liss: Optional[bool] = typer.Option(
        None, "--liss/--no-liss", help="Override whether this counts as LISS"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", help="Session notes"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Run a live cardio session with a countdown.

    Ctrl+C pauses and opens a menu: resume, skip, prev, finish or cancel.
    A cancelled session is discarded without saving.
    """
    from fitcoach.cardio.session import CardioSession, SessionState
    from fitcoach.cardio.templates import build_template
    from fitcoach.cardio.ticker import SessionTicker
    from fitcoach.tracking.queries import record_cardio_session

    settings = get_settings()
    db = get_db()
    try:
        cardio_mode = _parse_mode(mode)
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            if age is None:
                age = _age_for_templates(conn, profile.user_id)
        plan = build_template(template, age, cardio_mode)
    except (FitcoachError, ValueError) as e:
        fail("cardio run", e, json_output)

    session = CardioSession(plan, count_as_liss=liss)
    ticker = SessionTicker(session, tick_seconds=settings.session.tick_seconds)

    session.start()
    ticker.start()
    try:
        running = True
        while running:
            try:
                with Live(
                    _render_session(session), console=console, refresh_per_second=4
                ) as live:
                    while session.state is SessionState.RUNNING:
                        time.sleep(0.25)
                        live.update(_render_session(session))
                break
            except KeyboardInterrupt:
                session.pause()
            running = _pause_menu(session)
    finally:
        ticker.stop()

    if session.state is SessionState.CANCELLED:
        if json_output:
            output_json(
                create_response(
                    "cardio run",
                    data={"cancelled": True},
                    human_summary="Session discarded",
                )
            )
        else:
            console.print("[yellow]Session discarded, nothing saved[/yellow]")
        return

    summary = session.finish(notes)
    on_date = date.today()
    with db.get_connection() as conn:
        contribution, adherence = record_cardio_session(
            conn,
            profile.user_id,  # type: ignore[arg-type]
            summary,
            on_date,
            settings.defaults.liss_min_per_session,
        )

    if json_output:
        output_json(
            create_response(
                "cardio run",
                data=_summary_data(summary, contribution, adherence, on_date),
                human_summary=f"Logged {contribution.liss_minutes} LISS min",
            )
        )
    else:
        _print_summary(summary, contribution, adherence)


@cardio_app.command("log")
def cardio_log(
    minutes: Optional[float] = typer.Option(
        None, "--minutes", "-m", help="Minutes of steady cardio"
    ),
    duration: Optional[str] = typer.Option(
        None, "--duration", help="Length of steady cardio as MM:SS"
    ),
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Log a template as completed as planned"
    ),
    interval_times: Optional[list[str]] = typer.Option(
        None,
        "--interval-time",
        help="Correct one template interval, e.g. 3=01:10 (repeatable)",
    ),
    mode: str = typer.Option("Stairmaster", "--mode", help="Machine or activity"),
    liss: Optional[bool] = typer.Option(
        None, "--liss/--no-liss", help="Override whether this counts as LISS"
    ),
    avg_hr: Optional[float] = typer.Option(None, "--avg-hr", help="Average heart rate"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", help="Session notes"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a finished cardio session without running the timer."""
    from fitcoach.cardio.models import CardioInterval, CardioPlan, IntervalType
    from fitcoach.cardio.session import CardioSession
    from fitcoach.cardio.templates import build_template
    from fitcoach.units import parse_duration
    from fitcoach.tracking.queries import record_cardio_session

    sources = [v for v in (minutes, duration, template) if v is not None]
    if len(sources) != 1:
        fail(
            "cardio log",
            "Provide exactly one of --minutes, --duration or --template",
            json_output,
        )
    if interval_times and template is None:
        fail("cardio log", "--interval-time needs --template", json_output)

    settings = get_settings()
    db = get_db()
    on_date = parse_day(date_str)
    try:
        cardio_mode = _parse_mode(mode)
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            if template is not None:
                plan = build_template(template, _age_for_templates(conn, profile.user_id), cardio_mode)
            else:
                plan = CardioPlan(
                    mode=cardio_mode,
                    intervals=(
                        CardioInterval(
                            type=IntervalType.STEADY,
                            label="Steady",
                            duration_sec=(
                                parse_duration(duration)
                                if duration is not None
                                else (minutes or 0) * 60
                            ),
                        ),
                    ),
                )

            session = CardioSession(plan, count_as_liss=liss)
            for index, seconds in parse_interval_times(interval_times or []):
                session.update_log(index, "actual_time_sec", seconds)
            if avg_hr is not None:
                for i in range(len(session.intervals)):
                    session.update_log(i, "avg_hr", avg_hr)
            summary = session.finish(notes)

            contribution, adherence = record_cardio_session(
                conn,
                profile.user_id,  # type: ignore[arg-type]
                summary,
                on_date,
                settings.defaults.liss_min_per_session,
            )
    except (FitcoachError, ValueError, IndexError) as e:
        fail("cardio log", e, json_output)

    if json_output:
        output_json(
            create_response(
                "cardio log",
                data=_summary_data(summary, contribution, adherence, on_date),
                human_summary=f"Logged {contribution.liss_minutes} LISS min",
            )
        )
    else:
        _print_summary(summary, contribution, adherence)


@cardio_app.command("history")
def cardio_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Sessions to show"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List saved cardio sessions."""
    from fitcoach.tracking.queries import CardioSessionQueries
    from fitcoach.units import format_duration

    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            sessions = CardioSessionQueries.get_sessions(
                conn, profile.user_id, limit=limit  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("cardio history", e, json_output, [NO_PROFILE_HINT])

    if json_output:
        output_json(
            create_response(
                "cardio history",
                data={
                    "sessions": [
                        {"date": d.isoformat(), **s.to_dict()} for d, s in sessions
                    ]
                },
                human_summary=f"{len(sessions)} sessions",
            )
        )
        return

    if not sessions:
        console.print("No cardio sessions recorded yet")
        return

    table = Table(title="Cardio Sessions")
    table.add_column("Date", style="cyan")
    table.add_column("Mode")
    table.add_column("Time", justify="right")
    table.add_column("Dist km", justify="right")
    table.add_column("Avg HR", justify="right")
    table.add_column("LISS")
    for d, s in sessions:
        table.add_row(
            d.isoformat(),
            s.mode,
            format_duration(s.total_time_sec),
            f"{s.total_distance_km:.2f}" if s.total_distance_km is not None else "",
            str(s.avg_hr) if s.avg_hr is not None else "",
            "yes" if s.count_as_liss else "",
        )
    console.print(table)


# ============================================================================
# Adherence Commands
# ============================================================================


@adherence_app.command("show")
def adherence_show(
    weeks: int = typer.Option(4, "--weeks", "-w", help="Weeks of history to show"),
    user_id: Optional[int] = typer.Option(None, "--user", help="User ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show this week's LISS progress against the plan."""
    from fitcoach.tracking.queries import AdherenceQueries
    from fitcoach.units import week_start

    today = date.today()
    db = get_db()
    try:
        with db.get_connection() as conn:
            profile = resolve_user(conn, user_id)
            current = AdherenceQueries.get_week(conn, profile.user_id, today)  # type: ignore[arg-type]
            recent = AdherenceQueries.get_recent_weeks(
                conn, profile.user_id, weeks  # type: ignore[arg-type]
            )
    except ProfileNotFoundError as e:
        fail("adherence show", e, json_output, [NO_PROFILE_HINT])

    plan = profile.checkin
    minutes_goal = plan.weekly_liss_minutes if plan else 0
    sessions_goal = plan.liss_sessions_per_week if plan else 0

    if json_output:
        output_json(
            create_response(
                "adherence show",
                data={
                    "week_start": week_start(today).isoformat(),
                    "liss_minutes": current.liss_minutes,
                    "liss_sessions": current.liss_sessions,
                    "sessions_total": current.sessions_total,
                    "minutes_goal": minutes_goal,
                    "sessions_goal": sessions_goal,
                    "history": [
                        {
                            "week_start": w.isoformat(),
                            "liss_minutes": a.liss_minutes,
                            "liss_sessions": a.liss_sessions,
                            "sessions_total": a.sessions_total,
                        }
                        for w, a in recent
                    ],
                },
                human_summary=(
                    f"{current.liss_minutes}/{minutes_goal} LISS min, "
                    f"{current.liss_sessions}/{sessions_goal} sessions this week"
                ),
            )
        )
        return

    console.print(f"[bold]Week of {week_start(today)}[/bold]")
    console.print(f"  LISS minutes: {current.liss_minutes} / {minutes_goal}")
    console.print(f"  LISS sessions: {current.liss_sessions} / {sessions_goal}")
    console.print(f"  All cardio sessions: {current.sessions_total}")

    if recent:
        table = Table(title="Recent Weeks")
        table.add_column("Week", style="cyan")
        table.add_column("LISS min", justify="right")
        table.add_column("LISS sessions", justify="right")
        table.add_column("Total", justify="right")
        for w, a in recent:
            table.add_row(
                w.isoformat(),
                str(a.liss_minutes),
                str(a.liss_sessions),
                str(a.sessions_total),
            )
        console.print(table)


if __name__ == "__main__":
    app()
