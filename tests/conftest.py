"""Pytest fixtures for fitcoach tests."""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from fitcoach.db.connection import DatabaseConnection, set_db
from fitcoach.tracking.models import CheckinPlan, Goal, Targets, UserProfile


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def cli_db(temp_db, tmp_path, monkeypatch):
    """Point the CLI at a temporary database and an empty config."""
    from fitcoach.config import reload_settings

    monkeypatch.setenv("FITCOACH_CONFIG", str(tmp_path / "config.yaml"))
    reload_settings()
    set_db(temp_db)

    yield temp_db

    set_db(None)
    reload_settings()


@pytest.fixture
def fat_loss_profile() -> UserProfile:
    """Fat-loss profile with a full prescription."""
    return UserProfile(
        user_id=None,
        goal=Goal.FAT_LOSS,
        sex="male",
        weight_kg=80.0,
        height_cm=180.0,
        activity="1-3/wk",
        age=30,
        targets=Targets(calories=2000, protein_g=150, carbs_g=200, fats_g=60),
        checkin=CheckinPlan(step_target=8000, liss_min_per_session=20, liss_sessions_per_week=3),
    )


@pytest.fixture
def checkin_time() -> datetime:
    """A Monday morning check-in."""
    return datetime(2025, 3, 10, 9, 0)

