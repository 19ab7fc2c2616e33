"""Tests for YAML settings."""

from __future__ import annotations

from pathlib import Path

from fitcoach.config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Tests for Settings.load and save."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path / "absent.yaml")
        assert settings.session.tick_seconds == 1.0
        assert settings.defaults.liss_min_per_session == 20
        assert settings.defaults.liss_sessions_per_week == 3
        assert settings.defaults.step_target == 8000
        assert settings.database.path.name == "fitcoach.db"

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("defaults:\n  liss_min_per_session: 25\nsession:\n")
        settings = Settings.load(path)
        assert settings.defaults.liss_min_per_session == 25
        assert settings.defaults.step_target == 8000
        assert settings.session.tick_seconds == 1.0

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.database.path = tmp_path / "coach.db"
        settings.session.tick_seconds = 0.5
        settings.database.timeout_sec = 2.0
        settings.defaults.output_format = "json"
        settings.save(path)

        loaded = Settings.load(path)
        assert loaded.database.path == tmp_path / "coach.db"
        assert loaded.session.tick_seconds == 0.5
        assert loaded.database.timeout_sec == 2.0
        assert loaded.defaults.output_format == "json"

    def test_env_var_overrides_path(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "env.yaml"
        path.write_text("defaults:\n  step_target: 10000\n")
        monkeypatch.setenv("FITCOACH_CONFIG", str(path))
        try:
            assert reload_settings().defaults.step_target == 10000
            assert get_settings().defaults.step_target == 10000
        finally:
            monkeypatch.delenv("FITCOACH_CONFIG")
            reload_settings()
