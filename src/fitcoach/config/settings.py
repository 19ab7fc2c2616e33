"""Application settings and configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

CONFIG_ENV_VAR = "FITCOACH_CONFIG"


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".fitcoach"


def _default_config_path() -> Path:
    """Return the config file path, honoring FITCOACH_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _default_config_dir() / "config.yaml"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "fitcoach.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)
    timeout_sec: float = 5.0  # wait for another writer before failing


@dataclass
class SessionConfig:
    """Live cardio session configuration."""

    tick_seconds: float = 1.0


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table" or "json"
    liss_min_per_session: int = 20
    liss_sessions_per_week: int = 3
    step_target: int = 8000


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses $FITCOACH_CONFIG
                or ~/.fitcoach/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "database" in data:
            db_data = data["database"] or {}
            if db_data.get("path"):
                settings.database.path = Path(db_data["path"]).expanduser()
            if "timeout_sec" in db_data:
                settings.database.timeout_sec = float(db_data["timeout_sec"])

        if "session" in data:
            session_data = data["session"] or {}
            if "tick_seconds" in session_data:
                settings.session.tick_seconds = float(session_data["tick_seconds"])

        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]
            if "liss_min_per_session" in def_data:
                settings.defaults.liss_min_per_session = int(
                    def_data["liss_min_per_session"]
                )
            if "liss_sessions_per_week" in def_data:
                settings.defaults.liss_sessions_per_week = int(
                    def_data["liss_sessions_per_week"]
                )
            if "step_target" in def_data:
                settings.defaults.step_target = int(def_data["step_target"])

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses the default location
        """
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
                "timeout_sec": self.database.timeout_sec,
            },
            "session": {
                "tick_seconds": self.session.tick_seconds,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "liss_min_per_session": self.defaults.liss_min_per_session,
                "liss_sessions_per_week": self.defaults.liss_sessions_per_week,
                "step_target": self.defaults.step_target,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
