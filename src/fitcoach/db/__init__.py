"""SQLite persistence for profiles, weigh-ins, check-ins and cardio sessions."""

from fitcoach.db.connection import DatabaseConnection, get_db, set_db

__all__ = ["DatabaseConnection", "get_db", "set_db"]
