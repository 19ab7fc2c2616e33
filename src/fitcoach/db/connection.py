"""SQLite access: one connection per unit of work."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from fitcoach.db.schema import TABLES, get_schema_sql

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Opens short-lived connections to the coaching database.

    Each ``get_connection()`` block is one transaction. A check-in writes
    the new prescription and its history entry in one block; a cardio
    session writes its summary and the week's adherence in one block.
    """

    def __init__(self, db_path: Path, timeout_sec: float = 5.0):
        """
        Args:
            db_path: Path to the SQLite database file (parents are created)
            timeout_sec: How long a writer waits on another writer's lock
        """
        self.db_path = Path(db_path)
        self.timeout_sec = timeout_sec
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection; commit on success, roll back if the block raises.

        Example:
            with db.get_connection() as conn:
                window = WeightQueries.get_window(conn, user_id, date.today())
        """
        conn = sqlite3.connect(self.db_path, timeout=self.timeout_sec)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            logger.debug("Rolled back transaction on %s", self.db_path)
            raise
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create any missing tables and indexes. Safe to call on every command."""
        with self.get_connection() as conn:
            conn.executescript(get_schema_sql())

    def missing_tables(self) -> list[str]:
        """Names of coaching tables not present yet (empty once initialized)."""
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
        present = {row["name"] for row in rows}
        return [name for name in TABLES if name not in present]


# Global database instance (lazy loaded)
_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """Return the shared database, opened at ``settings.database.path``."""
    global _db
    if _db is None:
        from fitcoach.config import get_settings

        settings = get_settings()
        _db = DatabaseConnection(settings.database.path, settings.database.timeout_sec)
    return _db


def set_db(db: Optional[DatabaseConnection]) -> None:
    """Swap the shared database (tests); None goes back to the settings path."""
    global _db
    _db = db
