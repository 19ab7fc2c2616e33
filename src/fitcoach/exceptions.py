"""Exception hierarchy for the coaching loop.

Each exception carries a short message plus an optional ``details`` dict
that the CLI copies into the JSON error envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class FitcoachError(Exception):
    """Base class for all fitcoach errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class ProfileValidationError(FitcoachError, ValueError):
    """Profile is missing the fields a check-in needs (goal, targets, plan)."""

    def __init__(self, missing: list[str]):
        super().__init__(
            f"Profile is missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )
        self.missing = missing


class ProfileNotFoundError(FitcoachError):
    """No user profile exists for the requested id."""


class SessionClosedError(FitcoachError, RuntimeError):
    """A cardio session was used after it was finished or cancelled."""
