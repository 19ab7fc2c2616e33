"""JSON envelope printed by every ``--json`` command.

Scripts and coaching agents read the same top-level keys from every
command: ``success``, ``command``, ``data``, ``errors``, ``warnings``,
``suggestions``, ``human_summary``, ``timestamp`` and ``schema_version``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from fitcoach.exceptions import FitcoachError

SCHEMA_VERSION = "1.0"


def _encode(value: Any) -> Any:
    """json.dumps fallback for dates and enums left in command data."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


@dataclass
class AgentResponse:
    """Result of one CLI command in machine-readable form.

    ``timestamp`` is fixed when the response is built, so repeated
    serialization of one response gives identical output.
    """

    success: bool
    command: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    human_summary: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "command": self.command,
            "data": self.data,
            "errors": self.errors,
            "warnings": self.warnings,
            "suggestions": self.suggestions,
            "human_summary": self.human_summary,
            "timestamp": self.timestamp.isoformat(),
            "schema_version": SCHEMA_VERSION,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=_encode)


def create_response(
    command: str,
    success: bool = True,
    data: Optional[dict[str, Any]] = None,
    errors: Optional[list[str]] = None,
    warnings: Optional[list[str]] = None,
    suggestions: Optional[list[str]] = None,
    human_summary: str = "",
) -> AgentResponse:
    """Build a response, replacing missing lists and data with empty ones."""
    return AgentResponse(
        success=success,
        command=command,
        data=data or {},
        errors=errors or [],
        warnings=warnings or [],
        suggestions=suggestions or [],
        human_summary=human_summary,
    )


def error_response(
    command: str,
    error: "str | Exception",
    suggestions: Optional[list[str]] = None,
) -> AgentResponse:
    """
    Build a failed response from a message or an exception.

    A ``FitcoachError`` puts its ``to_dict()`` (error class name and
    details) into ``data`` so callers can branch on it, e.g. on the
    ``missing`` fields of a ProfileValidationError.

    Args:
        command: The command that failed
        error: Error message or exception
        suggestions: Next steps to fix the error

    Returns:
        AgentResponse with success=False
    """
    if isinstance(error, FitcoachError):
        data = error.to_dict()
        message = error.message
    else:
        data = {}
        message = str(error)
    return create_response(
        command,
        success=False,
        data=data,
        errors=[message],
        suggestions=suggestions,
        human_summary=f"Error: {message}",
    )
