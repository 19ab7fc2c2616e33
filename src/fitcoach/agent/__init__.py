"""JSON response envelope shared by every ``--json`` command."""

from __future__ import annotations

from fitcoach.agent.response import AgentResponse, create_response, error_response

__all__ = ["AgentResponse", "create_response", "error_response"]
