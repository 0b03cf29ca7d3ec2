"""Pydantic response models for the HTTP server.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness payload for load balancers and uptime checks."""

    status: str = Field(description="Always 'ok' when the process is serving.")
    version: str = Field(description="Package version of the running bot.")
    active_sessions: int = Field(
        description="Open multi-turn conversations currently held in memory.",
    )
    broadcast_running: bool = Field(
        description="Whether the scheduled trivia broadcast thread is alive.",
    )


class ErrorResponse(BaseModel):
    """Standard error body returned by the server's own endpoints."""

    detail: str = Field(description="Human-readable error message.")
