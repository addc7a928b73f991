"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from reversnake.session import SessionState


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    variant: Literal["a", "b"] = "a"
    seed: int | None = None
    frame_interval_ms: int = Field(default=16, ge=5, le=1000)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    variant: str
    state: SessionState
    frame_interval_ms: int
    connected: bool


class KeyEvent(BaseModel):
    """A key transition sent over the play WebSocket."""

    key: str
    action: Literal["down", "up"]
