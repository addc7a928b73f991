"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from reversnake.server.models import CreateSessionRequest, SessionSummary

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a session and start its frame loop."""
    manager = _get_manager(request)
    try:
        hosted = await manager.create_session(
            variant=body.variant,
            seed=body.seed,
            frame_interval_ms=body.frame_interval_ms,
        )
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return hosted.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the latest snapshot."""
    hosted = _get_manager(request).get_session(session_id)
    if hosted is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    async with hosted.lock:
        state = hosted.session.get_state()
    return {
        **hosted.summary().model_dump(mode="json"),
        "snapshot": state,
    }


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> None:
    """Stop and remove a session."""
    try:
        await _get_manager(request).delete_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
