"""WebSocket handler feeding key events into a hosted session."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from reversnake.intent import Key
from reversnake.server.models import KeyEvent
from reversnake.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send key events, receive a snapshot each frame."""
    manager = _get_manager(websocket)
    hosted = manager.get_session(session_id)
    if hosted is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()

    # Enforce a single active socket per session.
    previous_ws = hosted.websocket
    if previous_ws is not None and previous_ws is not websocket:
        try:
            await previous_ws.close(code=4008, reason="Replaced by new connection.")
        except Exception:
            logger.warning(
                "Failed closing previous socket for session %s.", session_id,
            )

    hosted.websocket = websocket
    logger.info("Player connected to session %s.", session_id)

    # Send initial state snapshot so the client gets immediate feedback.
    async with hosted.lock:
        state = hosted.session.get_state()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                event = KeyEvent.model_validate_json(raw)
                key = Key(event.key.lower())
            except (ValidationError, ValueError):
                continue

            async with hosted.lock:
                hosted.key_event(key, down=event.action == "down")
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        # A newer connection may have replaced this socket while this handler
        # was still shutting down.
        if hosted.websocket is websocket:
            hosted.websocket = None
