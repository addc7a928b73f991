"""In-memory session registry, key buffering, and async frame loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from reversnake.clock import monotonic_ms
from reversnake.config import VariantConfig
from reversnake.intent import FrameInput, Key
from reversnake.server.models import SessionSummary
from reversnake.session import Session

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class HostedSession:
    """A session plus the host-side state needed to feed it frames."""

    session_id: str
    session: Session
    frame_interval_ms: int
    websocket: WebSocket | None = None
    pressed: set[Key] = field(default_factory=set)
    released: set[Key] = field(default_factory=set)
    held: set[Key] = field(default_factory=set)
    deferred: set[Key] = field(default_factory=set)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    def key_event(self, key: Key, down: bool) -> None:
        """Record a key transition for the next frame.

        Repeated downs of a held key (auto-repeat) are ignored. A key
        pressed and released within one frame stays held for that frame
        and is released on the next.
        """
        if down:
            if key not in self.held:
                self.pressed.add(key)
                self.held.add(key)
        elif key in self.pressed:
            self.deferred.add(key)
        elif key in self.held:
            self.released.add(key)
            self.held.discard(key)

    def drain_frame(self) -> FrameInput:
        """Fold buffered transitions into one frame and clear the buffer."""
        frame = FrameInput(
            pressed=frozenset(self.pressed),
            released=frozenset(self.released),
            held=frozenset(self.held),
        )
        self.pressed.clear()
        self.released.clear()
        for key in self.deferred:
            self.released.add(key)
            self.held.discard(key)
        self.deferred.clear()
        return frame

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            variant=self.session.config.name,
            state=self.session.state,
            frame_interval_ms=self.frame_interval_ms,
            connected=self.connected,
        )


class SessionManager:
    """Central registry managing all hosted sessions."""

    def __init__(self, max_sessions: int = _MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, HostedSession] = {}
        self._max_sessions = max_sessions

    async def create_session(
        self,
        variant: str = "a",
        seed: int | None = None,
        frame_interval_ms: int = 16,
    ) -> HostedSession:
        """Create a session and start its frame loop.

        At the limit, the oldest idle session is evicted to make room.
        """
        if len(self._sessions) >= self._max_sessions:
            await self._evict_idle_session()
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Try again later.")

        config = VariantConfig.named(variant)
        session_id = uuid.uuid4().hex[:12]
        hosted = HostedSession(
            session_id=session_id,
            session=Session(config, seed=seed),
            frame_interval_ms=frame_interval_ms,
        )
        self._sessions[session_id] = hosted
        hosted._task = asyncio.create_task(self._frame_loop(hosted))
        logger.info("Session %s created (variant=%s).", session_id, variant)
        return hosted

    def get_session(self, session_id: str) -> HostedSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [h.summary() for h in self._sessions.values()]

    async def delete_session(self, session_id: str) -> None:
        """Stop a session's frame loop and drop it from the registry."""
        hosted = self._sessions.pop(session_id, None)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop(hosted)
        logger.info("Session %s deleted.", session_id)

    async def _evict_idle_session(self) -> None:
        """Drop the oldest session nobody is playing.

        A session is idle when no socket is attached or its game is not
        running. Connected, running sessions are never evicted.
        """
        idle = [
            h for h in self._sessions.values()
            if not h.connected or not h.session.running
        ]
        if not idle:
            return
        stale = min(idle, key=lambda h: h.created_at)
        self._sessions.pop(stale.session_id, None)
        await self._stop(stale)
        logger.info(
            "Evicted idle session %s (retaining up to %d).",
            stale.session_id,
            self._max_sessions,
        )

    async def _frame_loop(self, hosted: HostedSession) -> None:
        """Step the session once per frame and stream the snapshot."""
        interval = hosted.frame_interval_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(interval)
                async with hosted.lock:
                    frame = hosted.drain_frame()
                    state = hosted.session.step(frame, monotonic_ms())
                await self._send(hosted, state)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for session %s.", hosted.session_id)
        except Exception:
            logger.exception("Frame loop error in session %s.", hosted.session_id)

    async def _send(self, hosted: HostedSession, state: dict) -> None:
        ws = hosted.websocket
        if ws is None:
            return
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.send_text(json.dumps(state, separators=(",", ":")))
        except Exception:
            logger.warning(
                "Failed sending snapshot for session %s; dropping socket.",
                hosted.session_id,
            )
            if hosted.websocket is ws:
                hosted.websocket = None

    async def _stop(self, hosted: HostedSession) -> None:
        task = hosted._task
        if task and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        ws = hosted.websocket
        hosted.websocket = None
        if ws is None:
            return
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.close(code=1000, reason="Session closed.")
        except Exception:
            logger.warning(
                "Failed closing player socket for session %s.",
                hosted.session_id,
            )

    async def cleanup(self) -> None:
        """Cancel all running frame loops."""
        for hosted in list(self._sessions.values()):
            await self._stop(hosted)
        self._sessions.clear()
        logger.info("SessionManager cleanup complete.")
