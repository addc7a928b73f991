"""FastAPI application hosting Reversnake sessions."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from reversnake.server.routes import router
from reversnake.server.session_manager import SessionManager
from reversnake.server.websocket import ws_router

logger = logging.getLogger(__name__)


def create_app(max_sessions: int = 100) -> FastAPI:
    """Build the app; the session registry lives for the app's lifespan.

    *max_sessions* bounds the registry; beyond it idle sessions are evicted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session_manager = SessionManager(max_sessions=max_sessions)
        logger.info("Session host up (max %d sessions).", max_sessions)
        try:
            yield
        finally:
            await app.state.session_manager.cleanup()

    app = FastAPI(title="Reversnake API", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    app.include_router(ws_router)
    return app
