"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_rooms.server.config import ServerConfig
from snake_rooms.server.room_manager import RoomManager
from snake_rooms.server.routes import router
from snake_rooms.server.websocket import ws_router


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    await app.state.room_manager.cleanup()


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Snake Rooms API", version="0.1.0", lifespan=_lifespan,
    )
    app.state.room_manager = RoomManager(config or ServerConfig())
    app.include_router(router)
    app.include_router(ws_router)
    return app
