"""WebSocket handler bridging connections to the room manager."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_rooms.server.room_manager import RoomManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> RoomManager:
    return ws.app.state.room_manager


@ws_router.websocket("/ws")
async def play(websocket: WebSocket) -> None:
    """Player WebSocket: send room/input messages, receive room and state frames."""
    manager = _get_manager(websocket)
    await websocket.accept()
    client_id = await manager.connect(websocket)

    try:
        while True:
            raw = await websocket.receive_text()
            await manager.handle_message(client_id, raw)
    except WebSocketDisconnect:
        logger.debug("Socket for %s closed by peer.", client_id)
    finally:
        await manager.disconnect(client_id)
