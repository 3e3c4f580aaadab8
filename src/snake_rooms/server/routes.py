"""Read-only REST routes for inspecting rooms."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_rooms.server.models import RoomDetail, RoomSummary

router = APIRouter(prefix="/rooms", tags=["rooms"])


def _get_manager(request: Request):
    return request.app.state.room_manager


@router.get("")
async def list_rooms(request: Request) -> list[RoomSummary]:
    """List every open room."""
    return _get_manager(request).list_rooms()


@router.get("/{code}")
async def get_room(code: str, request: Request) -> RoomDetail:
    """Get a room's roster and current snapshot."""
    detail = _get_manager(request).describe_room(code)
    if detail is None:
        raise HTTPException(status_code=404, detail="Room not found.")
    return detail
