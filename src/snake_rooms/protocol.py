"""Snapshot and roster serialization for the wire protocol.

Every outbound frame is a JSON object tagged with ``type``. Snapshots are
always complete; there is no delta encoding.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from snake_rooms.engine import GameState

if TYPE_CHECKING:
    from snake_rooms.server.room_manager import Room
    from snake_rooms.snake import Cell


def _cell(cell: Cell) -> dict[str, int]:
    return {"x": cell[0], "y": cell[1]}


def serialize_state(state: GameState | None) -> dict | None:
    """Full simulation snapshot in wire shape."""
    if state is None:
        return None
    return {
        "rows": state.rows,
        "cols": state.cols,
        "food": _cell(state.food) if state.food is not None else None,
        "status": state.status.value,
        "winnerId": state.winner_id,
        "snakes": [
            {
                "id": snake.id,
                "name": snake.name,
                "color": snake.color,
                "alive": snake.alive,
                "score": snake.score,
                "body": [_cell(c) for c in snake.body],
            }
            for snake in state.snakes.values()
        ],
    }


def serialize_room(room: Room) -> dict:
    """Room roster, lifecycle status, and lifetime stats."""
    return {
        "code": room.code,
        "hostId": room.host_id,
        "status": room.status.value,
        "players": [
            {"id": m.id, "name": m.name, "color": m.color}
            for m in room.members.values()
        ],
        "stats": {
            cid: {"totalFood": s.total_food, "wins": s.wins}
            for cid, s in room.stats.items()
        },
    }


def welcome_message(client_id: str) -> dict:
    return {"type": "welcome", "id": client_id}


def room_message(room: Room) -> dict:
    return {"type": "room", "room": serialize_room(room)}


def state_message(state: GameState | None) -> dict:
    return {"type": "state", "state": serialize_state(state)}


def error_message(message: str) -> dict:
    return {"type": "error", "message": message}


def encode(payload: dict) -> str:
    """Compact JSON text frame."""
    return json.dumps(payload, separators=(",", ":"))


@dataclass(frozen=True)
class BoardView:
    """Occupancy view decoded from a ``state`` snapshot."""

    rows: int
    cols: int
    occupied: frozenset[Cell]
    heads: dict[str, Cell]
    food: Cell | None
    status: str
    winner_id: str | None


def parse_state(snapshot: dict[str, Any]) -> BoardView:
    """Decode a serialized snapshot back into board occupancy."""
    occupied: set[Cell] = set()
    heads: dict[str, Cell] = {}
    for snake in snapshot["snakes"]:
        body = [(seg["x"], seg["y"]) for seg in snake["body"]]
        occupied.update(body)
        if body:
            heads[snake["id"]] = body[0]
    food = snapshot.get("food")
    return BoardView(
        rows=snapshot["rows"],
        cols=snapshot["cols"],
        occupied=frozenset(occupied),
        heads=heads,
        food=(food["x"], food["y"]) if food is not None else None,
        status=snapshot["status"],
        winner_id=snapshot.get("winnerId"),
    )
