"""Pydantic models for inbound messages and REST responses."""

from __future__ import annotations

import enum
import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from snake_rooms.errors import InvalidMessage


class RoomStatus(str, enum.Enum):
    """Lifecycle states for a room."""

    LOBBY = "lobby"
    RUNNING = "running"
    WIN = "win"
    GAMEOVER = "gameover"


class HostMessage(BaseModel):
    """Create a room and become its host."""

    type: Literal["host"]
    name: str | None = None


class JoinMessage(BaseModel):
    """Join an existing lobby by room code."""

    type: Literal["join"]
    code: str = Field(min_length=1, max_length=16)
    name: str | None = None


class StartMessage(BaseModel):
    type: Literal["start"]


class RestartMessage(BaseModel):
    type: Literal["restart"]


class InputMessage(BaseModel):
    """Direction request for the sender's snake."""

    type: Literal["input"]
    dir: Literal["UP", "DOWN", "LEFT", "RIGHT"]


InboundMessage = Annotated[
    Union[HostMessage, JoinMessage, StartMessage, RestartMessage, InputMessage],
    Field(discriminator="type"),
]

_INBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(InboundMessage)
_INBOUND_TYPES = frozenset({"host", "join", "start", "restart", "input"})


def parse_message(raw: str) -> InboundMessage:
    """Decode one text frame into a typed inbound message.

    Raises :class:`InvalidMessage` for anything that is not a well-formed
    message of a known type.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise InvalidMessage("Invalid JSON.") from exc
    if not isinstance(data, dict):
        raise InvalidMessage()
    if data.get("type") not in _INBOUND_TYPES:
        raise InvalidMessage("Unknown message type.")
    try:
        return _INBOUND_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise InvalidMessage() from exc


class PlayerInfo(BaseModel):
    id: str
    name: str
    color: str


class RoomSummary(BaseModel):
    """Compact room info for list endpoints."""

    code: str
    status: RoomStatus
    player_count: int
    max_players: int


class RoomDetail(RoomSummary):
    """Roster plus the current simulation snapshot, if any."""

    host_id: str
    players: list[PlayerInfo]
    state: dict | None = None
