"""Protocol errors reported back to the offending connection."""

from __future__ import annotations


class ProtocolError(Exception):
    """A non-fatal request failure; the message is shown to the client."""

    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidMessage(ProtocolError):
    default_message = "Malformed message."


class RoomNotFound(ProtocolError):
    default_message = "Room not found."


class RoomFull(ProtocolError):
    default_message = "Room is full."


class RoomAlreadyStarted(ProtocolError):
    default_message = "Game already started."


class NotHost(ProtocolError):
    default_message = "Only the host can start the game."


class NotInRoom(ProtocolError):
    default_message = "You are not in a room."


class AlreadyInRoom(ProtocolError):
    default_message = "Already in a room."
