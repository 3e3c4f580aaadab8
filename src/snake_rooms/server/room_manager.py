"""In-memory room registry, lifecycle management, and tick scheduling."""

from __future__ import annotations

import logging
from collections.abc import Container
from dataclasses import dataclass, field, replace
from typing import Any

from starlette.websockets import WebSocketState

from snake_rooms.engine import (
    GameState,
    GameStatus,
    advance_tick,
    create_simulation,
    retire_actor,
    set_actor_direction,
)
from snake_rooms.errors import (
    AlreadyInRoom,
    NotHost,
    NotInRoom,
    ProtocolError,
    RoomAlreadyStarted,
    RoomFull,
    RoomNotFound,
)
from snake_rooms.food import RandomSource, system_random
from snake_rooms.protocol import (
    encode,
    error_message,
    room_message,
    serialize_state,
    state_message,
    welcome_message,
)
from snake_rooms.server.config import ServerConfig
from snake_rooms.server.models import (
    HostMessage,
    InputMessage,
    JoinMessage,
    PlayerInfo,
    RestartMessage,
    RoomDetail,
    RoomStatus,
    RoomSummary,
    StartMessage,
    parse_message,
)
from snake_rooms.server.scheduler import RoomScheduler

logger = logging.getLogger(__name__)

# No 0/O, 1/I/L to keep codes readable aloud.
_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
_CODE_LENGTH = 4
_DEFAULT_NAME = "Player"


def generate_room_code(
    random: RandomSource, taken: Container[str], length: int = _CODE_LENGTH,
) -> str:
    """Draw short codes from *random* until one is not in *taken*."""
    size = len(_CODE_ALPHABET)
    while True:
        code = "".join(
            _CODE_ALPHABET[min(int(random() * size), size - 1)]
            for _ in range(length)
        )
        if code not in taken:
            return code


@dataclass
class Member:
    """A connected client seated in a room."""

    id: str
    name: str
    color: str
    connection: Any = None


@dataclass
class PlayerStats:
    """Lifetime totals for one member across games in the same room."""

    total_food: int = 0
    wins: int = 0


@dataclass
class Room:
    """All state for a single room."""

    code: str
    host_id: str
    members: dict[str, Member] = field(default_factory=dict)
    status: RoomStatus = RoomStatus.LOBBY
    game: GameState | None = None
    stats: dict[str, PlayerStats] = field(default_factory=dict)

    @property
    def player_count(self) -> int:
        return len(self.members)


class RoomManager:
    """Central registry managing every room and connected client.

    All methods run on one event loop. A room's tick task is the only writer
    of its simulation; message handlers only queue directions or change
    membership.
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        random: RandomSource | None = None,
        scheduler: RoomScheduler | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.random = random if random is not None else system_random()
        self.scheduler = scheduler or RoomScheduler()
        self._rooms: dict[str, Room] = {}
        self._connections: dict[str, Any] = {}
        self._room_by_client: dict[str, str] = {}
        self._next_client_id = 1

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_room(self, code: str) -> Room | None:
        return self._rooms.get(code.upper())

    def room_of(self, client_id: str) -> Room | None:
        code = self._room_by_client.get(client_id)
        return self._rooms.get(code) if code is not None else None

    def list_rooms(self) -> list[RoomSummary]:
        """Return summaries of every open room."""
        return [self._summary(room) for room in self._rooms.values()]

    def describe_room(self, code: str) -> RoomDetail | None:
        room = self.get_room(code)
        if room is None:
            return None
        return RoomDetail(
            **self._summary(room).model_dump(),
            host_id=room.host_id,
            players=[
                PlayerInfo(id=m.id, name=m.name, color=m.color)
                for m in room.members.values()
            ],
            state=serialize_state(room.game),
        )

    def _summary(self, room: Room) -> RoomSummary:
        return RoomSummary(
            code=room.code,
            status=room.status,
            player_count=room.player_count,
            max_players=self.config.max_players,
        )

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    async def connect(self, connection: Any) -> str:
        """Register a new connection and greet it with its client id."""
        client_id = f"p{self._next_client_id}"
        self._next_client_id += 1
        self._connections[client_id] = connection
        logger.info("Client %s connected.", client_id)
        await self._send(connection, encode(welcome_message(client_id)))
        return client_id

    async def handle_message(self, client_id: str, raw: str) -> None:
        """Parse and apply one inbound frame, reporting failures to the sender."""
        try:
            message = parse_message(raw)
            if isinstance(message, HostMessage):
                await self.host_room(client_id, message.name)
            elif isinstance(message, JoinMessage):
                await self.join_room(client_id, message.code, message.name)
            elif isinstance(message, StartMessage):
                await self.start_game(client_id)
            elif isinstance(message, RestartMessage):
                await self.restart_game(client_id)
            elif isinstance(message, InputMessage):
                self.submit_input(client_id, message.dir)
        except ProtocolError as exc:
            logger.info("Rejected request from %s: %s", client_id, exc.message)
            await self._send(
                self._connections.get(client_id),
                encode(error_message(exc.message)),
            )

    async def disconnect(self, client_id: str) -> None:
        """Remove a client from its room, migrating host or closing the room."""
        self._connections.pop(client_id, None)
        code = self._room_by_client.pop(client_id, None)
        room = self._rooms.get(code) if code is not None else None
        logger.info("Client %s disconnected.", client_id)
        if room is None:
            return

        room.members.pop(client_id, None)
        room.stats.pop(client_id, None)

        if not room.members:
            self.scheduler.stop(room.code)
            del self._rooms[room.code]
            logger.info("Room %s closed (empty).", room.code)
            return

        if room.host_id == client_id:
            # Earliest-joined remaining member inherits the room.
            room.host_id = next(iter(room.members))
            logger.info("Room %s host is now %s.", room.code, room.host_id)

        if room.game is not None:
            room.game = retire_actor(room.game, client_id)

        await self._broadcast(room, room_message(room))
        if room.status == RoomStatus.RUNNING:
            await self._broadcast(room, state_message(room.game))

    # ------------------------------------------------------------------
    # Room lifecycle
    # ------------------------------------------------------------------

    async def host_room(self, client_id: str, name: str | None = None) -> Room:
        """Create a new lobby with *client_id* as its only member and host."""
        if client_id in self._room_by_client:
            raise AlreadyInRoom()

        code = generate_room_code(self.random, self._rooms)
        room = Room(code=code, host_id=client_id)
        self._seat(room, client_id, name)
        self._rooms[code] = room
        logger.info("Room %s created by %s.", code, client_id)
        await self._broadcast(room, room_message(room))
        return room

    async def join_room(
        self, client_id: str, code: str, name: str | None = None,
    ) -> Room:
        """Add a client to a waiting lobby."""
        if client_id in self._room_by_client:
            raise AlreadyInRoom()
        room = self.get_room(code.strip())
        if room is None:
            raise RoomNotFound()
        if room.player_count >= self.config.max_players:
            raise RoomFull()
        if room.status != RoomStatus.LOBBY:
            raise RoomAlreadyStarted()

        member = self._seat(room, client_id, name)
        logger.info(
            "Client %s joined room %s as '%s'.", client_id, room.code, member.name,
        )
        await self._broadcast(room, room_message(room))
        return room

    async def start_game(self, client_id: str) -> Room:
        """Start a fresh game from the current roster. Only the host can start."""
        room = self._require_room(client_id)
        if room.host_id != client_id:
            raise NotHost()

        self.scheduler.stop(room.code)
        room.game = create_simulation(
            self.config.rows,
            self.config.cols,
            list(room.members.values()),
            self.random,
        )
        room.status = RoomStatus.RUNNING
        self.scheduler.start(room.code, self.config.tick_interval, self.tick_room)
        logger.info(
            "Room %s started with %d players.", room.code, room.player_count,
        )
        await self._broadcast(room, state_message(room.game))
        await self._broadcast(room, room_message(room))
        return room

    async def restart_game(self, client_id: str) -> Room:
        """Discard the current game and start over with the same roster."""
        return await self.start_game(client_id)

    def submit_input(self, client_id: str, direction: str) -> bool:
        """Queue a direction for the client's snake.

        Returns True if the pending direction changed.
        """
        room = self.room_of(client_id)
        if room is None or room.game is None or room.status != RoomStatus.RUNNING:
            logger.debug("Ignoring input from %s: no running game.", client_id)
            return False
        updated = set_actor_direction(room.game, client_id, direction)
        changed = updated is not room.game
        room.game = updated
        return changed

    async def tick_room(self, code: str) -> None:
        """Advance one room by one tick and broadcast the result."""
        room = self._rooms.get(code)
        if room is None or room.game is None or room.status != RoomStatus.RUNNING:
            self.scheduler.stop(code)
            return

        try:
            room.game = advance_tick(room.game, self.random)
        except Exception:
            logger.exception("Tick failed in room %s; ending the game.", code)
            room.game = replace(
                room.game, status=GameStatus.GAMEOVER, winner_id=None,
            )
        finished = room.game.status.is_terminal
        if finished:
            room.status = RoomStatus(room.game.status.value)
            self.scheduler.stop(code)
            self._fold_stats(room)
            logger.info(
                "Room %s finished (%s) at tick %d, winner=%s.",
                code, room.status.value, room.game.tick, room.game.winner_id,
            )

        await self._broadcast(room, state_message(room.game))
        if finished:
            await self._broadcast(room, room_message(room))

    def _fold_stats(self, room: Room) -> None:
        """Add finished-game scores and the win to lifetime stats."""
        assert room.game is not None  # noqa: S101
        for snake in room.game.snakes.values():
            stats = room.stats.get(snake.id)
            if stats is not None:
                stats.total_food += snake.score
        winner = room.game.winner_id
        if winner is not None and winner in room.stats:
            room.stats[winner].wins += 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_room(self, client_id: str) -> Room:
        room = self.room_of(client_id)
        if room is None:
            raise NotInRoom()
        return room

    def _seat(self, room: Room, client_id: str, name: str | None) -> Member:
        colors = self.config.colors
        member = Member(
            id=client_id,
            name=self._clean_name(name),
            color=colors[room.player_count % len(colors)],
            connection=self._connections.get(client_id),
        )
        room.members[client_id] = member
        room.stats.setdefault(client_id, PlayerStats())
        self._room_by_client[client_id] = room.code
        return member

    def _clean_name(self, name: str | None) -> str:
        cleaned = (name or "").strip()[: self.config.name_max_length]
        return cleaned or _DEFAULT_NAME

    async def _send(self, connection: Any, text: str) -> bool:
        if connection is None:
            return False
        try:
            if connection.client_state == WebSocketState.CONNECTED:
                await connection.send_text(text)
                return True
        except Exception:
            logger.warning("Failed sending frame to a client.")
        return False

    async def _broadcast(self, room: Room, payload: dict) -> None:
        """Send one payload to every member in join order."""
        text = encode(payload)
        # Iterate over a snapshot so disconnect handlers can mutate members.
        for member in list(room.members.values()):
            if member.connection is None:
                continue
            if not await self._send(member.connection, text):
                member.connection = None

    async def cleanup(self) -> None:
        """Cancel every tick loop."""
        await self.scheduler.stop_all()
        logger.info("RoomManager cleanup complete.")
