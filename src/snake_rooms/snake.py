"""Snake value type and direction rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

Cell = tuple[int, int]


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def is_opposite(self, other: Direction) -> bool:
        """True when *other* would be an instant 180° reversal."""
        return self.dx + other.dx == 0 and self.dy + other.dy == 0

    @classmethod
    def parse(cls, value: Direction | str) -> Direction | None:
        """Resolve a direction or its name (``"UP"``, ``"left"``, ...)."""
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


@dataclass(frozen=True)
class Snake:
    """Immutable snapshot of one snake.

    ``body[0]`` is the head and ``body[-1]`` the tail. Every tick produces
    new ``Snake`` values; nothing here is mutated in place.
    """

    id: str
    name: str
    color: str
    body: tuple[Cell, ...]
    direction: Direction
    pending_direction: Direction | None = None
    growth: int = 0
    alive: bool = True
    score: int = 0

    @classmethod
    def spawn(
        cls,
        snake_id: str,
        name: str,
        color: str,
        head: Cell,
        direction: Direction,
        length: int = 3,
    ) -> Snake:
        """Build a snake whose body trails backward from *head*."""
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        x, y = head
        body = tuple(
            (x - direction.dx * i, y - direction.dy * i) for i in range(length)
        )
        return cls(
            id=snake_id, name=name, color=color, body=body, direction=direction,
        )

    @property
    def head(self) -> Cell:
        return self.body[0]

    def with_pending(self, direction: Direction) -> Snake:
        """Queue *direction* for the next tick, ignoring reversals."""
        if not self.alive or self.direction.is_opposite(direction):
            return self
        return replace(self, pending_direction=direction)

    def resolved_direction(self) -> Direction:
        """Direction the snake will commit to on the next tick."""
        pending = self.pending_direction
        if pending is not None and not self.direction.is_opposite(pending):
            return pending
        return self.direction

    def occupies(self, cell: Cell) -> bool:
        return cell in self.body
