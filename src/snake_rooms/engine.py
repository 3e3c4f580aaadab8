"""Pure, tick-based simulation engine for one or more snakes.

Every public function takes a :class:`GameState` and returns a new one; the
input is never mutated. Randomness is always supplied by the caller, so a
seeded source makes whole games reproducible.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Protocol

from snake_rooms.food import RandomSource, spawn_food
from snake_rooms.grid import Grid, spawn_points
from snake_rooms.snake import Cell, Direction, Snake

logger = logging.getLogger(__name__)

INITIAL_SNAKE_LENGTH = 3


class GameStatus(str, enum.Enum):
    """Simulation lifecycle states."""

    RUNNING = "running"
    PAUSED = "paused"
    WIN = "win"
    GAMEOVER = "gameover"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WIN, GameStatus.GAMEOVER)


class Participant(Protocol):
    """Anything with the identity fields a snake is spawned from."""

    id: str
    name: str
    color: str


@dataclass(frozen=True)
class ActorSpec:
    """Plain participant record for callers without their own member type."""

    id: str
    name: str = "Player"
    color: str = "#2a2a2a"


@dataclass(frozen=True)
class GameState:
    """Full simulation snapshot.

    ``snakes`` preserves join order; it decides spawn slots and the order
    snakes appear in snapshots.
    """

    rows: int
    cols: int
    snakes: dict[str, Snake] = field(default_factory=dict)
    food: Cell | None = None
    status: GameStatus = GameStatus.RUNNING
    winner_id: str | None = None
    player_count: int = 0
    tick: int = 0

    @property
    def grid(self) -> Grid:
        return Grid(self.rows, self.cols)


def create_simulation(
    rows: int,
    cols: int,
    members: Iterable[Participant],
    random: RandomSource,
) -> GameState:
    """Spawn one snake per member in join order and place the first food."""
    table = spawn_points(rows, cols)
    snakes: dict[str, Snake] = {}
    for index, member in enumerate(members):
        x, y, facing = table[index % len(table)]
        snakes[member.id] = Snake.spawn(
            member.id, member.name, member.color, (x, y), facing,
            length=INITIAL_SNAKE_LENGTH,
        )
    return GameState(
        rows=rows,
        cols=cols,
        snakes=snakes,
        food=spawn_food(snakes.values(), rows, cols, random),
        player_count=len(snakes),
    )


def set_actor_direction(
    state: GameState, actor_id: str, direction: Direction | str,
) -> GameState:
    """Queue a direction change for one snake.

    Unknown ids, dead snakes, unknown direction names and 180° reversals
    leave the state untouched.
    """
    resolved = Direction.parse(direction)
    snake = state.snakes.get(actor_id)
    if resolved is None or snake is None:
        return state
    updated = snake.with_pending(resolved)
    if updated is snake:
        return state
    return replace(state, snakes={**state.snakes, actor_id: updated})


def retire_actor(state: GameState, actor_id: str) -> GameState:
    """Freeze a snake in place, e.g. when its player leaves mid-game."""
    snake = state.snakes.get(actor_id)
    if snake is None or not snake.alive:
        return state
    return replace(
        state,
        snakes={**state.snakes, actor_id: replace(snake, alive=False)},
    )


def toggle_pause(state: GameState) -> GameState:
    """Swap between running and paused; terminal states are unchanged."""
    if state.status == GameStatus.RUNNING:
        return replace(state, status=GameStatus.PAUSED)
    if state.status == GameStatus.PAUSED:
        return replace(state, status=GameStatus.RUNNING)
    return state


def alive_snakes(state: GameState) -> list[Snake]:
    return [s for s in state.snakes.values() if s.alive]


def advance_tick(state: GameState, random: RandomSource) -> GameState:
    """Advance the simulation by one tick with simultaneous collision rules.

    Death conditions (wall, head-to-head, self, head-to-body) are evaluated
    independently against the same provisional positions and unioned, so the
    result does not depend on snake iteration order.
    """
    if state.status != GameStatus.RUNNING:
        return state

    grid = state.grid
    moved: dict[str, Snake] = {}
    ate: set[str] = set()

    for sid, snake in state.snakes.items():
        if not snake.alive:
            moved[sid] = snake
            continue
        direction = snake.resolved_direction()
        hx, hy = snake.head
        new_head = (hx + direction.dx, hy + direction.dy)
        eats = state.food is not None and new_head == state.food
        grows = eats or snake.growth > 0
        body = (new_head, *snake.body)
        if not grows:
            body = body[:-1]
        if eats:
            ate.add(sid)
        moved[sid] = replace(
            snake, body=body, direction=direction, pending_direction=None,
        )

    living = [sid for sid in moved if moved[sid].alive]

    wall_dead = {sid for sid in living if not grid.in_bounds(moved[sid].head)}

    head_counts: Counter[Cell] = Counter(moved[sid].head for sid in living)
    head_dead = {sid for sid in living if head_counts[moved[sid].head] > 1}

    self_dead = {
        sid for sid in living if moved[sid].head in moved[sid].body[1:]
    }

    body_dead = {
        sid for sid in living
        if any(
            other != sid and moved[other].occupies(moved[sid].head)
            for other in living
        )
    }

    deaths = wall_dead | head_dead | self_dead | body_dead

    snakes: dict[str, Snake] = {}
    for sid, snake in moved.items():
        if sid in deaths:
            snakes[sid] = replace(snake, alive=False)
            logger.debug(
                "Snake %s died at tick %d with score %d.",
                sid, state.tick + 1, snake.score,
            )
            continue
        if not snake.alive:
            snakes[sid] = snake
            continue
        growth, score = snake.growth, snake.score
        if sid in ate:
            growth += 1
            score += 1
        if growth > 0:
            growth -= 1
        snakes[sid] = replace(snake, growth=growth, score=score)

    food = state.food
    if any(sid not in deaths for sid in ate):
        food = spawn_food(snakes.values(), state.rows, state.cols, random)

    stepped = replace(state, snakes=snakes, food=food, tick=state.tick + 1)
    survivors = alive_snakes(stepped)
    if food is None:
        return replace(stepped, status=GameStatus.WIN, winner_id=None)
    if not survivors or (state.player_count > 1 and len(survivors) == 1):
        return replace(
            stepped,
            status=GameStatus.GAMEOVER,
            winner_id=survivors[0].id if survivors else None,
        )
    return stepped
