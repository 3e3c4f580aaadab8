"""Single-snake game driven by the shared pure engine."""

from __future__ import annotations

import logging
from dataclasses import replace

from snake_rooms.engine import (
    GameState,
    GameStatus,
    advance_tick,
    set_actor_direction,
    toggle_pause,
)
from snake_rooms.food import seeded_random, spawn_food
from snake_rooms.protocol import serialize_state
from snake_rooms.snake import Direction, Snake

logger = logging.getLogger(__name__)

SOLO_ID = "solo"


class SoloGame:
    """Single-snake, step-based game.

    The snake starts at the grid center facing right. Each call to
    :meth:`step` advances the game by one tick and returns the snapshot
    dictionary. The game only ends when the snake dies or fills the board.
    """

    def __init__(
        self,
        rows: int = 20,
        cols: int = 20,
        seed: int | None = None,
        name: str = "Player",
        color: str = "#2a2a2a",
    ) -> None:
        if rows < 4 or cols < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.rows = rows
        self.cols = cols
        self.name = name
        self.color = color
        self.random = seeded_random(seed)
        self.state = self._initial_state()

    def _initial_state(self) -> GameState:
        head = (self.cols // 2 + 1, self.rows // 2)
        snake = Snake.spawn(SOLO_ID, self.name, self.color, head, Direction.RIGHT)
        return GameState(
            rows=self.rows,
            cols=self.cols,
            snakes={SOLO_ID: snake},
            food=spawn_food([snake], self.rows, self.cols, self.random),
            player_count=1,
        )

    @property
    def snake(self) -> Snake:
        return self.state.snakes[SOLO_ID]

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def score(self) -> int:
        return self.snake.score

    def set_direction(self, direction: Direction | str) -> None:
        """Request a turn for the next step; reversals are ignored."""
        self.state = set_actor_direction(self.state, SOLO_ID, direction)

    def step(self) -> dict:
        """Advance the game by one tick and return the snapshot."""
        before = self.state.status
        previous = self.snake
        self.state = advance_tick(self.state, self.random)
        if previous.alive and not self.snake.alive:
            # A fatal move is not applied; the snake stays where it was.
            self.state = replace(
                self.state,
                snakes={SOLO_ID: replace(self.snake, body=previous.body)},
            )
        if before == GameStatus.RUNNING and self.state.status.is_terminal:
            logger.info(
                "Solo game ended (%s) at tick %d with score %d.",
                self.state.status.value, self.state.tick, self.score,
            )
        return self.get_state()

    def toggle_pause(self) -> GameStatus:
        self.state = toggle_pause(self.state)
        return self.state.status

    def reset(self) -> dict:
        """Start over on a grid of the same size."""
        self.state = self._initial_state()
        return self.get_state()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return serialize_state(self.state)
