"""Snake Rooms: multiplayer snake simulation core."""

from snake_rooms.engine import (
    ActorSpec,
    GameState,
    GameStatus,
    advance_tick,
    create_simulation,
    retire_actor,
    set_actor_direction,
    toggle_pause,
)
from snake_rooms.food import seeded_random, spawn_food
from snake_rooms.grid import Grid, spawn_points
from snake_rooms.snake import Direction, Snake
from snake_rooms.solo import SoloGame

__all__ = [
    "ActorSpec",
    "Direction",
    "GameState",
    "GameStatus",
    "Grid",
    "Snake",
    "SoloGame",
    "advance_tick",
    "create_simulation",
    "retire_actor",
    "seeded_random",
    "set_actor_direction",
    "spawn_food",
    "spawn_points",
    "toggle_pause",
]
