"""Food placement and injectable random sources."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import numpy as np

from snake_rooms.grid import Grid

if TYPE_CHECKING:
    from snake_rooms.snake import Cell, Snake

logger = logging.getLogger(__name__)

# A zero-argument callable returning a float in [0, 1).
RandomSource = Callable[[], float]


def seeded_random(seed: int | None = None) -> RandomSource:
    """Return a random source backed by a seeded NumPy generator."""
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def system_random() -> RandomSource:
    """Return an unseeded random source."""
    return seeded_random(None)


def spawn_food(
    snakes: Iterable[Snake],
    rows: int,
    cols: int,
    random: RandomSource,
) -> Cell | None:
    """Pick a uniformly random cell not covered by any snake body.

    Dead snakes still occupy their cells. Returns ``None`` when the board is
    full.
    """
    occupied = [cell for snake in snakes for cell in snake.body]
    empty = Grid(rows, cols).empty_cells(occupied)
    if not empty:
        logger.info("No empty cells available for food.")
        return None
    index = math.floor(random() * len(empty))
    # Guard against sources that return exactly 1.0.
    return empty[min(index, len(empty) - 1)]
