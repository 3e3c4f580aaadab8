"""Grid geometry and the deterministic spawn table."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from snake_rooms.snake import Cell, Direction

# Distance of every spawn point from the nearest wall.
SPAWN_INSET = 2


@dataclass(frozen=True)
class Grid:
    """Wall-bound rectangular grid.

    Coordinates are ``(x, y)`` with ``0 <= x < cols`` and ``0 <= y < rows``.
    """

    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Grid dimensions must be positive.")

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a coordinate lies within the grid."""
        x, y = cell
        return 0 <= x < self.cols and 0 <= y < self.rows

    def occupancy(self, cells: Iterable[Cell]) -> np.ndarray:
        """Boolean ``(rows, cols)`` mask with True on every in-bounds cell given."""
        mask = np.zeros((self.rows, self.cols), dtype=bool)
        for x, y in cells:
            if 0 <= x < self.cols and 0 <= y < self.rows:
                mask[y, x] = True
        return mask

    def empty_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return unoccupied cells in row-major order."""
        ys, xs = np.nonzero(~self.occupancy(occupied))
        return list(zip(xs.tolist(), ys.tolist(), strict=True))


def spawn_points(rows: int, cols: int) -> list[tuple[int, int, Direction]]:
    """Ordered ``(x, y, facing)`` spawn table for up to six snakes.

    Corners first, then the two mid-edges. Left-half spawns face right and
    right-half spawns face left so every snake starts heading inward.
    """
    left = SPAWN_INSET
    right = cols - 1 - SPAWN_INSET
    top = SPAWN_INSET
    bottom = rows - 1 - SPAWN_INSET
    mid = rows // 2
    return [
        (left, top, Direction.RIGHT),
        (right, top, Direction.LEFT),
        (left, bottom, Direction.RIGHT),
        (right, bottom, Direction.LEFT),
        (left, mid, Direction.RIGHT),
        (right, mid, Direction.LEFT),
    ]
