"""Tests for grid geometry and the spawn table."""

import itertools

import pytest

from snake_rooms.engine import ActorSpec, create_simulation
from snake_rooms.grid import Grid, spawn_points
from snake_rooms.snake import Direction


class TestGrid:
    def test_in_bounds(self):
        grid = Grid(rows=5, cols=8)
        assert grid.in_bounds((0, 0))
        assert grid.in_bounds((7, 4))
        assert not grid.in_bounds((8, 0))
        assert not grid.in_bounds((0, 5))
        assert not grid.in_bounds((-1, 2))

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError, match="positive"):
            Grid(rows=0, cols=5)

    def test_occupancy_ignores_out_of_bounds(self):
        grid = Grid(rows=3, cols=3)
        mask = grid.occupancy([(1, 2), (5, 5), (-1, 0)])
        assert mask.shape == (3, 3)
        assert mask.sum() == 1
        assert mask[2, 1]

    def test_empty_cells_row_major(self):
        grid = Grid(rows=2, cols=3)
        assert grid.empty_cells([(1, 0)]) == [(0, 0), (2, 0), (0, 1), (1, 1), (2, 1)]

    def test_empty_cells_full_board(self):
        grid = Grid(rows=2, cols=2)
        assert grid.empty_cells([(0, 0), (1, 0), (0, 1), (1, 1)]) == []


class TestSpawnPoints:
    def test_table_layout(self):
        table = spawn_points(20, 30)
        assert table == [
            (2, 2, Direction.RIGHT),
            (27, 2, Direction.LEFT),
            (2, 17, Direction.RIGHT),
            (27, 17, Direction.LEFT),
            (2, 10, Direction.RIGHT),
            (27, 10, Direction.LEFT),
        ]

    def test_spawns_face_inward(self):
        cols = 20
        for x, _, facing in spawn_points(20, cols):
            if x < cols // 2:
                assert facing == Direction.RIGHT
            else:
                assert facing == Direction.LEFT

    @pytest.mark.parametrize(
        ("rows", "cols"), list(itertools.product([8, 9, 13, 20, 31], [8, 10, 20, 40])),
    )
    def test_initial_bodies_never_overlap(self, rows, cols):
        members = [ActorSpec(f"p{i}") for i in range(6)]
        state = create_simulation(rows, cols, members, lambda: 0.0)
        grid = Grid(rows, cols)
        seen: set = set()
        for snake in state.snakes.values():
            assert len(snake.body) == 3
            for cell in snake.body:
                assert grid.in_bounds(cell)
                assert cell not in seen
                seen.add(cell)
