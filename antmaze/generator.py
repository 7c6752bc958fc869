"""Random level generator.

Levels are built in three passes: start and exit on opposite edge rows, then
walls that must keep the two connected, then food. Wall and food placement
are best effort within fixed attempt budgets, so generation always terminates.
"""

from __future__ import annotations

import logging
import math
import random
from typing import NamedTuple, Optional

from .grid import FOOD_KINDS, CellType, Grid, Position, clamp_dimension
from .search import shortest_path

logger = logging.getLogger(__name__)

WALL_DENSITY = 0.10
DENSE_WALL_DENSITY = 0.20
FOOD_DENSITY = 0.10
DENSE_FOOD_DENSITY = 0.20
WALL_ATTEMPT_FACTOR = 5
FOOD_ATTEMPT_FACTOR = 3


class MazeLayout(NamedTuple):
    grid: Grid
    start: Position
    exit: Position


class MazeGenerator:
    """Generate connected levels with walls and collectible food."""

    def __init__(
        self,
        rows: int,
        cols: int,
        more_walls: bool = False,
        more_food: bool = False,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rows = clamp_dimension(rows)
        self.cols = clamp_dimension(cols)
        self.more_walls = more_walls
        self.more_food = more_food
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols

    @property
    def wall_target(self) -> int:
        density = DENSE_WALL_DENSITY if self.more_walls else WALL_DENSITY
        return math.floor(self.total_cells * density)

    @property
    def food_target(self) -> int:
        density = DENSE_FOOD_DENSITY if self.more_food else FOOD_DENSITY
        return math.floor(self.total_cells * density)

    def generate(self) -> MazeLayout:
        grid = Grid(self.rows, self.cols)
        start, exit_pos = self._place_start_and_exit(grid)
        walls = self._place_walls(grid, start, exit_pos)
        food = self._place_food(grid)
        logger.debug("Generated %dx%d level: %d walls, %d food", self.rows, self.cols, walls, food)
        return MazeLayout(grid=grid, start=start, exit=exit_pos)

    # ------------------------------------------------------------------

    def _random_cell(self) -> Position:
        return Position(self.rng.randrange(self.rows), self.rng.randrange(self.cols))

    def _place_start_and_exit(self, grid: Grid) -> tuple[Position, Position]:
        start_at_top = self.rng.random() < 0.5
        start_row, exit_row = (0, self.rows - 1) if start_at_top else (self.rows - 1, 0)
        start = Position(start_row, self.rng.randrange(self.cols))
        exit_pos = Position(exit_row, self.rng.randrange(self.cols))
        grid.set(start, CellType.START)
        grid.set(exit_pos, CellType.EXIT)
        return start, exit_pos

    def _place_walls(self, grid: Grid, start: Position, exit_pos: Position) -> int:
        target = self.wall_target
        max_attempts = self.total_cells * WALL_ATTEMPT_FACTOR
        placed = 0
        attempts = 0
        while placed < target and attempts < max_attempts:
            attempts += 1
            cell = self._random_cell()
            if grid.get(cell) != CellType.EMPTY:
                continue
            grid.set(cell, CellType.WALL)
            if shortest_path(grid, start, exit_pos) is not None:
                placed += 1
            else:
                grid.set(cell, CellType.EMPTY)
        if placed < target:
            logger.debug("Wall budget exhausted: placed %d/%d after %d attempts", placed, target, attempts)
        return placed

    def _place_food(self, grid: Grid) -> int:
        target = self.food_target
        max_attempts = self.total_cells * FOOD_ATTEMPT_FACTOR
        placed = 0
        attempts = 0
        while placed < target and attempts < max_attempts:
            attempts += 1
            cell = self._random_cell()
            if grid.get(cell) != CellType.EMPTY:
                continue
            grid.set(cell, self.rng.choice(FOOD_KINDS))
            placed += 1
        if placed < target:
            logger.debug("Food budget exhausted: placed %d/%d after %d attempts", placed, target, attempts)
        return placed


def generate_maze(
    rows: int,
    cols: int,
    more_walls: bool = False,
    more_food: bool = False,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> MazeLayout:
    """Generate one level; dimensions are clamped into ``[8, 32]``."""
    return MazeGenerator(rows, cols, more_walls, more_food, seed=seed, rng=rng).generate()


__all__ = [
    "WALL_DENSITY",
    "DENSE_WALL_DENSITY",
    "FOOD_DENSITY",
    "DENSE_FOOD_DENSITY",
    "WALL_ATTEMPT_FACTOR",
    "FOOD_ATTEMPT_FACTOR",
    "MazeLayout",
    "MazeGenerator",
    "generate_maze",
]
