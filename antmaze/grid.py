"""Grid model shared by the generator, path search and scorer.

Cells are stored as small integer codes in a NumPy array indexed ``[row, col]``.
The codes are stable because exported level payloads carry them verbatim.
"""

from __future__ import annotations

import enum
from typing import Dict, Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np

MIN_DIMENSION = 8
MAX_DIMENSION = 32


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    APPLE = 1
    BANANA = 2
    START = 3
    CHERRY = 4
    WALL = 7
    EXIT = 9

    @property
    def is_food(self) -> bool:
        return self in FOOD_VALUES

    @property
    def value_points(self) -> int:
        return FOOD_VALUES.get(self, 0)


FOOD_VALUES: Dict[CellType, int] = {
    CellType.APPLE: 100,
    CellType.BANANA: 200,
    CellType.CHERRY: 300,
}
FOOD_KINDS: Tuple[CellType, ...] = (CellType.APPLE, CellType.BANANA, CellType.CHERRY)

_KNOWN_CODES = frozenset(int(tag) for tag in CellType)


class Position(NamedTuple):
    row: int
    col: int


def clamp_dimension(value: int) -> int:
    """Clamp a requested row or column count into the supported range."""
    return max(MIN_DIMENSION, min(MAX_DIMENSION, int(value)))


class Grid:
    """NumPy-backed rectangular grid of cell tags.

    Requested dimensions are clamped into ``[8, 32]`` before allocation and
    every cell starts out ``EMPTY``. Play code must work on :meth:`copy`
    rather than the generated grid itself.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = clamp_dimension(rows)
        self.cols = clamp_dimension(cols)
        self.cells = np.full((self.rows, self.cols), CellType.EMPTY, dtype=np.int8)

    @classmethod
    def from_list(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """Build a grid from nested row lists of cell codes."""

        if not rows or not rows[0]:
            raise ValueError("Grid payload must contain at least one row and column")
        height = len(rows)
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("Grid payload must be rectangular")
        if not (MIN_DIMENSION <= height <= MAX_DIMENSION and MIN_DIMENSION <= width <= MAX_DIMENSION):
            raise ValueError(
                f"Grid dimensions must lie within [{MIN_DIMENSION}, {MAX_DIMENSION}], got {height}x{width}"
            )
        unknown = {int(code) for row in rows for code in row} - _KNOWN_CODES
        if unknown:
            raise ValueError(f"Unknown cell codes in grid payload: {sorted(unknown)}")
        grid = cls(height, width)
        grid.cells[:, :] = np.asarray(rows, dtype=np.int8)
        return grid

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, pos: Tuple[int, int]) -> None:
        if not self.in_bounds(pos):
            raise IndexError(f"Position {tuple(pos)} is outside a {self.rows}x{self.cols} grid")

    def get(self, pos: Tuple[int, int]) -> CellType:
        self._check(pos)
        return CellType(int(self.cells[pos[0], pos[1]]))

    def set(self, pos: Tuple[int, int], tag: CellType) -> None:
        self._check(pos)
        self.cells[pos[0], pos[1]] = CellType(tag)

    def positions(self) -> Iterator[Position]:
        """Enumerate every cell in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield Position(row, col)

    def count(self, tag: CellType) -> int:
        return int(np.count_nonzero(self.cells == tag))

    def find(self, tag: CellType) -> List[Position]:
        rows, cols = np.nonzero(self.cells == tag)
        return [Position(r, c) for r, c in zip(rows.tolist(), cols.tolist())]

    def food_cells(self) -> List[Position]:
        mask = np.isin(self.cells, [int(kind) for kind in FOOD_KINDS])
        rows, cols = np.nonzero(mask)
        return [Position(r, c) for r, c in zip(rows.tolist(), cols.tolist())]

    def copy(self) -> "Grid":
        duplicate = Grid(self.rows, self.cols)
        duplicate.cells = self.cells.copy()
        return duplicate

    def to_list(self) -> List[List[int]]:
        return self.cells.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.cells, other.cells))

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"


def total_food_value(grid: Grid) -> int:
    """Sum the point values of every food cell on the grid."""
    return sum(grid.count(kind) * points for kind, points in FOOD_VALUES.items())


__all__ = [
    "MIN_DIMENSION",
    "MAX_DIMENSION",
    "CellType",
    "FOOD_VALUES",
    "FOOD_KINDS",
    "Position",
    "clamp_dimension",
    "Grid",
    "total_food_value",
]
