"""Breadth-first shortest-path search over a level grid.

The search treats ``WALL`` as the only impassable tag. It runs inside the
generator's wall-placement loop, so it stays linear in the number of cells.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Tuple

import numpy as np

from .grid import CellType, Grid, Position

# Up, down, left, right. The order only affects exploration traces.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

DIRECTION_NAMES: Dict[str, Tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


class SearchInconsistencyError(RuntimeError):
    """Raised when a finished grid no longer connects its start and exit."""


def _bfs(
    grid: Grid,
    start: Tuple[int, int],
    target: Tuple[int, int],
    parents: Optional[Dict[Position, Optional[Position]]] = None,
) -> Optional[int]:
    for label, pos in (("start", start), ("target", target)):
        if not grid.in_bounds(pos):
            raise ValueError(f"{label} {tuple(pos)} is outside a {grid.rows}x{grid.cols} grid")

    rows, cols = grid.rows, grid.cols
    blocked = (grid.cells == CellType.WALL).tolist()
    visited = np.zeros((rows, cols), dtype=bool)
    origin = Position(*start)
    goal = Position(*target)
    queue: deque[Tuple[Position, int]] = deque([(origin, 0)])
    visited[origin.row, origin.col] = True
    if parents is not None:
        parents[origin] = None

    while queue:
        (r, c), dist = queue.popleft()
        if (r, c) == goal:
            return dist
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols:
                if not blocked[nr][nc] and not visited[nr, nc]:
                    visited[nr, nc] = True
                    nxt = Position(nr, nc)
                    if parents is not None:
                        parents[nxt] = Position(r, c)
                    queue.append((nxt, dist + 1))
    return None


def shortest_path(grid: Grid, start: Tuple[int, int], target: Tuple[int, int]) -> Optional[int]:
    """Return the minimum number of moves from ``start`` to ``target``.

    ``None`` means the target is unreachable. On a finished level that is an
    internal-consistency failure; use :func:`require_shortest_path` there.
    """

    return _bfs(grid, start, target)


def require_shortest_path(grid: Grid, start: Tuple[int, int], target: Tuple[int, int]) -> int:
    distance = _bfs(grid, start, target)
    if distance is None:
        raise SearchInconsistencyError(
            f"No path from {tuple(start)} to {tuple(target)} on a finished {grid.rows}x{grid.cols} grid"
        )
    return distance


def shortest_route(grid: Grid, start: Tuple[int, int], target: Tuple[int, int]) -> List[Position]:
    """Return one shortest route as a list of cells, both endpoints included.

    An empty list means the target is unreachable.
    """

    parents: Dict[Position, Optional[Position]] = {}
    if _bfs(grid, start, target, parents) is None:
        return []
    node: Optional[Position] = Position(*target)
    route: List[Position] = []
    while node is not None:
        route.append(node)
        node = parents[node]
    route.reverse()
    return route


def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def can_move(grid: Grid, current: Tuple[int, int], target: Tuple[int, int]) -> bool:
    """Single-step move legality: in bounds, orthogonally adjacent, not a wall."""

    if not grid.in_bounds(target) or not is_adjacent(current, target):
        return False
    return grid.get(target) != CellType.WALL


__all__ = [
    "DIRECTIONS",
    "DIRECTION_NAMES",
    "SearchInconsistencyError",
    "shortest_path",
    "require_shortest_path",
    "shortest_route",
    "is_adjacent",
    "can_move",
]
