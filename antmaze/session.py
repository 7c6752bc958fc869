"""Caller-side play state for one attempt at a level."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Set, Tuple

from .grid import CellType, Grid, Position
from .level import LevelRecord
from .scoring import ScoreResult, score
from .search import DIRECTION_NAMES, can_move

PLAYING = "playing"
WON = "won"

_KEY_ALIASES = {"w": "up", "s": "down", "a": "left", "d": "right"}


@dataclass
class MoveResult:
    moved: bool
    position: Position
    food_value: int = 0
    reached_exit: bool = False
    score: Optional[ScoreResult] = None
    improved_best: bool = False
    message: str = ""


class Playthrough:
    """Walk a level one orthogonal step at a time and score on arrival.

    Food is consumed from a working copy of the record's grid. The record's
    own grid is only read, so :meth:`reset` can always restore the level.
    """

    def __init__(self, record: LevelRecord) -> None:
        self.record = record
        self.reset()

    def reset(self) -> None:
        self.grid: Grid = self.record.grid.copy()
        self.position: Position = self.record.start
        self.steps = 0
        self.collected_food = 0
        self.visited: Set[Position] = {self.record.start}
        self.state = PLAYING
        self.result: Optional[ScoreResult] = None

    @property
    def finished(self) -> bool:
        return self.state == WON

    def can_move(self, target: Tuple[int, int]) -> bool:
        return not self.finished and can_move(self.grid, self.position, target)

    def move(self, target: Tuple[int, int]) -> MoveResult:
        if self.finished:
            return MoveResult(moved=False, position=self.position, message="Level already completed.")
        if not can_move(self.grid, self.position, target):
            return MoveResult(moved=False, position=self.position, message="Illegal move.")

        dest = Position(*target)
        self.steps += 1
        food_value = self.grid.get(dest).value_points
        if food_value:
            self.collected_food += food_value
            self.grid.set(dest, CellType.EMPTY)
        self.position = dest
        self.visited.add(dest)

        if dest != self.record.exit:
            return MoveResult(moved=True, position=dest, food_value=food_value)

        self.result = score(
            self.record.min_steps,
            self.steps,
            self.collected_food,
            self.record.max_food,
            self.record.total_cells,
        )
        self.state = WON
        improved = self.record.record_score(self.result)
        return MoveResult(
            moved=True,
            position=dest,
            food_value=food_value,
            reached_exit=True,
            score=self.result,
            improved_best=improved,
            message=f"Reached the exit in {self.steps} steps.",
        )

    def move_direction(self, name: str) -> MoveResult:
        """Move by direction name (up/down/left/right) or its w/s/a/d key."""
        key = name.lower()
        key = _KEY_ALIASES.get(key, key)
        try:
            dr, dc = DIRECTION_NAMES[key]
        except KeyError as exc:
            raise ValueError(f"Unknown direction '{name}'") from exc
        return self.move((self.position.row + dr, self.position.col + dc))


__all__ = ["PLAYING", "WON", "MoveResult", "Playthrough"]
