"""Level configuration and the records a caller keeps for replays."""

from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional

from .generator import MazeGenerator
from .grid import CellType, Grid, Position, clamp_dimension, total_food_value
from .scoring import ScoreResult
from .search import require_shortest_path


@dataclass(frozen=True)
class LevelConfig:
    """Parameters a level is generated from."""

    rows: int = 12
    cols: int = 12
    more_walls: bool = False
    more_food: bool = True

    def clamped(self) -> "LevelConfig":
        return replace(self, rows=clamp_dimension(self.rows), cols=clamp_dimension(self.cols))

    def storage_key(self) -> str:
        """Key under which a caller may store the high score for this configuration."""
        walls = "w" if self.more_walls else "nw"
        food = "f" if self.more_food else "nf"
        return f"antmaze_high_{self.rows}x{self.cols}_{walls}_{food}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "more_walls": self.more_walls,
            "more_food": self.more_food,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LevelConfig":
        return cls(
            rows=int(payload["rows"]),
            cols=int(payload["cols"]),
            more_walls=bool(payload.get("more_walls", cls.more_walls)),
            more_food=bool(payload.get("more_food", cls.more_food)),
        )


@dataclass
class LevelRecord:
    """A generated level plus the measurements scoring needs.

    ``grid`` is the level as generated and is never mutated; play happens on
    copies so the record can always serve as the reset and replay baseline.
    """

    id: str
    timestamp: int
    config: LevelConfig
    grid: Grid
    start: Position
    exit: Position
    min_steps: int
    max_food: int
    total_cells: int
    best_score: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config: Optional[LevelConfig] = None,
        *,
        level_id: Optional[str] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> "LevelRecord":
        resolved = (config or LevelConfig()).clamped()
        layout = MazeGenerator(
            resolved.rows,
            resolved.cols,
            resolved.more_walls,
            resolved.more_food,
            seed=seed,
            rng=rng,
        ).generate()
        return cls(
            id=level_id or str(uuid.uuid4()),
            timestamp=int(time.time() * 1000),
            config=resolved,
            grid=layout.grid,
            start=layout.start,
            exit=layout.exit,
            min_steps=require_shortest_path(layout.grid, layout.start, layout.exit),
            max_food=total_food_value(layout.grid),
            total_cells=layout.grid.total_cells,
        )

    def record_score(self, result: ScoreResult) -> bool:
        """Keep the best final score seen for this level; return True if it improved."""
        if self.best_score is None or result.final_score > self.best_score:
            self.best_score = result.final_score
            return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "maze": self.grid.to_list(),
            "start": [self.start.row, self.start.col],
            "exit": [self.exit.row, self.exit.col],
            "min_steps": self.min_steps,
            "max_food": self.max_food,
            "total_cells": self.total_cells,
            "best_score": self.best_score,
        }
        for key, value in self.extra.items():
            if key not in payload:
                payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LevelRecord":
        known = {
            "id", "timestamp", "config", "maze", "start", "exit",
            "min_steps", "max_food", "total_cells", "best_score",
        }
        missing = known - {"best_score"} - set(payload)
        if missing:
            raise ValueError(f"Level payload is missing fields: {sorted(missing)}")
        best = payload.get("best_score")
        record = cls(
            id=str(payload["id"]),
            timestamp=int(payload["timestamp"]),
            config=LevelConfig.from_dict(payload["config"]),
            grid=Grid.from_list(payload["maze"]),
            start=Position(*(int(v) for v in payload["start"])),
            exit=Position(*(int(v) for v in payload["exit"])),
            min_steps=int(payload["min_steps"]),
            max_food=int(payload["max_food"]),
            total_cells=int(payload["total_cells"]),
            best_score=None if best is None else int(best),
            extra={key: value for key, value in payload.items() if key not in known},
        )
        record._validate()
        return record

    def _validate(self) -> None:
        """Check a loaded record against the invariants a generated level satisfies."""
        for label, pos, tag in (("start", self.start, CellType.START), ("exit", self.exit, CellType.EXIT)):
            if not self.grid.in_bounds(pos):
                raise ValueError(f"Level {label} {tuple(pos)} is outside a {self.grid.rows}x{self.grid.cols} grid")
            if self.grid.count(tag) != 1:
                raise ValueError(f"Level grid must contain exactly one {tag.name} cell, found {self.grid.count(tag)}")
            if self.grid.get(pos) != tag:
                raise ValueError(f"Level {label} {tuple(pos)} is not tagged {tag.name}")
        if self.total_cells != self.grid.total_cells:
            raise ValueError(f"total_cells {self.total_cells} does not match a {self.grid.rows}x{self.grid.cols} grid")
        if self.max_food != total_food_value(self.grid):
            raise ValueError(f"max_food {self.max_food} does not match the food on the grid")
        distance = require_shortest_path(self.grid, self.start, self.exit)
        if distance != self.min_steps:
            raise ValueError(f"min_steps {self.min_steps} does not match the shortest path {distance}")


class LevelHistory:
    """Newest-first collection of generated levels."""

    def __init__(self) -> None:
        self._records: List[LevelRecord] = []
        self._by_id: Dict[str, LevelRecord] = {}

    def add(self, record: LevelRecord) -> LevelRecord:
        self._records.insert(0, record)
        self._by_id[record.id] = record
        return record

    def get(self, level_id: str) -> LevelRecord:
        try:
            return self._by_id[level_id]
        except KeyError as exc:
            raise KeyError(f"Level id '{level_id}' not found in history") from exc

    def __iter__(self) -> Iterator[LevelRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["LevelConfig", "LevelRecord", "LevelHistory"]
