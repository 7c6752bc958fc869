"""Level generation, shortest-path search and scoring for the ant maze game."""

__all__ = [
    "CellType",
    "FOOD_VALUES",
    "FOOD_KINDS",
    "Grid",
    "Position",
    "clamp_dimension",
    "total_food_value",
    "SearchInconsistencyError",
    "shortest_path",
    "require_shortest_path",
    "shortest_route",
    "can_move",
    "MazeGenerator",
    "MazeLayout",
    "generate_maze",
    "ScoreResult",
    "score",
    "LevelConfig",
    "LevelRecord",
    "LevelHistory",
    "MoveResult",
    "Playthrough",
]

from .grid import FOOD_KINDS, FOOD_VALUES, CellType, Grid, Position, clamp_dimension, total_food_value
from .search import SearchInconsistencyError, can_move, require_shortest_path, shortest_path, shortest_route
from .generator import MazeGenerator, MazeLayout, generate_maze
from .scoring import ScoreResult, score
from .level import LevelConfig, LevelHistory, LevelRecord
from .session import MoveResult, Playthrough
