"""Playthrough scoring.

Efficiency is 100% at the optimal step count and falls linearly to 0% at a
reasonable worst case of ``max(2 * min_steps, 2 * total_cells)`` steps. The
food score is the share of available point value collected, and the final
score is the mean of the two. Every percentage is rounded half up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_percent(value: int) -> int:
    return max(0, min(100, value))


@dataclass(frozen=True)
class ScoreResult:
    efficiency_percent: int
    food_percent: int
    final_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "efficiencyPercent": self.efficiency_percent,
            "foodPercent": self.food_percent,
            "finalScore": self.final_score,
        }


def reasonable_worst_case(min_steps: int, total_cells: int) -> int:
    return max(2 * min_steps, 2 * total_cells)


def efficiency_percent(min_steps: int, actual_steps: int, total_cells: int) -> int:
    worst_case = reasonable_worst_case(min_steps, total_cells)
    # Boundary checks come first so worst_case == min_steps never divides by zero.
    if actual_steps <= min_steps:
        raw = 1.0
    elif actual_steps >= worst_case:
        raw = 0.0
    else:
        raw = 1.0 - (actual_steps - min_steps) / (worst_case - min_steps)
    return _clamp_percent(round_half_up(raw * 100))


def food_percent(collected_food: int, total_food: int) -> int:
    if total_food <= 0:
        return 100
    return _clamp_percent(round_half_up(collected_food / total_food * 100))


def score(
    min_steps: int,
    actual_steps: int,
    collected_food: int,
    total_food: int,
    total_cells: int,
) -> ScoreResult:
    """Score a completed playthrough against the level optimum.

    Raises ValueError for negative inputs or when more food was collected than
    the level offered.
    """

    for name, value in (
        ("min_steps", min_steps),
        ("actual_steps", actual_steps),
        ("collected_food", collected_food),
        ("total_food", total_food),
        ("total_cells", total_cells),
    ):
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")
    if collected_food > total_food:
        raise ValueError(f"collected_food ({collected_food}) exceeds total_food ({total_food})")

    efficiency = efficiency_percent(min_steps, actual_steps, total_cells)
    food = food_percent(collected_food, total_food)
    final = _clamp_percent(round_half_up((efficiency + food) / 2))
    return ScoreResult(efficiency_percent=efficiency, food_percent=food, final_score=final)


__all__ = [
    "ScoreResult",
    "round_half_up",
    "reasonable_worst_case",
    "efficiency_percent",
    "food_percent",
    "score",
]
