"""Static PNG previews of generated levels."""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from .grid import CellType, Grid

WALL_COLOR = (0, 0, 0)
EMPTY_COLOR = (255, 255, 255)
START_COLOR = (220, 30, 30)
EXIT_COLOR = (40, 180, 80)
LINE_COLOR = (220, 0, 0)
GRID_LINE_COLOR = (200, 200, 200)

FOOD_COLORS: Dict[CellType, Tuple[int, int, int]] = {
    CellType.APPLE: (200, 40, 40),
    CellType.BANANA: (240, 210, 40),
    CellType.CHERRY: (140, 0, 60),
}

DEFAULT_CELL_SIZE = 24


def draw_route(
    draw: ImageDraw.ImageDraw,
    route: Sequence[Tuple[int, int]],
    cell_size: int,
) -> None:
    """Draw a route through the centres of its cells, with round caps."""
    thickness = max(2, cell_size // 3)
    points = [cell_center(r, c, cell_size) for r, c in route]
    if len(points) >= 2:
        draw.line(points, fill=LINE_COLOR, width=thickness, joint="curve")
    radius = thickness / 2
    for x, y in (points[0], points[-1]):
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=LINE_COLOR)


def _fill_marker(draw: ImageDraw.ImageDraw, row: int, col: int, cell_size: int, color: Tuple[int, int, int]) -> None:
    left, top, right, bottom = cell_bbox(row, col, cell_size)
    draw.rectangle((left + 1, top + 1, right - 2, bottom - 2), fill=color)


def cell_bbox(row: int, col: int, cell_size: int) -> Tuple[int, int, int, int]:
    left = col * cell_size
    top = row * cell_size
    return left, top, left + cell_size, top + cell_size


def cell_center(row: int, col: int, cell_size: int) -> Tuple[float, float]:
    return col * cell_size + cell_size / 2.0, row * cell_size + cell_size / 2.0


def render_level(
    grid: Grid,
    *,
    cell_size: int = DEFAULT_CELL_SIZE,
    route: Optional[Sequence[Tuple[int, int]]] = None,
) -> Image.Image:
    """Render walls, endpoints and food, plus an optional route through cell centres."""

    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    canvas = Image.new("RGB", (grid.cols * cell_size, grid.rows * cell_size), EMPTY_COLOR)
    draw = ImageDraw.Draw(canvas)

    for pos in grid.positions():
        tag = grid.get(pos)
        left, top, right, bottom = cell_bbox(pos.row, pos.col, cell_size)
        if tag == CellType.WALL:
            draw.rectangle((left, top, right - 1, bottom - 1), fill=WALL_COLOR)
            continue
        draw.rectangle((left, top, right - 1, bottom - 1), fill=EMPTY_COLOR, outline=GRID_LINE_COLOR)
        if tag == CellType.START:
            _fill_marker(draw, pos.row, pos.col, cell_size, START_COLOR)
        elif tag == CellType.EXIT:
            _fill_marker(draw, pos.row, pos.col, cell_size, EXIT_COLOR)
        elif tag.is_food:
            inset = max(2, cell_size // 4)
            draw.ellipse(
                (left + inset, top + inset, right - 1 - inset, bottom - 1 - inset),
                fill=FOOD_COLORS[tag],
            )

    if route:
        draw_route(draw, route, cell_size)
        # Endpoints stay visible on top of the route, each with a small route dot.
        for (row, col), color in ((route[0], START_COLOR), (route[-1], EXIT_COLOR)):
            _fill_marker(draw, row, col, cell_size, color)
            cx, cy = cell_center(row, col, cell_size)
            dot = max(1, cell_size // 8)
            draw.ellipse((cx - dot, cy - dot, cx + dot, cy + dot), fill=LINE_COLOR)

    return canvas


__all__ = [
    "DEFAULT_CELL_SIZE",
    "FOOD_COLORS",
    "draw_route",
    "cell_bbox",
    "cell_center",
    "render_level",
]
