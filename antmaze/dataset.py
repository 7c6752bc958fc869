"""Batch level export.

Generates levels, optionally saves a puzzle preview and a solution preview per
level, and writes the level records to a JSON metadata list. Callers that want
to replay a level later load its record with :meth:`LevelRecord.from_dict`.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from tqdm import tqdm

from .level import LevelConfig, LevelRecord
from .render import DEFAULT_CELL_SIZE, render_level
from .search import shortest_route

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


class LevelDatasetGenerator:
    """Generate levels into an output directory and serialize their metadata."""

    DEFAULT_OUTPUT_DIR: PathLike = "data/antmaze"

    def __init__(
        self,
        output_dir: Optional[PathLike] = None,
        *,
        config: Optional[LevelConfig] = None,
        cell_size: int = DEFAULT_CELL_SIZE,
        seed: Optional[int] = None,
        render_images: bool = True,
    ) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.output_dir = Path(output_dir if output_dir is not None else self.DEFAULT_OUTPUT_DIR)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.config = (config or LevelConfig()).clamped()
        self.cell_size = int(cell_size)
        self.render_images = render_images
        self._rng = random.Random(seed)

        self.level_dir = self.output_dir / "levels"
        self.solution_dir = self.output_dir / "solutions"
        if self.render_images:
            self.level_dir.mkdir(parents=True, exist_ok=True)
            self.solution_dir.mkdir(parents=True, exist_ok=True)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def create_level(self, *, level_id: Optional[str] = None) -> LevelRecord:
        record = LevelRecord.create(self.config, level_id=level_id, rng=self.rng)
        if self.render_images:
            level_path, solution_path = self.save_images(record)
            record.extra["image"] = self.asset_path(level_path)
            record.extra["solution_image_path"] = self.asset_path(solution_path)
        return record

    def save_images(self, record: LevelRecord) -> Tuple[Path, Path]:
        route = shortest_route(record.grid, record.start, record.exit)
        level_path = self.level_dir / f"{record.id}_level.png"
        solution_path = self.solution_dir / f"{record.id}_solution.png"
        render_level(record.grid, cell_size=self.cell_size).save(level_path)
        render_level(record.grid, cell_size=self.cell_size, route=route).save(solution_path)
        return level_path, solution_path

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
        progress: bool = False,
    ) -> List[LevelRecord]:
        """Generate a batch of levels and optionally persist metadata."""
        iterator: Iterable[int] = range(count)
        if progress:
            iterator = tqdm(iterator, desc="Levels")
        records = [self.create_level() for _ in iterator]
        if metadata_path is not None:
            self.write_metadata(records, metadata_path, append=append)
        return records

    def write_metadata(
        self,
        records: Iterable[LevelRecord],
        metadata_path: PathLike,
        *,
        append: bool = True,
    ) -> None:
        """Write level records as a JSON list.

        When appending, a stored level whose id is written again is replaced in
        place, so re-exporting a replayed level keeps its updated best score.
        """

        path = Path(metadata_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        levels: Dict[str, Dict[str, Any]] = {}
        if append and path.exists():
            stored = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(stored, list):
                raise ValueError(f"Level metadata must be a list of records: {path}")
            levels = {str(item["id"]): item for item in stored}
        for record in records:
            levels[record.id] = record.to_dict()
        path.write_text(json.dumps(list(levels.values()), indent=2), encoding="utf-8")
        logger.debug("Wrote %d levels to %s", len(levels), path)

    @staticmethod
    def read_metadata(metadata_path: PathLike) -> List[LevelRecord]:
        raw = json.loads(Path(metadata_path).read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("Level metadata must be a list of records")
        return [LevelRecord.from_dict(item) for item in raw]

    def asset_path(self, path: Path) -> str:
        """Path of a saved preview as stored in a level record."""
        if path.is_relative_to(self.output_dir):
            return path.relative_to(self.output_dir).as_posix()
        return path.as_posix()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = LevelConfig()
    parser = argparse.ArgumentParser(description="Generate ant maze levels")
    parser.add_argument("count", type=int, help="Number of levels to generate")
    parser.add_argument("--output-dir", type=Path, default=None, help="Where to save levels and metadata")
    parser.add_argument("--rows", type=int, default=defaults.rows, help="Grid rows, clamped to [8, 32]")
    parser.add_argument("--cols", type=int, default=defaults.cols, help="Grid columns, clamped to [8, 32]")
    parser.add_argument("--more-walls", action="store_true", help="Use 20%% wall density instead of 10%%")
    parser.add_argument("--more-food", action="store_true", help="Use 20%% food density instead of 10%%")
    parser.add_argument("--cell-size", type=int, default=DEFAULT_CELL_SIZE, help="Preview cell size in pixels")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--no-images", action="store_true", help="Skip preview image rendering")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    args = _parse_args(argv)
    config = LevelConfig(
        rows=args.rows,
        cols=args.cols,
        more_walls=args.more_walls,
        more_food=args.more_food,
    )
    generator = LevelDatasetGenerator(
        output_dir=args.output_dir,
        config=config,
        cell_size=args.cell_size,
        seed=args.seed,
        render_images=not args.no_images,
    )
    count = max(1, args.count)
    resolved = generator.config
    logger.info(f"Generating {count} levels ({resolved.rows}x{resolved.cols}, key={resolved.storage_key()})...")
    metadata_path = generator.output_dir / "data.json"
    generator.generate_dataset(count, metadata_path=metadata_path, progress=True)
    logger.info(f"Saved metadata to {metadata_path}")


__all__ = ["LevelDatasetGenerator", "main"]


if __name__ == "__main__":
    main()
