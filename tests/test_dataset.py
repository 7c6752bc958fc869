import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from antmaze.dataset import LevelDatasetGenerator, main
from antmaze.level import LevelConfig


class LevelDatasetGeneratorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.tmp.name) / "antmaze"
        self.generator = LevelDatasetGenerator(
            output_dir=self.output_dir,
            config=LevelConfig(rows=9, cols=11, more_walls=True, more_food=True),
            cell_size=16,
            seed=42,
        )

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_level_images_are_written(self) -> None:
        record = self.generator.create_level(level_id="level-test")
        level_path = self.output_dir / record.extra["image"]
        solution_path = self.output_dir / record.extra["solution_image_path"]
        self.assertTrue(level_path.exists())
        self.assertTrue(solution_path.exists())
        self.assertEqual(record.extra["image"], "levels/level-test_level.png")
        with Image.open(level_path) as image:
            self.assertEqual(image.size, (11 * 16, 9 * 16))

    def test_metadata_appends_and_reloads(self) -> None:
        metadata_path = self.output_dir / "data.json"
        first = self.generator.generate_dataset(2, metadata_path=metadata_path)
        self.generator.generate_dataset(1, metadata_path=metadata_path)
        payload = json.loads(metadata_path.read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 3)
        self.assertEqual(payload[0]["id"], first[0].id)

        restored = LevelDatasetGenerator.read_metadata(metadata_path)
        self.assertEqual(restored[0].grid, first[0].grid)
        self.assertEqual(restored[1].min_steps, first[1].min_steps)

        self.generator.generate_dataset(1, metadata_path=metadata_path, append=False)
        self.assertEqual(len(json.loads(metadata_path.read_text(encoding="utf-8"))), 1)

    def test_metadata_replaces_levels_written_again(self) -> None:
        metadata_path = self.output_dir / "data.json"
        records = self.generator.generate_dataset(2, metadata_path=metadata_path)
        records[0].best_score = 87
        self.generator.write_metadata([records[0]], metadata_path)
        payload = json.loads(metadata_path.read_text(encoding="utf-8"))
        self.assertEqual([item["id"] for item in payload], [records[0].id, records[1].id])
        self.assertEqual(payload[0]["best_score"], 87)
        self.assertIsNone(payload[1]["best_score"])

    def test_same_seed_reproduces_levels(self) -> None:
        other = LevelDatasetGenerator(
            output_dir=Path(self.tmp.name) / "other",
            config=self.generator.config,
            seed=42,
            render_images=False,
        )
        ours = self.generator.generate_dataset(2)
        theirs = other.generate_dataset(2)
        for a, b in zip(ours, theirs):
            self.assertEqual(a.grid, b.grid)
            self.assertEqual(a.start, b.start)
        self.assertEqual(theirs[0].extra, {})

    def test_invalid_cell_size(self) -> None:
        untouched = Path(self.tmp.name) / "never-created"
        with self.assertRaises(ValueError):
            LevelDatasetGenerator(output_dir=untouched, cell_size=0)
        self.assertFalse(untouched.exists())


class DatasetCliTestCase(unittest.TestCase):
    def test_main_writes_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "cli"
            main(["3", "--output-dir", str(out), "--rows", "40", "--cols", "8", "--more-walls", "--seed", "5", "--no-images"])
            payload = json.loads((out / "data.json").read_text(encoding="utf-8"))
            self.assertEqual(len(payload), 3)
            self.assertEqual(payload[0]["config"], {"rows": 32, "cols": 8, "more_walls": True, "more_food": False})
            self.assertFalse((out / "levels").exists())


if __name__ == "__main__":
    unittest.main()
