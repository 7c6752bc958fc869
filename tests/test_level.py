import json
import unittest

from antmaze.grid import CellType, total_food_value
from antmaze.level import LevelConfig, LevelHistory, LevelRecord
from antmaze.scoring import ScoreResult
from antmaze.search import SearchInconsistencyError, shortest_path


class LevelConfigTestCase(unittest.TestCase):
    def test_defaults_and_storage_key(self) -> None:
        config = LevelConfig()
        self.assertEqual((config.rows, config.cols, config.more_walls, config.more_food), (12, 12, False, True))
        self.assertEqual(config.storage_key(), "antmaze_high_12x12_nw_f")
        self.assertEqual(LevelConfig(16, 20, True, False).storage_key(), "antmaze_high_16x20_w_nf")

    def test_clamped(self) -> None:
        self.assertEqual(LevelConfig(rows=4, cols=40).clamped(), LevelConfig(rows=8, cols=32))

    def test_from_dict_fills_missing_flags_with_defaults(self) -> None:
        self.assertEqual(LevelConfig.from_dict({"rows": 12, "cols": 12}), LevelConfig())
        self.assertTrue(LevelConfig.from_dict({"rows": 9, "cols": 9, "more_walls": True}).more_food)
        self.assertFalse(LevelConfig.from_dict({"rows": 9, "cols": 9, "more_food": False}).more_food)


class LevelRecordTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.record = LevelRecord.create(LevelConfig(10, 10, True, True), seed=11)

    def test_measurements_match_grid(self) -> None:
        record = self.record
        self.assertEqual(record.min_steps, shortest_path(record.grid, record.start, record.exit))
        self.assertGreaterEqual(record.min_steps, 9)
        self.assertEqual(record.max_food, total_food_value(record.grid))
        self.assertEqual(record.total_cells, 100)
        self.assertIsNone(record.best_score)

    def test_create_clamps_config(self) -> None:
        record = LevelRecord.create(LevelConfig(rows=3, cols=3), seed=2)
        self.assertEqual(record.grid.shape, (8, 8))
        self.assertEqual(record.config, LevelConfig(rows=8, cols=8))

    def test_record_score_keeps_best(self) -> None:
        self.assertTrue(self.record.record_score(ScoreResult(50, 60, 55)))
        self.assertFalse(self.record.record_score(ScoreResult(40, 40, 40)))
        self.assertFalse(self.record.record_score(ScoreResult(50, 60, 55)))
        self.assertTrue(self.record.record_score(ScoreResult(90, 90, 90)))
        self.assertEqual(self.record.best_score, 90)

    def test_payload_is_json_and_reloads(self) -> None:
        self.record.extra["image"] = "levels/x.png"
        payload = json.loads(json.dumps(self.record.to_dict()))
        self.assertEqual(payload["image"], "levels/x.png")
        restored = LevelRecord.from_dict(payload)
        self.assertEqual(restored.id, self.record.id)
        self.assertEqual(restored.grid, self.record.grid)
        self.assertEqual(restored.start, self.record.start)
        self.assertEqual(restored.exit, self.record.exit)
        self.assertEqual(restored.config, self.record.config)
        self.assertEqual(restored.extra, {"image": "levels/x.png"})

    def test_from_dict_requires_fields(self) -> None:
        payload = self.record.to_dict()
        del payload["maze"]
        with self.assertRaises(ValueError):
            LevelRecord.from_dict(payload)

    def _empty_cell(self, payload) -> list:
        for r, row in enumerate(payload["maze"]):
            for c, code in enumerate(row):
                if code == int(CellType.EMPTY):
                    return [r, c]
        self.fail("level has no empty cell")

    def test_from_dict_rejects_start_outside_grid(self) -> None:
        payload = self.record.to_dict()
        payload["start"] = [50, 50]
        with self.assertRaisesRegex(ValueError, "outside"):
            LevelRecord.from_dict(payload)

    def test_from_dict_rejects_all_wall_maze(self) -> None:
        payload = self.record.to_dict()
        payload["maze"] = [[int(CellType.WALL)] * 10 for _ in range(10)]
        payload["start"] = [50, 50]
        with self.assertRaises(ValueError):
            LevelRecord.from_dict(payload)

    def test_from_dict_rejects_untagged_start(self) -> None:
        payload = self.record.to_dict()
        payload["start"] = self._empty_cell(payload)
        with self.assertRaisesRegex(ValueError, "not tagged START"):
            LevelRecord.from_dict(payload)

    def test_from_dict_rejects_second_start(self) -> None:
        payload = self.record.to_dict()
        r, c = self._empty_cell(payload)
        payload["maze"][r][c] = int(CellType.START)
        with self.assertRaisesRegex(ValueError, "exactly one START"):
            LevelRecord.from_dict(payload)

    def test_from_dict_rejects_missing_exit(self) -> None:
        payload = self.record.to_dict()
        r, c = payload["exit"]
        payload["maze"][r][c] = int(CellType.EMPTY)
        with self.assertRaisesRegex(ValueError, "exactly one EXIT"):
            LevelRecord.from_dict(payload)

    def test_from_dict_rejects_stale_measurements(self) -> None:
        for key in ("min_steps", "max_food", "total_cells"):
            payload = self.record.to_dict()
            payload[key] += 1
            with self.subTest(key=key), self.assertRaises(ValueError):
                LevelRecord.from_dict(payload)

    def test_from_dict_rejects_disconnected_maze(self) -> None:
        maze = [[int(CellType.EMPTY)] * 8 for _ in range(8)]
        maze[0][3] = int(CellType.START)
        maze[7][3] = int(CellType.EXIT)
        maze[4] = [int(CellType.WALL)] * 8
        payload = self.record.to_dict()
        payload.update(
            config=LevelConfig(8, 8).to_dict(),
            maze=maze,
            start=[0, 3],
            exit=[7, 3],
            min_steps=7,
            max_food=0,
            total_cells=64,
        )
        with self.assertRaises(SearchInconsistencyError):
            LevelRecord.from_dict(payload)


class LevelHistoryTestCase(unittest.TestCase):
    def test_newest_first_and_lookup(self) -> None:
        history = LevelHistory()
        first = history.add(LevelRecord.create(seed=1))
        second = history.add(LevelRecord.create(seed=2))
        self.assertEqual(len(history), 2)
        self.assertEqual([record.id for record in history], [second.id, first.id])
        self.assertIs(history.get(first.id), first)
        with self.assertRaises(KeyError):
            history.get("missing")


if __name__ == "__main__":
    unittest.main()
