import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import numpy as np

from mazecore import (
    CellKind,
    FrozenGrid,
    InvalidDimensions,
    MazeGenerator,
    farthest_point,
    generate,
    shortest_path,
)
from mazecore.generator import goal_of, main, start_of

FIXTURES = Path(__file__).resolve().parent / "fixtures"

SIZES = ((5, 5), (7, 5), (5, 9), (15, 15), (21, 11), (31, 31))
SEEDS = (0, 1, 42, 2024)


class GenerateTests(unittest.TestCase):
    def assert_perfect_maze(self, grid) -> None:
        array = grid.to_array()
        wall = int(CellKind.WALL)
        self.assertTrue(np.all(array[0, :] == wall))
        self.assertTrue(np.all(array[-1, :] == wall))
        self.assertTrue(np.all(array[:, 0] == wall))
        self.assertTrue(np.all(array[:, -1] == wall))

        open_mask = array != wall
        edges = int(np.sum(open_mask[:, :-1] & open_mask[:, 1:]) + np.sum(open_mask[:-1, :] & open_mask[1:, :]))
        self.assertEqual(int(open_mask.sum()), edges + 1)

        self.assertEqual(grid.find(CellKind.START), [(1, 1)])
        self.assertLessEqual(len(grid.find(CellKind.GOAL)), 1)
        # raises Disconnected if any open cell is unreachable from the start
        self.assertEqual(farthest_point(grid, (1, 1)).reachable, int(open_mask.sum()))

    def test_generated_mazes_are_perfect(self) -> None:
        for width, height in SIZES:
            for seed in SEEDS:
                with self.subTest(width=width, height=height, seed=seed):
                    self.assert_perfect_maze(generate(width, height, seed))

    def test_generation_is_deterministic(self) -> None:
        for width, height in SIZES:
            with self.subTest(width=width, height=height):
                first = generate(width, height, seed=99)
                second = generate(width, height, seed=99)
                self.assertEqual(first, second)
                self.assertEqual(first.to_rows(), second.to_rows())

    def test_different_seeds_differ(self) -> None:
        self.assertNotEqual(generate(15, 15, seed=1), generate(15, 15, seed=2))

    def test_golden_fixture(self) -> None:
        expected = (FIXTURES / "maze_15x15_seed42.txt").read_text(encoding="utf-8").splitlines()
        grid = generate(15, 15, seed=42)
        self.assertEqual(grid.to_rows(), expected)
        self.assertEqual(grid.get(1, 1).kind, CellKind.START)

    def test_goal_is_at_max_distance(self) -> None:
        grid = generate(15, 15, seed=42)
        goal = goal_of(grid)
        self.assertEqual(goal, (3, 11))
        path = shortest_path(grid, start_of(grid), goal)
        self.assertEqual(len(path) - 1, 68)
        self.assertEqual(farthest_point(grid, (1, 1)).distance, len(path) - 1)

    def test_smallest_corridor_maze(self) -> None:
        grid = generate(5, 5, seed=1)
        self.assertEqual(grid.to_rows(), ["#####", "#S#G#", "#.#.#", "#...#", "#####"])
        self.assertEqual(goal_of(grid), (3, 1))
        self.assert_perfect_maze(grid)

    def test_three_by_three_start_is_goal(self) -> None:
        grid = generate(3, 3, seed=0)
        self.assertEqual(grid.to_rows(), ["###", "#S#", "###"])
        self.assertEqual(grid.find(CellKind.GOAL), [])
        self.assertEqual(goal_of(grid), start_of(grid))

    def test_unseeded_generation_is_valid(self) -> None:
        self.assert_perfect_maze(generate(11, 9))

    def test_result_is_frozen(self) -> None:
        grid = generate(7, 7, seed=3)
        self.assertTrue(grid.frozen)
        with self.assertRaises(FrozenGrid):
            grid.set_kind(1, 1, CellKind.WALL)

    def test_invalid_dimensions(self) -> None:
        for width, height in ((2, 5), (5, 1), (6, 5), (5, 8), (4, 4)):
            with self.subTest(width=width, height=height):
                with self.assertRaises(InvalidDimensions):
                    generate(width, height, seed=0)
        with self.assertRaises(InvalidDimensions):
            generate("15", 15, seed=0)


class MazeGeneratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.metadata_path = Path(self.tmp.name) / "mazes" / "mazes.json"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_defaults(self) -> None:
        generator = MazeGenerator(seed=0)
        self.assertEqual((generator.width, generator.height), (15, 15))
        self.assertEqual(generator.generate().dimensions(), (15, 15))
        self.assertEqual(generator.generate(7, 5).dimensions(), (7, 5))

    def test_constructor_validates_dimensions(self) -> None:
        with self.assertRaises(InvalidDimensions):
            MazeGenerator(width=10)

    def test_explicit_seed_matches_module_function(self) -> None:
        self.assertEqual(MazeGenerator(seed=1).generate(15, 15, seed=42), generate(15, 15, seed=42))

    def test_record_contents(self) -> None:
        record = MazeGenerator(width=15, height=15).create_maze(maze_id="golden", seed=42)
        self.assertEqual(record.id, "golden")
        self.assertEqual(record.start, (1, 1))
        self.assertEqual(record.goal, (3, 11))
        self.assertEqual(record.max_distance, 68)
        self.assertFalse(record.solved_on_arrival)
        self.assertEqual(record.to_grid(), generate(15, 15, seed=42))
        self.assertEqual(record.maze_grid, generate(15, 15, seed=42).to_matrix())

        payload = record.to_dict()
        self.assertEqual(payload["start"], [1, 1])
        self.assertEqual(payload["goal"], [3, 11])
        self.assertEqual(json.loads(json.dumps(payload)), payload)

    def test_degenerate_record(self) -> None:
        record = MazeGenerator(width=3, height=3, seed=0).create_random_maze()
        self.assertEqual(record.goal, record.start)
        self.assertEqual(record.max_distance, 0)
        self.assertTrue(record.solved_on_arrival)

    def test_records_are_reproducible_from_their_seed(self) -> None:
        records = MazeGenerator(width=9, height=7, seed=11).generate_dataset(5)
        for record in records:
            with self.subTest(seed=record.seed):
                self.assertEqual(record.to_grid(), generate(9, 7, seed=record.seed))

    def test_seeded_generators_repeat(self) -> None:
        first = [r.to_dict() for r in MazeGenerator(seed=8).generate_dataset(3)]
        second = [r.to_dict() for r in MazeGenerator(seed=8).generate_dataset(3)]
        self.assertEqual(first, second)
        self.assertEqual(len({r["id"] for r in first}), 3)

    def test_dataset_metadata_appends(self) -> None:
        generator = MazeGenerator(width=7, height=7, seed=3)
        generator.generate_dataset(2, metadata_path=self.metadata_path)
        generator.generate_dataset(3, metadata_path=self.metadata_path)
        payload = json.loads(self.metadata_path.read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 5)

        generator.generate_dataset(1, metadata_path=self.metadata_path, append=False)
        payload = json.loads(self.metadata_path.read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 1)
        self.assertEqual(payload[0]["width"], 7)

    def test_empty_maze_id_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MazeGenerator(seed=0).create_maze(maze_id="")

    def test_duplicate_ids_are_not_written(self) -> None:
        generator = MazeGenerator(width=7, height=7, seed=3)
        record = generator.create_maze(maze_id="same")
        generator.write_metadata([record], self.metadata_path)
        with self.assertRaises(ValueError):
            generator.write_metadata([generator.create_maze(maze_id="same")], self.metadata_path)
        payload = json.loads(self.metadata_path.read_text(encoding="utf-8"))
        self.assertEqual([entry["id"] for entry in payload], ["same"])

    def test_negative_count_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MazeGenerator(seed=0).generate_dataset(-1)

    def test_cli_writes_metadata(self) -> None:
        main(["2", "--width", "9", "--height", "9", "--seed", "5", "--output", str(self.metadata_path)])
        payload = json.loads(self.metadata_path.read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 2)
        self.assertTrue(all(record["rows"][1][1] == "S" for record in payload))

    def test_cli_prints_mazes(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            main(["1", "--width", "5", "--height", "5", "--seed", "5"])
        output = buffer.getvalue()
        self.assertIn("#####", output)
        self.assertIn("S", output)


if __name__ == "__main__":
    unittest.main()
