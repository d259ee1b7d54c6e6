"""Perfect-maze generator with a farthest-point goal."""

from __future__ import annotations

import argparse
import logging
import random
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .base import AbstractMazeGenerator
from .carver import DEFAULT_ORIGIN, MazeCarver
from .errors import InvalidDimensions
from .grid import MIN_DIMENSION, CellKind, Coordinate, Grid
from .search import FarthestPoint, farthest_point

logger = logging.getLogger(__name__)

SEED_BITS = 32


@dataclass
class MazeRecord:
    id: str
    seed: int
    width: int
    height: int
    start: Tuple[int, int]
    goal: Tuple[int, int]
    max_distance: int
    maze_grid: List[List[int]]
    rows: List[str]

    @property
    def solved_on_arrival(self) -> bool:
        """True for degenerate mazes whose goal is the start cell."""

        return self.start == self.goal

    def to_grid(self) -> Grid:
        return Grid.from_rows(self.rows).freeze()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "start": list(self.start),
            "goal": list(self.goal),
            "max_distance": self.max_distance,
            "maze_grid": self.maze_grid,
            "rows": list(self.rows),
        }


def validate_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
        if value < MIN_DIMENSION:
            raise InvalidDimensions(f"{name} must be at least {MIN_DIMENSION}, got {value}")
        if value % 2 == 0:
            raise InvalidDimensions(f"{name} must be odd, got {value}")


def _build(width: int, height: int, seed: int) -> Tuple[Grid, FarthestPoint]:
    validate_dimensions(width, height)
    grid = Grid(width, height)
    MazeCarver(random.Random(seed)).carve(grid, DEFAULT_ORIGIN)
    grid.set_kind(*DEFAULT_ORIGIN, CellKind.START)

    result = farthest_point(grid, DEFAULT_ORIGIN)
    if result.coordinate != DEFAULT_ORIGIN:
        grid.set_kind(*result.coordinate, CellKind.GOAL)
    else:
        logger.debug("Degenerate %dx%d maze: goal coincides with start", width, height)
    return grid.freeze(), result


def generate(width: int, height: int, seed: Optional[int] = None) -> Grid:
    """Build a frozen perfect maze; identical arguments always produce an identical grid.

    Without a seed a fresh one is drawn from operating-system entropy.
    """

    if seed is None:
        seed = random.Random().getrandbits(SEED_BITS)
        logger.debug("No seed given, using %d", seed)
    grid, _ = _build(width, height, seed)
    return grid


class MazeGenerator(AbstractMazeGenerator[MazeRecord]):
    """Generate batches of reproducible mazes.

    The generator owns a seeded ``random.Random`` that only hands out per-maze
    seeds, so each record can be rebuilt on its own with :func:`generate`.
    """

    DEFAULT_WIDTH = 15
    DEFAULT_HEIGHT = 15

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        seed: Optional[int] = None,
    ) -> None:
        validate_dimensions(width, height)
        self.width = width
        self.height = height
        self._rng = random.Random(seed)

    def next_seed(self) -> int:
        return self._rng.getrandbits(SEED_BITS)

    def generate(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> Grid:
        return generate(
            self.width if width is None else width,
            self.height if height is None else height,
            self.next_seed() if seed is None else seed,
        )

    def create_maze(
        self,
        *,
        maze_id: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> MazeRecord:
        if maze_id is not None and not maze_id:
            raise ValueError("maze_id must be a non-empty string")
        maze_seed = self.next_seed() if seed is None else seed
        maze_uuid = maze_id if maze_id is not None else str(uuid.UUID(int=self._rng.getrandbits(128), version=4))
        grid, result = _build(self.width, self.height, maze_seed)
        logger.debug("Maze %s (seed %d): goal %s at distance %d", maze_uuid, maze_seed, result.coordinate, result.distance)
        return MazeRecord(
            id=maze_uuid,
            seed=maze_seed,
            width=self.width,
            height=self.height,
            start=DEFAULT_ORIGIN,
            goal=result.coordinate,
            max_distance=result.distance,
            maze_grid=grid.to_matrix(),
            rows=grid.to_rows(),
        )

    def create_random_maze(self) -> MazeRecord:
        return self.create_maze()


def start_of(grid: Grid) -> Coordinate:
    """Return the unique start cell of a generated grid."""

    starts = grid.find(CellKind.START)
    if len(starts) != 1:
        raise ValueError(f"Expected exactly one start cell, found {len(starts)}")
    return starts[0]


def goal_of(grid: Grid) -> Coordinate:
    """Return the goal cell of a generated grid, or its start when the two coincide."""

    goals = grid.find(CellKind.GOAL)
    if len(goals) > 1:
        raise ValueError(f"Expected at most one goal cell, found {len(goals)}")
    return goals[0] if goals else start_of(grid)


__all__ = [
    "MazeGenerator",
    "MazeRecord",
    "generate",
    "goal_of",
    "start_of",
    "validate_dimensions",
]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate perfect mazes with a farthest-point goal")
    parser.add_argument("count", type=int, help="Number of mazes to generate")
    parser.add_argument("--width", type=int, default=MazeGenerator.DEFAULT_WIDTH, help="Odd grid width, at least 3")
    parser.add_argument("--height", type=int, default=MazeGenerator.DEFAULT_HEIGHT, help="Odd grid height, at least 3")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Metadata JSON to write; mazes are printed as text when omitted",
    )
    parser.add_argument("--overwrite", action="store_true", help="Replace existing metadata instead of appending")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    generator = MazeGenerator(width=args.width, height=args.height, seed=args.seed)
    if args.output is not None:
        generator.generate_dataset(args.count, metadata_path=args.output, append=not args.overwrite)
        return
    for record in generator.generate_dataset(args.count):
        print(f"{record.id} seed={record.seed} goal={record.goal} distance={record.max_distance}")
        print("\n".join(record.rows))
        print()


if __name__ == "__main__":
    main()
