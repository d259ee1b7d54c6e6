"""Route evaluator: checks whether a walk through a generated maze wins it."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .base import AbstractMazeEvaluator, validate_maze_payload
from .generator import MazeRecord
from .grid import CellKind, Grid, parse_coordinate

logger = logging.getLogger(__name__)

RecordLike = Union[Mapping[str, Any], MazeRecord]


@dataclass
class MazeEvaluationResult:
    maze_id: str
    starts_at_start: bool
    touches_goal: bool
    connected: bool
    stray_in_walls: bool
    steps: int
    optimal: bool
    message: str

    @property
    def success(self) -> bool:
        return self.starts_at_start and self.touches_goal and self.connected and not self.stray_in_walls

    def to_dict(self) -> dict:
        return {
            "maze_id": self.maze_id,
            "starts_at_start": self.starts_at_start,
            "touches_goal": self.touches_goal,
            "connected": self.connected,
            "stray_in_walls": self.stray_in_walls,
            "steps": self.steps,
            "optimal": self.optimal,
            "success": self.success,
            "message": self.message,
        }


class MazeEvaluator(AbstractMazeEvaluator):
    """Evaluate candidate routes against mazes stored in a metadata file.

    A route is a sequence of ``(x, y)`` cells. It wins the maze when it begins
    on the start cell, moves one orthogonal step at a time, never enters a
    wall, and reaches the goal. It is optimal when it does so in exactly
    ``max_distance`` steps.
    """

    def evaluate(self, maze_id: str, route: Sequence[Sequence[int]]) -> MazeEvaluationResult:
        return self._score(self.get_record(maze_id), self.get_grid(maze_id), route)

    @classmethod
    def evaluate_record(cls, record: RecordLike, route: Sequence[Sequence[int]]) -> MazeEvaluationResult:
        if isinstance(record, MazeRecord):
            record = record.to_dict()
        return cls._score(record, validate_maze_payload(record), route)

    @classmethod
    def _score(
        cls,
        record: Mapping[str, Any],
        grid: Grid,
        route: Sequence[Sequence[int]],
    ) -> MazeEvaluationResult:
        walls = grid.to_array() == int(CellKind.WALL)
        start = parse_coordinate(record["start"])
        goal = parse_coordinate(record["goal"])
        max_distance = record["max_distance"]

        cells: List[Tuple[int, int]] = [
            parse_coordinate(cell, label=f"Route cell {index}") for index, cell in enumerate(route)
        ]
        stray_in_walls = any(cls._is_blocked(walls, cell) for cell in cells)
        starts_at_start = bool(cells) and cells[0] == start
        touches_goal = goal in cells
        connected = bool(cells) and all(
            abs(ax - bx) + abs(ay - by) == 1 for (ax, ay), (bx, by) in zip(cells, cells[1:])
        )
        steps = max(0, len(cells) - 1)

        if not cells:
            message = "No route given."
        elif stray_in_walls:
            message = "Route passes through walls."
        elif not starts_at_start:
            message = "Route does not begin on the start cell."
        elif not touches_goal:
            message = "Route does not reach the goal."
        elif not connected:
            message = "Route is not continuous from start to goal."
        elif steps == max_distance:
            message = "Route reaches the goal along the shortest path."
        else:
            message = f"Route reaches the goal in {steps} steps (shortest is {max_distance})."

        success = starts_at_start and touches_goal and connected and not stray_in_walls
        result = MazeEvaluationResult(
            maze_id=record["id"],
            starts_at_start=starts_at_start,
            touches_goal=touches_goal,
            connected=connected,
            stray_in_walls=stray_in_walls,
            steps=steps,
            optimal=success and steps == max_distance,
            message=message,
        )
        logger.debug("Evaluated route for maze %s: %s", result.maze_id, message)
        return result

    @staticmethod
    def _is_blocked(walls: np.ndarray, cell: Tuple[int, int]) -> bool:
        x, y = cell
        height, width = walls.shape
        if not (0 <= x < width and 0 <= y < height):
            return True
        return bool(walls[y, x])


__all__ = ["MazeEvaluator", "MazeEvaluationResult"]


def _load_route(value: str) -> List[List[int]]:
    text = value if value.lstrip().startswith("[") else Path(value).read_text(encoding="utf-8")
    route = json.loads(text)
    if not isinstance(route, list):
        raise ValueError("Route must be a JSON list of [x, y] pairs")
    return route


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate a route through a generated maze")
    parser.add_argument("metadata", type=Path, help="Path to maze metadata JSON")
    parser.add_argument("maze_id", type=str, help="Identifier of the maze to evaluate")
    parser.add_argument("route", type=str, help="JSON list of [x, y] cells, or a file containing one")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    evaluator = MazeEvaluator(args.metadata)
    result = evaluator.evaluate(args.maze_id, _load_route(args.route))
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
