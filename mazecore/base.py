"""Maze metadata files: batch generation on one side, validated loading on the other."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from .grid import CellKind, Grid, parse_coordinate

PathLike = Union[str, Path]
RecordT = TypeVar("RecordT")

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "width", "height", "rows", "start", "goal", "max_distance")


def validate_maze_payload(payload: Mapping[str, Any]) -> Grid:
    """Check one serialized maze record and return its frozen grid.

    The text rows must match the declared size, ``start`` must sit on the
    single ``S`` cell, and ``goal`` must sit on the single ``G`` cell (or equal
    ``start`` when the maze has no goal cell).
    """

    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        raise ValueError(f"Maze record is missing fields: {', '.join(missing)}")
    maze_id = payload["id"]
    if not isinstance(maze_id, str) or not maze_id:
        raise ValueError(f"Maze record id must be a non-empty string, got {maze_id!r}")

    try:
        grid = Grid.from_rows(payload["rows"])
    except ValueError as exc:
        raise ValueError(f"Maze {maze_id}: bad rows ({exc})") from exc
    if grid.dimensions() != (payload["width"], payload["height"]):
        raise ValueError(
            f"Maze {maze_id}: rows are {grid.width}x{grid.height}, "
            f"record says {payload['width']}x{payload['height']}"
        )

    start = parse_coordinate(payload["start"], label=f"Maze {maze_id} start")
    goal = parse_coordinate(payload["goal"], label=f"Maze {maze_id} goal")
    if grid.find(CellKind.START) != [start]:
        raise ValueError(f"Maze {maze_id}: start {start} is not the only start cell")
    expected_goals = [] if goal == start else [goal]
    if grid.find(CellKind.GOAL) != expected_goals:
        raise ValueError(f"Maze {maze_id}: goal {goal} does not match the grid")

    max_distance = payload["max_distance"]
    if isinstance(max_distance, bool) or not isinstance(max_distance, int) or max_distance < 0:
        raise ValueError(f"Maze {maze_id}: max_distance must be a non-negative integer")
    return grid.freeze()


class AbstractMazeGenerator(ABC, Generic[RecordT]):
    """Base class for builders that emit batches of maze records."""

    @abstractmethod
    def create_maze(self, *args, **kwargs) -> RecordT:
        """Create a maze record from the provided parameters."""

    @abstractmethod
    def create_random_maze(self) -> RecordT:
        """Create a single randomized maze record."""

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[RecordT]:
        if count < 0:
            raise ValueError("count must be non-negative")
        records = [self.create_random_maze() for _ in range(count)]
        if metadata_path is not None:
            self.write_metadata(records, metadata_path, append=append)
        return records

    def write_metadata(
        self,
        records: Iterable[RecordT],
        metadata_path: PathLike,
        *,
        append: bool = True,
    ) -> None:
        """Write maze records as a JSON list, keeping earlier mazes when appending.

        Every record is validated first and ids must stay unique across the
        whole file, so nothing is written if any record is rejected.
        """

        path = Path(metadata_path)
        existing: List[Dict[str, Any]] = []
        if append and path.exists():
            existing = read_maze_metadata(path)
        payload = [record.to_dict() for record in records]  # type: ignore[attr-defined]

        seen = {entry["id"] for entry in existing}
        for entry in payload:
            validate_maze_payload(entry)
            if entry["id"] in seen:
                raise ValueError(f"Duplicate maze id {entry['id']!r} in {path}")
            seen.add(entry["id"])

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(existing + payload, indent=2), encoding="utf-8")
        logger.info("Wrote %d mazes to %s (%d total)", len(payload), path, len(existing) + len(payload))


def read_maze_metadata(path: PathLike) -> List[Dict[str, Any]]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Maze metadata in {path} must be a list of records")
    return raw


class AbstractMazeEvaluator(ABC):
    """Loads a maze metadata file, validating every record up front."""

    def __init__(self, metadata_path: PathLike) -> None:
        self.metadata_path = Path(metadata_path)
        if not self.metadata_path.exists():
            raise FileNotFoundError(f"Metadata file not found: {self.metadata_path}")
        self._records: Dict[str, Dict[str, Any]] = {}
        self._grids: Dict[str, Grid] = {}
        for record in read_maze_metadata(self.metadata_path):
            if not isinstance(record, dict):
                raise ValueError(f"Maze metadata entries must be objects, got {record!r}")
            grid = validate_maze_payload(record)
            maze_id = record["id"]
            if maze_id in self._records:
                raise ValueError(f"Duplicate maze id {maze_id!r} in {self.metadata_path}")
            self._records[maze_id] = record
            self._grids[maze_id] = grid
        logger.debug("Loaded %d mazes from %s", len(self._records), self.metadata_path)

    @property
    def records(self) -> Dict[str, Dict[str, Any]]:
        return self._records

    def get_record(self, maze_id: str) -> Dict[str, Any]:
        try:
            return self._records[maze_id]
        except KeyError as exc:
            raise KeyError(f"Maze id '{maze_id}' not found in metadata") from exc

    def get_grid(self, maze_id: str) -> Grid:
        self.get_record(maze_id)
        return self._grids[maze_id]

    @abstractmethod
    def evaluate(self, maze_id: str, *args, **kwargs):
        """Evaluate a candidate solution for the given maze."""


__all__ = [
    "AbstractMazeGenerator",
    "AbstractMazeEvaluator",
    "PathLike",
    "read_maze_metadata",
    "validate_maze_payload",
]
