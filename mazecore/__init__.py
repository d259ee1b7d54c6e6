"""Perfect-maze generation with a farthest-point goal."""

__all__ = [
    "Cell",
    "CellKind",
    "Coordinate",
    "Grid",
    "MazeCarver",
    "shuffle_directions",
    "FarthestPoint",
    "FarthestPointFinder",
    "farthest_point",
    "find_farthest",
    "shortest_path",
    "MazeGenerator",
    "MazeRecord",
    "generate",
    "MazeEvaluator",
    "MazeEvaluationResult",
    "AbstractMazeGenerator",
    "AbstractMazeEvaluator",
    "MazeError",
    "InvalidDimensions",
    "OutOfBounds",
    "Disconnected",
    "FrozenGrid",
]

from .base import AbstractMazeGenerator, AbstractMazeEvaluator
from .errors import Disconnected, FrozenGrid, InvalidDimensions, MazeError, OutOfBounds
from .grid import Cell, CellKind, Coordinate, Grid
from .carver import MazeCarver, shuffle_directions
from .search import (
    FarthestPoint,
    FarthestPointFinder,
    farthest_point,
    find_farthest,
    shortest_path,
)
from .generator import MazeGenerator, MazeRecord, generate
from .evaluator import MazeEvaluator, MazeEvaluationResult
