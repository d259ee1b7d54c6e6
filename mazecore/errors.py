"""Exception hierarchy for maze construction and search."""

from __future__ import annotations

from typing import Tuple


class MazeError(Exception):
    """Base class for every error raised by :mod:`mazecore`."""


class InvalidDimensions(MazeError, ValueError):
    """Grid dimensions are too small, not integers, or not odd where odd is required."""


class OutOfBounds(MazeError, IndexError):
    """A coordinate lies outside the grid (or outside the carvable interior)."""

    def __init__(self, x: int, y: int, dimensions: Tuple[int, int], *, region: str = "grid") -> None:
        self.x = x
        self.y = y
        self.dimensions = dimensions
        width, height = dimensions
        super().__init__(f"Coordinate ({x}, {y}) is outside the {region} of a {width}x{height} maze")


class Disconnected(MazeError, RuntimeError):
    """The open cells of a grid are not all reachable from the start cell."""


class FrozenGrid(MazeError, RuntimeError):
    """A finished grid snapshot was mutated."""


__all__ = [
    "MazeError",
    "InvalidDimensions",
    "OutOfBounds",
    "Disconnected",
    "FrozenGrid",
]
