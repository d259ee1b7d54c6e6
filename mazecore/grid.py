"""Rectangular grid of typed cells that the carver and the search operate on."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Iterator, List, Sequence, Tuple

import numpy as np

from .errors import FrozenGrid, InvalidDimensions, OutOfBounds

Coordinate = Tuple[int, int]

MIN_DIMENSION = 3

# down, right, up, left
NEIGHBOR_OFFSETS: Tuple[Coordinate, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


class CellKind(IntEnum):
    PATH = 0
    WALL = 1
    START = 2
    GOAL = 3


_KIND_TO_CHAR = {
    CellKind.WALL: "#",
    CellKind.PATH: ".",
    CellKind.START: "S",
    CellKind.GOAL: "G",
}
_CHAR_TO_KIND = {char: kind for kind, char in _KIND_TO_CHAR.items()}


def parse_coordinate(value: Any, *, label: str = "cell") -> Coordinate:
    """Return ``value`` as an ``(x, y)`` tuple, rejecting anything but two real integers.

    Floats and bools are refused, not truncated.
    """

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        raise ValueError(f"{label} must be an [x, y] pair, got {value!r}")
    for part in value:
        if isinstance(part, bool) or not isinstance(part, numbers.Integral):
            raise ValueError(f"{label} coordinates must be integers, got {value!r}")
    return (int(value[0]), int(value[1]))


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    kind: CellKind = CellKind.WALL
    visited: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return (self.x, self.y)

    @property
    def is_open(self) -> bool:
        return self.kind != CellKind.WALL


class Grid:
    """A ``width x height`` array of :class:`Cell` values, indexed as ``(x, y)``.

    Every cell starts as a wall. The grid is mutated in place while a maze is
    being built and then frozen; a frozen grid rejects all further mutation.
    """

    def __init__(self, width: int, height: int) -> None:
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
            if value < MIN_DIMENSION:
                raise InvalidDimensions(f"{name} must be at least {MIN_DIMENSION}, got {value}")
        self._width = width
        self._height = height
        self._cells: List[List[Cell]] = [
            [Cell(x, y) for x in range(width)] for y in range(height)
        ]
        self._frozen = False

    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frozen(self) -> bool:
        return self._frozen

    def dimensions(self) -> Tuple[int, int]:
        return self._width, self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def in_interior(self, x: int, y: int) -> bool:
        """Return True when ``(x, y)`` lies strictly inside the outer wall border."""

        return 1 <= x <= self._width - 2 and 1 <= y <= self._height - 2

    def get(self, x: int, y: int) -> Cell:
        self._check_bounds(x, y)
        return self._cells[y][x]

    def set_kind(self, x: int, y: int, kind: CellKind) -> None:
        self._check_mutable()
        self._check_bounds(x, y)
        self._cells[y][x] = replace(self._cells[y][x], kind=CellKind(kind))

    def set_visited(self, x: int, y: int, visited: bool) -> None:
        self._check_mutable()
        self._check_bounds(x, y)
        self._cells[y][x] = replace(self._cells[y][x], visited=bool(visited))

    def freeze(self) -> "Grid":
        self._frozen = True
        return self

    def copy(self) -> "Grid":
        """Return an unfrozen copy; cells are immutable so rows are copied shallowly."""

        clone = Grid(self._width, self._height)
        clone._cells = [list(row) for row in self._cells]
        return clone

    # ------------------------------------------------------------------

    def cells(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def find(self, kind: CellKind) -> List[Coordinate]:
        return [cell.coordinate for cell in self.cells() if cell.kind == kind]

    def open_neighbors(self, x: int, y: int) -> Iterator[Coordinate]:
        """Yield the 4-connected non-wall neighbours of ``(x, y)`` (down, right, up, left)."""

        self._check_bounds(x, y)
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and self._cells[ny][nx].is_open:
                yield (nx, ny)

    def to_matrix(self) -> List[List[int]]:
        return [[int(cell.kind) for cell in row] for row in self._cells]

    def to_array(self) -> np.ndarray:
        return np.asarray(self.to_matrix(), dtype=np.int8)

    def to_rows(self) -> List[str]:
        return ["".join(_KIND_TO_CHAR[cell.kind] for cell in row) for row in self._cells]

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from text rows (``#`` wall, ``.`` path, ``S`` start, ``G`` goal)."""

        rows = [row.rstrip("\n") for row in rows if row.strip()]
        if not rows:
            raise InvalidDimensions("Cannot build a grid from zero rows")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidDimensions("All rows must have the same length")
        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                try:
                    kind = _CHAR_TO_KIND[char]
                except KeyError as exc:
                    raise ValueError(f"Unknown cell character {char!r} at ({x}, {y})") from exc
                if kind != CellKind.WALL:
                    grid.set_kind(x, y, kind)
        return grid

    # ------------------------------------------------------------------

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.dimensions())

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenGrid("Grid has been frozen and can no longer be modified")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.dimensions() == other.dimensions() and self.to_matrix() == other.to_matrix()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "mutable"
        return f"Grid({self._width}x{self._height}, {state})"

    def __str__(self) -> str:
        return "\n".join(self.to_rows())


__all__ = [
    "Cell",
    "CellKind",
    "Coordinate",
    "Grid",
    "MIN_DIMENSION",
    "NEIGHBOR_OFFSETS",
    "parse_coordinate",
]
