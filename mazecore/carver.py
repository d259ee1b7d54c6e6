"""Randomized recursive-backtracking maze carver."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from .errors import OutOfBounds
from .grid import CellKind, Coordinate, Grid

logger = logging.getLogger(__name__)

# up, right, down, left; two steps so the midpoint is the wall between lattice cells
DIRECTIONS: Tuple[Coordinate, ...] = ((0, -2), (2, 0), (0, 2), (-2, 0))

DEFAULT_ORIGIN: Coordinate = (1, 1)


def shuffle_directions(rng: random.Random) -> List[Coordinate]:
    """Return the four carving directions in a uniformly random order.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every one of the
    24 orderings is equally likely for a given source of randomness.
    """

    directions = list(DIRECTIONS)
    rng.shuffle(directions)
    return directions


class MazeCarver:
    """Turn an all-wall grid into a perfect maze over its odd interior lattice.

    The walk is a depth-first search: on entering a cell the four directions
    are shuffled once, and each unvisited interior neighbour two steps away is
    joined to the current cell (by opening the wall between them) and explored
    fully before the next direction is tried. An explicit stack of
    ``(cell, remaining directions)`` frames replaces the call stack so large
    grids cannot exhaust the interpreter's recursion limit.
    """

    def __init__(self, rng: Optional[random.Random] = None, *, seed: Optional[int] = None) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._rng = rng if rng is not None else random.Random(seed)

    def carve(self, grid: Grid, origin: Coordinate = DEFAULT_ORIGIN) -> int:
        """Carve ``grid`` in place starting from ``origin``; return the number of lattice cells opened."""

        ox, oy = origin
        if not grid.in_interior(ox, oy):
            raise OutOfBounds(ox, oy, grid.dimensions(), region="interior")

        grid.set_kind(ox, oy, CellKind.PATH)
        grid.set_visited(ox, oy, True)
        carved = 1

        stack: List[Tuple[Coordinate, List[Coordinate]]] = [(origin, shuffle_directions(self._rng))]
        while stack:
            (x, y), remaining = stack[-1]
            if not remaining:
                stack.pop()
                continue
            dx, dy = remaining.pop(0)
            nx, ny = x + dx, y + dy
            if not grid.in_interior(nx, ny) or grid.get(nx, ny).visited:
                continue
            grid.set_kind(x + dx // 2, y + dy // 2, CellKind.PATH)
            grid.set_kind(nx, ny, CellKind.PATH)
            grid.set_visited(nx, ny, True)
            carved += 1
            stack.append(((nx, ny), shuffle_directions(self._rng)))

        logger.debug("Carved %d cells in a %dx%d grid from %s", carved, grid.width, grid.height, origin)
        return carved


__all__ = ["DIRECTIONS", "DEFAULT_ORIGIN", "MazeCarver", "shuffle_directions"]
