"""Breadth-first searches over the open cells of a carved grid."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import Disconnected
from .grid import Coordinate, Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FarthestPoint:
    coordinate: Coordinate
    distance: int
    reachable: int


def _require_open(grid: Grid, start: Coordinate) -> None:
    if not grid.get(*start).is_open:
        raise Disconnected(f"Start cell {start} is a wall")


def distance_map(grid: Grid, start: Coordinate) -> Dict[Coordinate, int]:
    """Shortest-path distance from ``start`` to every reachable open cell, in BFS discovery order."""

    _require_open(grid, start)
    distances: Dict[Coordinate, int] = {start: 0}
    queue: deque[Coordinate] = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in grid.open_neighbors(*current):
            if neighbor not in distances:
                distances[neighbor] = distances[current] + 1
                queue.append(neighbor)
    return distances


def farthest_point(grid: Grid, start: Coordinate) -> FarthestPoint:
    """Find the open cell with the largest shortest-path distance from ``start``.

    Cells leave the queue in non-decreasing distance order, and only a strictly
    larger distance replaces the current best, so among equally distant cells
    the first one discovered wins. When nothing but ``start`` is reachable the
    result is ``start`` itself at distance 0.

    Raises :class:`Disconnected` if any open cell of the grid is unreachable.
    """

    best = start
    best_distance = 0
    reachable = 0
    distances = distance_map(grid, start)
    # dict order is discovery order, which is also dequeue order for BFS
    for coordinate, distance in distances.items():
        reachable += 1
        if distance > best_distance:
            best = coordinate
            best_distance = distance

    open_cells = sum(1 for cell in grid.cells() if cell.is_open)
    if reachable != open_cells:
        raise Disconnected(
            f"Only {reachable} of {open_cells} open cells are reachable from {start}"
        )
    logger.debug("Farthest point from %s is %s at distance %d", start, best, best_distance)
    return FarthestPoint(coordinate=best, distance=best_distance, reachable=reachable)


def find_farthest(grid: Grid, start: Coordinate) -> Coordinate:
    return farthest_point(grid, start).coordinate


class FarthestPointFinder:
    """Stateful wrapper around :func:`farthest_point` bound to one grid."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.last_result: Optional[FarthestPoint] = None

    @property
    def max_distance(self) -> Optional[int]:
        return self.last_result.distance if self.last_result is not None else None

    def find(self, start: Coordinate) -> Coordinate:
        self.last_result = farthest_point(self.grid, start)
        return self.last_result.coordinate


def shortest_path(grid: Grid, start: Coordinate, goal: Coordinate) -> List[Coordinate]:
    """Return the cells of a shortest route from ``start`` to ``goal`` inclusive, or ``[]``."""

    _require_open(grid, start)
    grid.get(*goal)
    parents: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    queue: deque[Coordinate] = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for neighbor in grid.open_neighbors(*current):
            if neighbor not in parents:
                parents[neighbor] = current
                queue.append(neighbor)

    if goal not in parents:
        return []
    node: Optional[Coordinate] = goal
    result: List[Coordinate] = []
    while node is not None:
        result.append(node)
        node = parents[node]
    result.reverse()
    return result


__all__ = [
    "FarthestPoint",
    "FarthestPointFinder",
    "distance_map",
    "farthest_point",
    "find_farthest",
    "shortest_path",
]
