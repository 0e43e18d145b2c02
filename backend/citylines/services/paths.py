"""
City Lines - Path Synthesizer

Lays road tiles from each landmark to the turnpike along an L-shaped
Manhattan route (vertical leg first, then horizontal).
"""

import logging
from typing import List, Optional, Set, Tuple

from .errors import PathTooShort, RouteBlocked
from .grid import Grid, RoadType, Tile, TileShape

logger = logging.getLogger(__name__)


def _step_toward(value: int, target: int) -> int:
    if value < target:
        return value + 1
    if value > target:
        return value - 1
    return value


def l_route_cells(
    start: Tuple[int, int],
    end: Tuple[int, int],
    vertical_first: bool = True,
) -> List[Tuple[int, int]]:
    """
    Intermediate cells of an L route from start to end (both excluded).

    The route is a shortest Manhattan path, so only its last cell touches
    `end` and only its first cell touches `start`.
    """
    row, col = start
    cells = []
    while True:
        if vertical_first:
            if row != end[0]:
                row = _step_toward(row, end[0])
            else:
                col = _step_toward(col, end[1])
        else:
            if col != end[1]:
                col = _step_toward(col, end[1])
            else:
                row = _step_toward(row, end[0])

        if (row, col) == end:
            return cells
        cells.append((row, col))


def _blocked(grid: Grid, cells: List[Tuple[int, int]]) -> bool:
    """Route would run through a fixed tile (landmark or hub)."""
    for row, col in cells:
        tile = grid.get(row, col)
        if tile is not None and not tile.rotatable:
            return True
    return False


def get_or_create_road(grid: Grid, row: int, col: int, merged: Set[Tuple[int, int]]) -> Tile:
    """Existing road tile (flagged as merged) or a new local road."""
    existing = grid.get(row, col)
    if existing is not None:
        merged.add((row, col))
        return existing

    tile = Tile(
        row,
        col,
        TileShape.STRAIGHT,
        RoadType.LOCAL_ROAD,
        rotatable=True,
        comment=f"Road ({row},{col})",
    )
    return grid.place(tile)


def synthesize_route(
    grid: Grid,
    landmark: Tile,
    turnpike: Tile,
    min_path_length: int,
    merged: Optional[Set[Tuple[int, int]]] = None,
) -> List[Tile]:
    """
    Builds one route and returns it as [landmark, *roads, turnpike].

    Raises RouteBlocked if both L orientations cross a fixed tile and
    PathTooShort if fewer than min_path_length road tiles lie between.
    """
    if merged is None:
        merged = set()

    cells = l_route_cells(landmark.pos, turnpike.pos, vertical_first=True)
    if _blocked(grid, cells):
        cells = l_route_cells(landmark.pos, turnpike.pos, vertical_first=False)
        if _blocked(grid, cells):
            raise RouteBlocked(
                f"Both routes from ({landmark.row},{landmark.col}) to the turnpike "
                f"at ({turnpike.row},{turnpike.col}) cross a fixed tile"
            )
        logger.debug("[Paths] (%d,%d): vertical leg blocked, using horizontal-first route",
                     landmark.row, landmark.col)

    if len(cells) < min_path_length:
        raise PathTooShort(
            f"Path from {landmark.landmark_kind.value if landmark.landmark_kind else 'landmark'} "
            f"at ({landmark.row},{landmark.col}) to turnpike is too short: "
            f"{len(cells)} tiles (min: {min_path_length})"
        )

    roads = [get_or_create_road(grid, row, col, merged) for row, col in cells]
    return [landmark, *roads, turnpike]
