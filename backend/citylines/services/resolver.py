"""
City Lines - Tile Shape & Rotation Resolver

Turns "which neighbours exist" into "which shape and rotation opens exactly
toward them". Writes solution rotations; the scrambler runs afterwards.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .grid import (
    BASE_OPENINGS,
    DIRECTIONS,
    ROTATIONS,
    Direction,
    Grid,
    Tile,
    TileShape,
    direction_between,
    rotate_openings,
)

logger = logging.getLogger(__name__)


def determine_shape(required: List[Direction]) -> TileShape:
    """Shape from the number (and layout) of required openings."""
    count = len(required)
    if count == 4:
        return TileShape.CROSSROADS
    if count == 3:
        return TileShape.T_JUNCTION
    if count == 2:
        first, second = required
        return TileShape.STRAIGHT if first.opposite is second else TileShape.CORNER
    # degenerate: 0 or 1 neighbour, left for the structural validator
    return TileShape.STRAIGHT


def rotation_for(shape: TileShape, required: Iterable[Direction]) -> Optional[int]:
    """First rotation whose openings equal `required`, None if there is none."""
    wanted = frozenset(required)
    base = BASE_OPENINGS[shape]
    for rotation in ROTATIONS:
        if rotate_openings(base, rotation) == wanted:
            return rotation
    return None


def _apply(tile: Tile, shape: TileShape, required: List[Direction]) -> None:
    rotation = rotation_for(shape, required)
    if rotation is None:
        logger.warning(
            "[Resolver] No rotation of %s at (%d,%d) opens exactly %s, defaulting to 0",
            shape.value, tile.row, tile.col, [d.value for d in required],
        )
        rotation = 0
    tile.shape = shape
    tile.set_solution(rotation)


# ============================================
# FIXED TILES
# ============================================

def orient_landmark(landmark: Tile, first_step: Tile) -> None:
    """Points the landmark's driveway at the first tile of its route."""
    direction = direction_between(landmark.pos, first_step.pos)
    if direction is None:
        raise ValueError(
            f"Route of landmark ({landmark.row},{landmark.col}) does not start next to it"
        )
    _apply(landmark, TileShape.LANDMARK, [direction])


def orient_turnpike(grid: Grid, turnpike: Tile) -> None:
    """
    Opens the hub toward every occupied neighbour.

    One neighbour keeps the single-gate turnpike shape; a hub fed from
    several sides takes the junction shape with that many openings.
    """
    required = grid.occupied_directions(turnpike.row, turnpike.col)
    if len(required) <= 1:
        _apply(turnpike, TileShape.TURNPIKE, required)
        return
    shape = determine_shape(required)
    logger.debug("[Resolver] Turnpike at (%d,%d) fed from %d sides -> %s",
                 turnpike.row, turnpike.col, len(required), shape.value)
    _apply(turnpike, shape, required)


def orient_fixed_tiles(grid: Grid, turnpike: Tile, routes: List[List[Tile]]) -> None:
    for route in routes:
        orient_landmark(route[0], route[1])
    orient_turnpike(grid, turnpike)


# ============================================
# ROAD TILES
# ============================================

def required_directions(grid: Grid, tile: Tile) -> List[Direction]:
    """
    Occupied neighbours the tile must open toward.

    A fixed neighbour only counts if it already opens back at this tile.
    """
    required = []
    for direction in DIRECTIONS:
        other = grid.neighbor(tile.row, tile.col, direction)
        if other is None:
            continue
        if not other.rotatable and direction.opposite not in other.solution_openings():
            continue
        required.append(direction)
    return required


def resolve_tiles(grid: Grid, merged: Optional[Set[Tuple[int, int]]] = None) -> int:
    """
    Sets shape and solution rotation of every rotatable tile.

    Returns the number of tiles whose shape changed (upgrades).
    """
    merged = merged or set()
    upgrades = 0

    for tile in grid.tiles():
        if not tile.rotatable:
            continue

        required = required_directions(grid, tile)
        shape = determine_shape(required)
        if shape is not tile.shape:
            upgrades += 1
            if tile.pos in merged:
                tile.comment = f"{shape.value} (upgraded)"
            else:
                tile.comment = f"{shape.value} ({tile.row},{tile.col})"
        _apply(tile, shape, required)

    return upgrades
