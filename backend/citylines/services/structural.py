"""
City Lines - Structural Validator

Proves a resolved grid is playable before it is scrambled:
no opening points at nothing, and every landmark can reach the turnpike.
Both checks read solution_rotation, never the visible rotation.
"""

import logging
from collections import deque
from typing import List, Set, Tuple

from .errors import DanglingOpening, UnreachableLandmark
from .grid import DIRECTIONS, Direction, Grid, Tile, connects

logger = logging.getLogger(__name__)


# ============================================
# DANGLING OPENINGS
# ============================================

def find_dangling_openings(grid: Grid) -> List[Tuple[Tile, Direction]]:
    """
    Every (tile, direction) whose solved opening leads off the grid, into
    an empty cell or into a neighbour without the reciprocal opening.
    """
    defects = []
    for tile in grid.tiles():
        for direction in tile.solution_openings():
            other = grid.neighbor(tile.row, tile.col, direction)
            if other is None or direction.opposite not in other.solution_openings():
                defects.append((tile, direction))
    return defects


def assert_no_dangling(grid: Grid) -> None:
    defects = find_dangling_openings(grid)
    if defects:
        error = DanglingOpening(defects)
        logger.error("[Structural] %s", error)
        raise error


# ============================================
# SOLVABILITY
# ============================================

def can_reach_hub(grid: Grid, start: Tile) -> bool:
    """BFS over solved rotations from `start` until a turnpike is found."""
    queue = deque([start])
    visited: Set[Tuple[int, int]] = {start.pos}

    while queue:
        tile = queue.popleft()
        if tile.is_turnpike:
            return True
        for direction in DIRECTIONS:
            other = connects(grid, tile, direction, use_solution=True)
            if other is None or other.pos in visited:
                continue
            visited.add(other.pos)
            queue.append(other)

    return False


def assert_solvable(grid: Grid) -> None:
    for landmark in grid.landmarks():
        if not can_reach_hub(grid, landmark):
            error = UnreachableLandmark(landmark)
            logger.error("[Structural] %s", error)
            raise error


def validate_structure(grid: Grid) -> None:
    """Both checks; raises the first failing kind."""
    assert_no_dangling(grid)
    assert_solvable(grid)
