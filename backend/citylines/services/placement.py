"""
City Lines - Placement Solver

Puts the turnpike (hub) and the landmarks (destinations) on an empty grid.
"""

import logging
import math
from typing import List, Tuple

from ..schemas import Difficulty
from .errors import PlacementExhausted
from .grid import Grid, LandmarkKind, RoadType, Tile, TileShape
from .rng import XorShiftRandom

logger = logging.getLogger(__name__)

LANDMARK_KINDS = [LandmarkKind.DINER, LandmarkKind.GAS_STATION, LandmarkKind.MARKET]

MIN_HUB_DISTANCE = 3
MIN_LANDMARK_DISTANCE = 2
MIN_ALIGNED_GAP = 3


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ============================================
# TURNPIKE
# ============================================

def pick_turnpike_position(rows: int, cols: int, difficulty: Difficulty, rng: XorShiftRandom) -> Tuple[int, int]:
    """
    Hub position by difficulty.

    Easy: grid centre with +-1 jitter per axis.
    Medium: a non-corner cell of a random edge.
    Hard: a corner, or the cell diagonally inside it.
    """
    if difficulty is Difficulty.EASY:
        offset_row = rng.next_int(-1, 1)
        offset_col = rng.next_int(-1, 1)
        row = _clamp(rows // 2 + offset_row, 1, rows - 2)
        col = _clamp(cols // 2 + offset_col, 1, cols - 2)
        return row, col

    if difficulty is Difficulty.MEDIUM:
        edge = rng.next_int(0, 3)  # 0=top, 1=right, 2=bottom, 3=left
        if edge == 0:
            return 0, rng.next_int(1, cols - 2)
        if edge == 1:
            return rng.next_int(1, rows - 2), cols - 1
        if edge == 2:
            return rows - 1, rng.next_int(1, cols - 2)
        return rng.next_int(1, rows - 2), 0

    corner = rng.next_int(0, 3)  # 0=TL, 1=TR, 2=BR, 3=BL
    near = rng.next() < 0.5
    inset = 1 if near else 0
    top, bottom = inset, rows - 1 - inset
    left, right = inset, cols - 1 - inset
    if corner == 0:
        return top, left
    if corner == 1:
        return top, right
    if corner == 2:
        return bottom, right
    return bottom, left


def place_turnpike(grid: Grid, difficulty: Difficulty, rng: XorShiftRandom) -> Tile:
    row, col = pick_turnpike_position(grid.rows, grid.cols, difficulty, rng)
    turnpike = Tile(
        row,
        col,
        TileShape.TURNPIKE,
        RoadType.TURNPIKE,
        rotatable=False,
        comment="Turnpike (fixed)",
    )
    return grid.place(turnpike)


# ============================================
# LANDMARKS
# ============================================

def quadrant_of(row: int, col: int, rows: int, cols: int) -> int:
    return (0 if row < rows // 2 else 2) + (0 if col < cols // 2 else 1)


def is_valid_landmark_position(
    row: int,
    col: int,
    existing: List[Tile],
    turnpike: Tile,
    grid: Grid,
    landmark_count: int,
) -> bool:
    """All spacing and distribution rules for one candidate cell."""
    if manhattan((row, col), turnpike.pos) < MIN_HUB_DISTANCE:
        return False

    for landmark in existing:
        if manhattan((row, col), landmark.pos) < MIN_LANDMARK_DISTANCE:
            return False

        # no tight stacking along a row or column
        if row == landmark.row and abs(col - landmark.col) < MIN_ALIGNED_GAP:
            return False
        if col == landmark.col and abs(row - landmark.row) < MIN_ALIGNED_GAP:
            return False

        # 2x2 overlap: no landmark in any 2x2 block shared with this cell
        if abs(row - landmark.row) <= 1 and abs(col - landmark.col) <= 1:
            return False

    quadrant_counts = [0, 0, 0, 0]
    for landmark in existing:
        quadrant_counts[quadrant_of(landmark.row, landmark.col, grid.rows, grid.cols)] += 1

    max_per_quadrant = math.ceil(landmark_count / 2)
    if quadrant_counts[quadrant_of(row, col, grid.rows, grid.cols)] >= max_per_quadrant:
        return False

    return True


def landmark_candidates(grid: Grid, turnpike: Tile, rng: XorShiftRandom) -> List[Tuple[int, int]]:
    """Free cells far enough from the hub, shuffled."""
    candidates = []
    for row in range(grid.rows):
        for col in range(grid.cols):
            if grid.is_occupied(row, col):
                continue
            if manhattan((row, col), turnpike.pos) < MIN_HUB_DISTANCE:
                continue
            candidates.append((row, col))
    return rng.shuffle(candidates)


def place_landmarks(grid: Grid, turnpike: Tile, landmark_count: int, rng: XorShiftRandom) -> List[Tile]:
    candidates = landmark_candidates(grid, turnpike, rng)
    landmarks: List[Tile] = []

    for i in range(landmark_count):
        placed = None
        for row, col in candidates:
            if grid.is_occupied(row, col):
                continue
            if not is_valid_landmark_position(row, col, landmarks, turnpike, grid, landmark_count):
                continue
            placed = Tile(
                row,
                col,
                TileShape.LANDMARK,
                RoadType.LANDMARK,
                rotatable=False,
                landmark_kind=LANDMARK_KINDS[i % len(LANDMARK_KINDS)],
                comment=f"Landmark {i + 1}",
            )
            break

        if placed is None:
            raise PlacementExhausted(
                f"Failed to place landmark {i + 1} of {landmark_count}: "
                f"no valid cell among {len(candidates)} candidates"
            )

        grid.place(placed)
        landmarks.append(placed)
        logger.debug(
            "[Placement] %s at (%d,%d)", placed.landmark_kind.value, placed.row, placed.col
        )

    return landmarks
