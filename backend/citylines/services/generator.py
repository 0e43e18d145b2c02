"""
City Lines - Level Generator

Solution-first pipeline:
    placement -> paths -> resolver -> structural validator -> scrambler

The solved layout is built and proven first, then scrambled, so every
level that comes out is solvable by construction. A failed attempt raises
a GenerationError; retrying with another seed is the caller's job.
"""

import logging
import secrets
from typing import List, Optional, Tuple

from ..schemas import GenerationConfig, LevelRecord
from .grid import Grid, Tile
from .level_loader import record_from_grid
from .paths import synthesize_route
from .placement import place_landmarks, place_turnpike
from .resolver import orient_fixed_tiles, resolve_tiles
from .rng import XorShiftRandom
from .scrambler import scramble_rotations
from .structural import validate_structure

logger = logging.getLogger(__name__)

MIN_GENERATED_SIZE = 3


# ============================================
# RESULT
# ============================================

class GeneratedLevel:
    """Scrambled grid plus the routes that solve it."""

    def __init__(
        self,
        grid: Grid,
        seed: int,
        solution_paths: List[Tuple[str, List[Tuple[int, int]]]],
        upgrades: int = 0,
        scrambled: int = 0,
    ):
        self.grid = grid
        self.seed = seed
        self.solution_paths = solution_paths
        self.upgrades = upgrades
        self.scrambled = scrambled

    @property
    def grid_size(self) -> Tuple[int, int]:
        return (self.grid.rows, self.grid.cols)

    @property
    def tiles(self) -> List[Tile]:
        return list(self.grid.tiles())

    def to_record(self, name: Optional[str] = None) -> LevelRecord:
        return record_from_grid(
            self.grid,
            name=name,
            seed=self.seed,
            solution_paths=self.solution_paths,
        )


# ============================================
# PIPELINE
# ============================================

def resolve_seed(seed: Optional[int]) -> int:
    """Config seed, or a fresh 32-bit one that gets recorded with the level."""
    if seed is not None:
        return seed
    return secrets.randbits(32)


def generate_level(config: GenerationConfig) -> GeneratedLevel:
    """
    Generates one level from `config`.

    Raises:
        ValueError: grid smaller than 3x3
        GenerationError: placement, routing or structural failure
    """
    rows, cols = config.grid_size.rows, config.grid_size.cols
    if rows < MIN_GENERATED_SIZE or cols < MIN_GENERATED_SIZE:
        raise ValueError(f"Grid must be at least {MIN_GENERATED_SIZE}x{MIN_GENERATED_SIZE}, got {rows}x{cols}")

    seed = resolve_seed(config.seed)
    rng = XorShiftRandom(seed)
    grid = Grid(rows, cols)

    logger.info(
        "[LevelGenerator] Generating %dx%d, %d landmark(s), %s, min path %d, seed %d",
        rows, cols, config.landmark_count, config.difficulty.value, config.min_path_length, seed,
    )

    # Step 1: hub
    turnpike = place_turnpike(grid, config.difficulty, rng)
    logger.debug("[LevelGenerator] Turnpike at (%d,%d)", turnpike.row, turnpike.col)

    # Step 2: destinations
    landmarks = place_landmarks(grid, turnpike, config.landmark_count, rng)
    logger.debug("[LevelGenerator] Placed %d landmark(s)", len(landmarks))

    # Step 3: routes
    merged = set()
    routes = []
    solution_paths = []
    for ordinal, landmark in enumerate(landmarks, start=1):
        route = synthesize_route(grid, landmark, turnpike, config.min_path_length, merged)
        routes.append(route)
        landmark_id = f"{landmark.landmark_kind.value}_{ordinal}"
        solution_paths.append((landmark_id, [tile.pos for tile in route]))
        logger.debug("[LevelGenerator] Route %s -> turnpike: %d road tile(s)", landmark_id, len(route) - 2)

    # Step 4: shapes and solved rotations
    orient_fixed_tiles(grid, turnpike, routes)
    upgrades = resolve_tiles(grid, merged)
    if upgrades:
        logger.debug("[LevelGenerator] %d tile(s) upgraded by merged routes", upgrades)

    # Step 5: prove it
    validate_structure(grid)

    # Step 6: scramble
    scrambled = scramble_rotations(grid, rng)

    logger.info(
        "[LevelGenerator] Level generated: %d tiles, %d scrambled away from solution",
        len(grid), scrambled,
    )
    return GeneratedLevel(grid, seed, solution_paths, upgrades=upgrades, scrambled=scrambled)
