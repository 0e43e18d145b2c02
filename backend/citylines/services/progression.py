"""
City Lines - Level Progression

Maps a level number to a level:
- levels 1..HANDCRAFTED_LEVEL_COUNT come from hand-authored JSON files
- later levels are generated with a deterministic seed per level,
  retried with the next seed on failure, with a fixed fallback level
  when every attempt fails
"""

import logging
from functools import lru_cache
from typing import List, Tuple

from ..config import settings
from ..schemas import Difficulty, GenerationConfig, LevelRecord, LevelResponse
from .errors import GenerationError
from .generator import generate_level
from .level_loader import load_level_from_file

logger = logging.getLogger(__name__)

LEVELS_PER_CHAPTER = 5
BASE_GRID_SIZE = 4
MAX_LANDMARKS = 4

# (tier, grid size bump) per position inside a chapter
CHAPTER_PHASES: List[Tuple[Difficulty, int]] = [
    (Difficulty.EASY, 0),
    (Difficulty.EASY, 1),
    (Difficulty.MEDIUM, 0),
    (Difficulty.MEDIUM, 1),
    (Difficulty.HARD, 1),
]


# ============================================
# DIFFICULTY WAVE
# ============================================

def difficulty_for_level(level: int) -> Difficulty:
    return CHAPTER_PHASES[(level - 1) % LEVELS_PER_CHAPTER][0]


def grid_size_for_level(level: int) -> int:
    chapter = (level - 1) // LEVELS_PER_CHAPTER
    bump = CHAPTER_PHASES[(level - 1) % LEVELS_PER_CHAPTER][1]
    return min(BASE_GRID_SIZE + chapter + bump, settings.MAX_GRID_SIZE)


def landmark_count_for(size: int, difficulty: Difficulty) -> int:
    count = 1 + (size - 3) // 2
    if difficulty is Difficulty.HARD:
        count += 1
    return min(count, MAX_LANDMARKS)


def min_path_length_for(size: int) -> int:
    if size >= 8:
        return 4
    if size >= 6:
        return 3
    return 2


def config_for_level(level: int, seed: int) -> GenerationConfig:
    difficulty = difficulty_for_level(level)
    size = grid_size_for_level(level)
    return GenerationConfig(
        grid_size={"rows": size, "cols": size},
        landmark_count=landmark_count_for(size, difficulty),
        difficulty=difficulty,
        min_path_length=min_path_length_for(size),
        seed=seed,
    )


# ============================================
# SEEDS
# ============================================

def base_seed_for_level(level: int) -> int:
    return (level * settings.GENERATION_SEED_MULTIPLIER) & 0xFFFFFFFF


def seed_for_attempt(base_seed: int, attempt: int) -> int:
    return (base_seed + attempt) & 0xFFFFFFFF


# ============================================
# FALLBACK
# ============================================

def fallback_level() -> LevelRecord:
    """Minimal hand-verified 3x3 level: one landmark, one turnpike."""
    tiles = [
        {"row": 0, "col": 0, "shape": "landmark", "road_type": "landmark",
         "rotation": 180, "solution_rotation": 180, "rotatable": False,
         "landmark_kind": "home", "comment": "Home"},
        {"row": 1, "col": 0, "shape": "straight", "road_type": "local_road",
         "rotation": 90, "solution_rotation": 0, "rotatable": True},
        {"row": 2, "col": 0, "shape": "corner", "road_type": "local_road",
         "rotation": 180, "solution_rotation": 0, "rotatable": True},
        {"row": 2, "col": 1, "shape": "straight", "road_type": "local_road",
         "rotation": 0, "solution_rotation": 90, "rotatable": True},
        {"row": 2, "col": 2, "shape": "turnpike", "road_type": "turnpike",
         "rotation": 270, "solution_rotation": 270, "rotatable": False,
         "comment": "Turnpike (fixed)"},
    ]
    return LevelRecord(
        name="Fallback",
        grid_size={"rows": 3, "cols": 3},
        tiles=tiles,
        solution_paths=[{
            "landmark_id": "home_1",
            "path": [{"row": r, "col": c} for r, c in [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]],
        }],
    )


# ============================================
# LEVELS
# ============================================

def generate_for_level(level: int) -> LevelResponse:
    """
    Generated level `level`, retrying with consecutive seeds.

    Seeds are deterministic per level, so the same level number always
    yields the same level.
    """
    base_seed = base_seed_for_level(level)
    max_attempts = settings.GENERATION_MAX_ATTEMPTS

    for attempt in range(max_attempts):
        seed = seed_for_attempt(base_seed, attempt)
        config = config_for_level(level, seed)
        try:
            generated = generate_level(config)
        except GenerationError as e:
            logger.warning(
                "[Progression] Level %d attempt %d/%d (seed %d) failed: %s: %s",
                level, attempt + 1, max_attempts, seed, e.kind, e,
            )
            continue

        logger.info("[Progression] Level %d generated on attempt %d (seed %d)", level, attempt + 1, seed)
        return LevelResponse(
            level=level,
            source="generated",
            attempts=attempt + 1,
            data=generated.to_record(name=f"Level {level}"),
        )

    logger.error("[Progression] Level %d: all %d attempts failed, serving fallback level", level, max_attempts)
    return LevelResponse(level=level, source="fallback", attempts=max_attempts, data=fallback_level())


@lru_cache(maxsize=settings.LEVEL_CACHE_SIZE)
def load_level(level: int) -> LevelResponse:
    """Hand-authored level when one exists, generated otherwise (memoised)."""
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")

    if level <= settings.HANDCRAFTED_LEVEL_COUNT:
        record = load_level_from_file(level)
        if record is not None:
            return LevelResponse(level=level, source="handcrafted", attempts=0, data=record)
        logger.warning("[Progression] Level %d has no usable file, generating instead", level)

    return generate_for_level(level)
