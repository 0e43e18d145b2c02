"""
City Lines - Level Records & Loader

Converts between LevelRecord (the JSON level format) and the Grid model,
and loads hand-authored level files. Hand-edited files are read leniently.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config import settings
from ..schemas import LevelRecord, Position, SolutionPath, TileRecord
from .grid import Grid, Tile

logger = logging.getLogger(__name__)

# Folder with level files (relative to this file)
DEFAULT_LEVELS_DIR = Path(__file__).parent.parent / "levels"

NAME_ALIASES = {
    "tjunction": "t_junction",
    "t": "t_junction",
    "cross": "crossroads",
    "crossroad": "crossroads",
    "local": "local_road",
    "road": "local_road",
    "arterial": "arterial_road",
    "gas": "gas_station",
}


def get_levels_dir() -> Path:
    if settings.LEVELS_DIR:
        return Path(settings.LEVELS_DIR)
    return DEFAULT_LEVELS_DIR


# ============================================
# NORMALIZERS
# ============================================

def _normalize_name(value: Any) -> Any:
    """'T-Junction', 'LOCAL_ROAD', 'LocalRoad' -> 't_junction', 'local_road', 'local_road'."""
    if not isinstance(value, str):
        return value
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", value.strip())
    name = re.sub(r"[\s\-]+", "_", name).lower()
    return NAME_ALIASES.get(name.replace("_", ""), NAME_ALIASES.get(name, name))


def _normalize_rotation(value: Any) -> Any:
    if isinstance(value, str):
        v = value.strip().rstrip("°")
        try:
            return int(v)
        except ValueError:
            raise ValueError(f"Rotation must be a number of degrees, got {value!r}")
    return value


def _normalize_rotatable(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "on"}:
            return True
        if v in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"rotatable must be a boolean, got {value!r}")


def normalize_tile(raw: Dict[str, Any]) -> Dict[str, Any]:
    """One hand-written tile dict -> TileRecord-shaped dict."""
    tile = dict(raw)
    for key in ("shape", "road_type", "landmark_kind"):
        if key in tile and tile[key] is not None:
            tile[key] = _normalize_name(tile[key])

    rotatable = _normalize_rotatable(tile.get("rotatable", True))
    tile["rotatable"] = rotatable
    tile["rotation"] = _normalize_rotation(tile.get("rotation", 0))

    if tile.get("solution_rotation") is None:
        if rotatable:
            raise ValueError(
                f"Rotatable tile at ({tile.get('row')},{tile.get('col')}) has no solution_rotation"
            )
        tile["solution_rotation"] = tile["rotation"]
    else:
        tile["solution_rotation"] = _normalize_rotation(tile["solution_rotation"])
    return tile


def normalize_record(raw: Dict[str, Any]) -> LevelRecord:
    """Raw level JSON -> validated LevelRecord (raises ValueError)."""
    if not isinstance(raw, dict):
        raise ValueError("Level must be a JSON object")

    raw_tiles = raw.get("tiles", [])
    if not isinstance(raw_tiles, list):
        raise ValueError("'tiles' must be a list")

    data = dict(raw)
    data["tiles"] = [normalize_tile(t) for t in raw_tiles]
    record = LevelRecord.model_validate(data)

    # fail now rather than when an engine is built from it
    grid_from_record(record)
    return record


# ============================================
# RECORD <-> GRID
# ============================================

def tile_from_record(record: TileRecord) -> Tile:
    return Tile(
        record.row,
        record.col,
        record.shape,
        record.road_type,
        rotatable=record.rotatable,
        rotation=record.rotation,
        solution_rotation=record.solution_rotation,
        landmark_kind=record.landmark_kind,
        comment=record.comment,
    )


def tile_to_record(tile: Tile) -> TileRecord:
    return TileRecord(
        row=tile.row,
        col=tile.col,
        shape=tile.shape,
        road_type=tile.road_type,
        rotation=tile.rotation,
        solution_rotation=tile.solution_rotation,
        rotatable=tile.rotatable,
        landmark_kind=tile.landmark_kind,
        comment=tile.comment,
    )


def grid_from_record(record: LevelRecord) -> Grid:
    """
    Builds a fresh Grid from a record.

    Raises ValueError for out-of-bounds tiles, duplicate cells, rotations
    that are not multiples of 90 and fixed tiles that are not solved.
    """
    grid = Grid(record.grid_size.rows, record.grid_size.cols)
    for tile_record in record.tiles:
        grid.place(tile_from_record(tile_record))
    return grid


def record_from_grid(
    grid: Grid,
    name: Optional[str] = None,
    seed: Optional[int] = None,
    solution_paths: Optional[List[Tuple[str, List[Tuple[int, int]]]]] = None,
) -> LevelRecord:
    return LevelRecord(
        name=name,
        seed=seed,
        grid_size={"rows": grid.rows, "cols": grid.cols},
        tiles=[tile_to_record(tile) for tile in grid.tiles()],
        solution_paths=[
            SolutionPath(
                landmark_id=landmark_id,
                path=[Position(row=row, col=col) for row, col in path],
            )
            for landmark_id, path in (solution_paths or [])
        ],
    )


# ============================================
# FILES
# ============================================

def find_level_file(level_num: int, levels_dir: Optional[Path] = None) -> Optional[Path]:
    levels_dir = levels_dir or get_levels_dir()
    for name in (f"level_{level_num}.json", f"{level_num}.json"):
        path = levels_dir / name
        if path.exists():
            return path
    return None


def load_level_from_file(level_num: int, levels_dir: Optional[Path] = None) -> Optional[LevelRecord]:
    """Hand-authored level, or None if the file is missing or malformed."""
    file_path = find_level_file(level_num, levels_dir)
    if file_path is None:
        logger.warning("[LevelLoader] Level file not found for level %d", level_num)
        return None

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
        record = normalize_record(raw_data)
    except (OSError, ValueError) as e:
        logger.warning("[LevelLoader] Error parsing level file %s: %s", file_path, e)
        return None

    if record.name is None:
        record.name = f"Level {level_num}"

    logger.info(
        "[LevelLoader] Level %d: %dx%d, %d tiles",
        level_num, record.grid_size.rows, record.grid_size.cols, len(record.tiles),
    )
    return record
