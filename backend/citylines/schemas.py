"""
City Lines - Pydantic Schemas

All validation schemas in one file. LevelRecord is the one level format
shared by generated and hand-authored levels.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .services.grid import LandmarkKind, RoadType, TileShape


# ============================================
# GENERATION
# ============================================

class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GridSize(BaseModel):
    """Grid dimensions."""
    rows: int = Field(ge=1, le=64)
    cols: int = Field(ge=1, le=64)


class GenerationGridSize(GridSize):
    """Generated grids need an interior for the hub."""
    rows: int = Field(ge=3, le=64)
    cols: int = Field(ge=3, le=64)


class GenerationConfig(BaseModel):
    """Generator input."""
    grid_size: GenerationGridSize
    landmark_count: int = Field(ge=1, le=16)
    difficulty: Difficulty = Difficulty.EASY
    min_path_length: int = Field(default=2, ge=0)
    seed: Optional[int] = Field(default=None, ge=0, le=0xFFFFFFFF)


# ============================================
# LEVEL RECORD
# ============================================

class Position(BaseModel):
    row: int
    col: int


class TileRecord(BaseModel):
    """One tile. `rotation` is the starting (scrambled) rotation."""
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    shape: TileShape
    road_type: RoadType
    rotation: int
    solution_rotation: int
    rotatable: bool
    landmark_kind: Optional[LandmarkKind] = None
    comment: Optional[str] = None


class SolutionPath(BaseModel):
    """Route from one landmark to the turnpike, landmark first."""
    landmark_id: str
    path: List[Position]


class LevelRecord(BaseModel):
    """Level file / wire format."""
    name: Optional[str] = None
    seed: Optional[int] = None
    grid_size: GridSize
    tiles: List[TileRecord]
    solution_paths: List[SolutionPath] = []


class LevelResponse(BaseModel):
    """Level served by the progression."""
    level: int
    source: Literal["handcrafted", "generated", "fallback"]
    attempts: int = 0
    data: LevelRecord


class GenerationErrorResponse(BaseModel):
    detail: str
    kind: str


# ============================================
# RUNTIME VALIDATION
# ============================================

class ValidationReport(BaseModel):
    """Result of one rebuild-and-validate pass."""
    landmarks_connected: List[bool]
    all_tiles_reachable: bool
    is_complete: bool


class RotateRequest(BaseModel):
    """Tile rotation event from the client."""
    row: int
    col: int


class SessionCreateRequest(BaseModel):
    level: int = Field(ge=1)


class SessionResponse(BaseModel):
    session_id: str
    level: int
    data: LevelRecord
    report: ValidationReport


class RotateResponse(BaseModel):
    tile: TileRecord
    report: ValidationReport


class HintResponse(BaseModel):
    """A tile that is not yet in its solved rotation."""
    row: int
    col: int
    solution_rotation: int
