"""
City Lines - Grid Model

Directions, road hierarchy, tile shapes, tiles and the arena-indexed grid.
Shared by the generator and the runtime connectivity engine.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple


# ============================================
# DIRECTIONS
# ============================================

class Direction(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> Tuple[int, int]:
        """(drow, dcol) of one step in this direction."""
        return DIRECTION_DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return self.rotated(2)

    def rotated(self, quarter_turns: int) -> "Direction":
        """Rotate clockwise by quarter_turns * 90 degrees."""
        idx = DIRECTIONS.index(self)
        return DIRECTIONS[(idx + quarter_turns) % 4]


# Clockwise order; rotating a tile 90 degrees moves each opening one step.
DIRECTIONS: List[Direction] = [Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST]

DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.SOUTH: (1, 0),
    Direction.WEST: (0, -1),
}


def direction_between(from_pos: Tuple[int, int], to_pos: Tuple[int, int]) -> Optional[Direction]:
    """Direction of an orthogonally adjacent cell, None if not adjacent."""
    delta = (to_pos[0] - from_pos[0], to_pos[1] - from_pos[1])
    for direction, d in DIRECTION_DELTAS.items():
        if d == delta:
            return direction
    return None


# ============================================
# ROTATIONS
# ============================================

ROTATIONS: Tuple[int, ...] = (0, 90, 180, 270)


def normalize_rotation(value: int) -> int:
    """Validates a rotation in degrees and folds it into 0..270."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Rotation must be an integer number of degrees, got {value!r}")
    if value % 90 != 0:
        raise ValueError(f"Rotation must be a multiple of 90, got {value}")
    return value % 360


def rotate_openings(openings: FrozenSet[Direction], rotation: int) -> FrozenSet[Direction]:
    steps = normalize_rotation(rotation) // 90
    return frozenset(d.rotated(steps) for d in openings)


# ============================================
# ROAD HIERARCHY
# ============================================

class RoadType(str, Enum):
    HOUSE = "house"
    LOCAL_ROAD = "local_road"
    ARTERIAL_ROAD = "arterial_road"
    HIGHWAY = "highway"
    TURNPIKE = "turnpike"
    LANDMARK = "landmark"


# Directed: a tile of the key type may connect to neighbours of these types.
CONNECTION_RULES: Dict[RoadType, FrozenSet[RoadType]] = {
    RoadType.HOUSE: frozenset({RoadType.LOCAL_ROAD}),
    RoadType.LOCAL_ROAD: frozenset({
        RoadType.LOCAL_ROAD,
        RoadType.HOUSE,
        RoadType.ARTERIAL_ROAD,
        RoadType.LANDMARK,
        RoadType.TURNPIKE,
    }),
    RoadType.ARTERIAL_ROAD: frozenset({
        RoadType.LOCAL_ROAD,
        RoadType.ARTERIAL_ROAD,
        RoadType.HIGHWAY,
    }),
    RoadType.HIGHWAY: frozenset({
        RoadType.ARTERIAL_ROAD,
        RoadType.HIGHWAY,
        RoadType.TURNPIKE,
    }),
    RoadType.TURNPIKE: frozenset({
        RoadType.HIGHWAY,
        RoadType.LANDMARK,
        RoadType.LOCAL_ROAD,
    }),
    RoadType.LANDMARK: frozenset({RoadType.TURNPIKE, RoadType.LOCAL_ROAD}),
}


def types_compatible(acting: RoadType, neighbor: RoadType) -> bool:
    """Hierarchy lookup from the acting tile's side (not symmetric)."""
    return neighbor in CONNECTION_RULES[acting]


# ============================================
# TILE SHAPES
# ============================================

class TileShape(str, Enum):
    STRAIGHT = "straight"
    CORNER = "corner"
    T_JUNCTION = "t_junction"
    CROSSROADS = "crossroads"
    TURNPIKE = "turnpike"
    LANDMARK = "landmark"


# Openings at rotation 0. North = top of the tile.
BASE_OPENINGS: Dict[TileShape, FrozenSet[Direction]] = {
    TileShape.STRAIGHT: frozenset({Direction.NORTH, Direction.SOUTH}),
    TileShape.CORNER: frozenset({Direction.NORTH, Direction.EAST}),
    TileShape.T_JUNCTION: frozenset({Direction.NORTH, Direction.EAST, Direction.WEST}),
    TileShape.CROSSROADS: frozenset(DIRECTIONS),
    TileShape.TURNPIKE: frozenset({Direction.NORTH}),
    TileShape.LANDMARK: frozenset({Direction.NORTH}),
}


class LandmarkKind(str, Enum):
    HOME = "home"
    DINER = "diner"
    GAS_STATION = "gas_station"
    MARKET = "market"


# ============================================
# TILE
# ============================================

class Tile:
    """One cell's road piece. `rotation` is what the player sees."""

    def __init__(
        self,
        row: int,
        col: int,
        shape: TileShape,
        road_type: RoadType,
        rotatable: bool = True,
        rotation: int = 0,
        solution_rotation: Optional[int] = None,
        landmark_kind: Optional[LandmarkKind] = None,
        comment: Optional[str] = None,
    ):
        self.row = row
        self.col = col
        self.shape = TileShape(shape)
        self.road_type = RoadType(road_type)
        self.rotatable = bool(rotatable)
        self.rotation = normalize_rotation(rotation)
        self.solution_rotation = (
            self.rotation if solution_rotation is None else normalize_rotation(solution_rotation)
        )
        self.landmark_kind = LandmarkKind(landmark_kind) if landmark_kind is not None else None
        self.comment = comment

        if not self.rotatable and self.rotation != self.solution_rotation:
            raise ValueError(
                f"Fixed tile at ({row},{col}) has rotation {self.rotation} "
                f"but solution rotation {self.solution_rotation}"
            )

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def is_landmark(self) -> bool:
        return self.road_type is RoadType.LANDMARK

    @property
    def is_turnpike(self) -> bool:
        return self.road_type is RoadType.TURNPIKE

    def openings(self) -> FrozenSet[Direction]:
        """Openings under the current (player) rotation."""
        return rotate_openings(BASE_OPENINGS[self.shape], self.rotation)

    def solution_openings(self) -> FrozenSet[Direction]:
        """Openings under the solved rotation."""
        return rotate_openings(BASE_OPENINGS[self.shape], self.solution_rotation)

    def openings_for(self, use_solution: bool) -> FrozenSet[Direction]:
        return self.solution_openings() if use_solution else self.openings()

    def rotate(self) -> int:
        """Turns the tile 90 degrees clockwise."""
        self.rotation = (self.rotation + 90) % 360
        return self.rotation

    def set_solution(self, rotation: int) -> None:
        """Generator-side: fixes both solved and visible rotation."""
        rotation = normalize_rotation(rotation)
        self.solution_rotation = rotation
        self.rotation = rotation

    def __repr__(self) -> str:
        return (
            f"Tile(({self.row},{self.col}) {self.shape.value}/{self.road_type.value} "
            f"rot={self.rotation} sol={self.solution_rotation})"
        )


# ============================================
# GRID
# ============================================

class Grid:
    """Fixed-size arena of optional tiles addressed by (row, col)."""

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._cells: List[Optional[Tile]] = [None] * (rows * cols)

    def _idx(self, row: int, col: int) -> int:
        return row * self.cols + col

    def is_valid(self, row: int, col: int) -> bool:
        """Checks that the cell is inside the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Optional[Tile]:
        if not self.is_valid(row, col):
            return None
        return self._cells[self._idx(row, col)]

    def is_occupied(self, row: int, col: int) -> bool:
        return self.get(row, col) is not None

    def place(self, tile: Tile) -> Tile:
        if not self.is_valid(tile.row, tile.col):
            raise ValueError(f"Tile at ({tile.row},{tile.col}) is outside the {self.rows}x{self.cols} grid")
        if self.is_occupied(tile.row, tile.col):
            raise ValueError(f"Cell ({tile.row},{tile.col}) is already occupied")
        self._cells[self._idx(tile.row, tile.col)] = tile
        return tile

    def neighbor(self, row: int, col: int, direction: Direction) -> Optional[Tile]:
        dr, dc = direction.delta
        return self.get(row + dr, col + dc)

    def occupied_directions(self, row: int, col: int) -> List[Direction]:
        """Directions (clockwise from north) whose neighbour cell holds a tile."""
        return [d for d in DIRECTIONS if self.neighbor(row, col, d) is not None]

    def tiles(self) -> Iterator[Tile]:
        """All tiles, row-major."""
        for tile in self._cells:
            if tile is not None:
                yield tile

    def landmarks(self) -> List[Tile]:
        return [t for t in self.tiles() if t.is_landmark]

    def turnpikes(self) -> List[Tile]:
        return [t for t in self.tiles() if t.is_turnpike]

    def __len__(self) -> int:
        return sum(1 for _ in self.tiles())


def connects(grid: Grid, tile: Tile, direction: Direction, use_solution: bool = False) -> Optional[Tile]:
    """
    Returns the neighbour `tile` connects to through `direction`, or None.

    An edge needs the tile's opening, the neighbour's reciprocal opening and
    the neighbour's road type in the tile's hierarchy row.
    """
    if direction not in tile.openings_for(use_solution):
        return None
    other = grid.neighbor(tile.row, tile.col, direction)
    if other is None:
        return None
    if direction.opposite not in other.openings_for(use_solution):
        return None
    if not types_compatible(tile.road_type, other.road_type):
        return None
    return other


def render_ascii(grid: Grid, use_solution: bool = False) -> str:
    """Debug view: one glyph per cell."""
    glyphs = {
        frozenset(): "·",
        frozenset({Direction.NORTH}): "╵",
        frozenset({Direction.EAST}): "╶",
        frozenset({Direction.SOUTH}): "╷",
        frozenset({Direction.WEST}): "╴",
        frozenset({Direction.NORTH, Direction.SOUTH}): "│",
        frozenset({Direction.EAST, Direction.WEST}): "─",
        frozenset({Direction.NORTH, Direction.EAST}): "└",
        frozenset({Direction.EAST, Direction.SOUTH}): "┌",
        frozenset({Direction.SOUTH, Direction.WEST}): "┐",
        frozenset({Direction.WEST, Direction.NORTH}): "┘",
        frozenset({Direction.NORTH, Direction.EAST, Direction.WEST}): "┴",
        frozenset({Direction.NORTH, Direction.EAST, Direction.SOUTH}): "├",
        frozenset({Direction.EAST, Direction.SOUTH, Direction.WEST}): "┬",
        frozenset({Direction.SOUTH, Direction.WEST, Direction.NORTH}): "┤",
        frozenset(DIRECTIONS): "┼",
    }
    lines = []
    for row in range(grid.rows):
        chars = []
        for col in range(grid.cols):
            tile = grid.get(row, col)
            if tile is None:
                chars.append(" . ")
            elif tile.is_landmark:
                chars.append(f"L{glyphs[tile.openings_for(use_solution)]} ")
            elif tile.is_turnpike:
                chars.append(f"T{glyphs[tile.openings_for(use_solution)]} ")
            else:
                chars.append(f" {glyphs[tile.openings_for(use_solution)]} ")
        lines.append("".join(chars))
    return "\n".join(lines)
