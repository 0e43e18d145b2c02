"""
City Lines - Runtime Connectivity Engine

Owns a grid during play. Every rotation rebuilds the directed connection
graph from scratch and re-validates the win condition:

    Rule A: every landmark reaches a turnpike
    Rule B: every occupied tile can reach a turnpike

State machine: idle -> rebuild_graph -> validate -> idle | complete
"""

import logging
from collections import deque
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..schemas import LevelRecord, ValidationReport
from .grid import DIRECTIONS, Grid, Tile, connects, normalize_rotation
from .level_loader import grid_from_record

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
ConnectionGraph = Dict[Cell, Set[Cell]]


class EngineState(str, Enum):
    IDLE = "idle"
    REBUILD_GRAPH = "rebuild_graph"
    VALIDATE = "validate"
    COMPLETE = "complete"


# ============================================
# GRAPH
# ============================================

def build_connection_graph(grid: Grid) -> ConnectionGraph:
    """
    Directed edges tile -> neighbour on visible rotations.

    An edge needs both openings and the neighbour's road type in the
    acting tile's hierarchy row, so edges are not always symmetric.
    """
    graph: ConnectionGraph = {}
    for tile in grid.tiles():
        edges = set()
        for direction in DIRECTIONS:
            other = connects(grid, tile, direction)
            if other is not None:
                edges.add(other.pos)
        graph[tile.pos] = edges
    return graph


def reverse_graph(graph: ConnectionGraph) -> ConnectionGraph:
    reversed_graph: ConnectionGraph = {cell: set() for cell in graph}
    for cell, edges in graph.items():
        for other in edges:
            reversed_graph.setdefault(other, set()).add(cell)
    return reversed_graph


def _bfs(graph: ConnectionGraph, starts: List[Cell]) -> Set[Cell]:
    visited: Set[Cell] = set(starts)
    queue = deque(starts)
    while queue:
        cell = queue.popleft()
        for other in graph.get(cell, ()):
            if other not in visited:
                visited.add(other)
                queue.append(other)
    return visited


def landmark_reaches_turnpike(grid: Grid, graph: ConnectionGraph, landmark: Tile) -> bool:
    """Rule A for one landmark: forward BFS until any turnpike."""
    turnpikes = {t.pos for t in grid.turnpikes()}
    return bool(_bfs(graph, [landmark.pos]) & turnpikes)


def cells_reaching_turnpike(grid: Grid, graph: ConnectionGraph) -> Set[Cell]:
    """Rule B: reverse BFS seeded at every turnpike."""
    return _bfs(reverse_graph(graph), [t.pos for t in grid.turnpikes()])


# ============================================
# ENGINE
# ============================================

class ConnectivityEngine:
    """
    Rebuild-and-validate after every rotation.

    Rotations and rebuilds are one synchronous call, so the engine never
    sees a half-applied rotation.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.state = EngineState.IDLE
        self.graph: ConnectionGraph = {}
        self._reachable: Set[Cell] = set()
        self.report = self.validate()

    @classmethod
    def from_record(cls, record: LevelRecord) -> "ConnectivityEngine":
        return cls(grid_from_record(record))

    @property
    def is_complete(self) -> bool:
        return self.state is EngineState.COMPLETE

    def validate(self) -> ValidationReport:
        """Rebuilds the graph and recomputes the report (idempotent)."""
        was_complete = self.state is EngineState.COMPLETE
        self.state = EngineState.REBUILD_GRAPH
        self.graph = build_connection_graph(self.grid)

        self.state = EngineState.VALIDATE
        landmarks = self.grid.landmarks()
        landmarks_connected = [
            landmark_reaches_turnpike(self.grid, self.graph, landmark) for landmark in landmarks
        ]
        self._reachable = cells_reaching_turnpike(self.grid, self.graph)
        all_tiles_reachable = all(tile.pos in self._reachable for tile in self.grid.tiles())

        is_complete = all(landmarks_connected) and all_tiles_reachable
        self.report = ValidationReport(
            landmarks_connected=landmarks_connected,
            all_tiles_reachable=all_tiles_reachable,
            is_complete=is_complete,
        )

        if is_complete:
            if not was_complete:
                logger.info("[Connectivity] Level complete")
            self.state = EngineState.COMPLETE
        else:
            self.state = EngineState.IDLE
        return self.report

    def _mutable_tile(self, row: int, col: int) -> Optional[Tile]:
        """Tile to rotate, or None if the rotation must be refused."""
        tile = self.grid.get(row, col)
        if tile is None:
            raise ValueError(f"No tile at ({row},{col})")
        if self.is_complete:
            logger.warning("[Connectivity] Level already complete, rotation at (%d,%d) refused", row, col)
            return None
        if not tile.rotatable:
            logger.warning("[Connectivity] Tile at (%d,%d) is fixed, rotation refused", row, col)
            return None
        return tile

    def rotate(self, row: int, col: int) -> ValidationReport:
        """Turns a tile 90 degrees clockwise, then rebuilds and validates."""
        tile = self._mutable_tile(row, col)
        if tile is None:
            return self.report
        tile.rotate()
        return self.validate()

    def set_rotation(self, row: int, col: int, degrees: int) -> ValidationReport:
        rotation = normalize_rotation(degrees)
        tile = self._mutable_tile(row, col)
        if tile is None:
            return self.report
        tile.rotation = rotation
        return self.validate()

    def disconnected_tiles(self) -> List[Tile]:
        """Tiles that cannot reach any turnpike (rule B failures)."""
        return [tile for tile in self.grid.tiles() if tile.pos not in self._reachable]

    def hint(self) -> Optional[Tile]:
        """First rotatable tile whose openings differ from its solved openings."""
        for tile in self.grid.tiles():
            if tile.rotatable and tile.openings() != tile.solution_openings():
                return tile
        return None
