"""
City Lines - Generation Errors

Raised synchronously by the generator. The generator never retries;
callers (level progression, API) catch GenerationError.
"""

from typing import List, Tuple

from .grid import Direction, Tile


class GenerationError(Exception):
    """Base for every reason a generation attempt can fail."""

    kind = "generation_error"


class PlacementExhausted(GenerationError):
    """No cell satisfies the spacing rules for a landmark."""

    kind = "placement_exhausted"


class PathTooShort(GenerationError):
    """Route has fewer intermediate tiles than min_path_length."""

    kind = "path_too_short"


class RouteBlocked(GenerationError):
    """Both L-shaped routes run through a fixed tile."""

    kind = "route_blocked"


class DanglingOpening(GenerationError):
    kind = "dangling_opening"

    def __init__(self, defects: List[Tuple[Tile, Direction]]):
        self.defects = defects
        details = ", ".join(
            f"({tile.row},{tile.col}) {tile.shape.value} -> {direction.value}"
            for tile, direction in defects
        )
        super().__init__(f"{len(defects)} dangling opening(s): {details}")


class UnreachableLandmark(GenerationError):
    kind = "unreachable_landmark"

    def __init__(self, landmark: Tile):
        self.landmark = landmark
        super().__init__(
            f"Landmark at ({landmark.row},{landmark.col}) cannot reach the turnpike"
        )
