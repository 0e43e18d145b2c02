"""
City Lines - Scrambler

Randomizes the visible rotation of every rotatable tile.
solution_rotation is left alone so it stays the ground truth.
"""

from .grid import ROTATIONS, Grid
from .rng import XorShiftRandom


def scramble_rotations(grid: Grid, rng: XorShiftRandom) -> int:
    """Returns how many tiles ended up away from their solved rotation."""
    changed = 0
    for tile in grid.tiles():
        if not tile.rotatable:
            continue
        tile.rotation = rng.choice(ROTATIONS)
        if tile.rotation != tile.solution_rotation:
            changed += 1
    return changed
