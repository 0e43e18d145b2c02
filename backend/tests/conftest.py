import pytest

from citylines.schemas import LevelRecord
from citylines.services.progression import load_level


# small xorshift seeds start with tiny outputs; spread them over 32 bits
SEEDS = [(i * 2654435761) & 0xFFFFFFFF for i in range(1, 301)]


def tile(row, col, shape, road_type, rotation=0, solution=None, rotatable=True, **extra):
    data = {
        "row": row,
        "col": col,
        "shape": shape,
        "road_type": road_type,
        "rotation": rotation,
        "solution_rotation": rotation if solution is None else solution,
        "rotatable": rotatable,
    }
    data.update(extra)
    return data


def make_record(rows, cols, tiles):
    return LevelRecord(grid_size={"rows": rows, "cols": cols}, tiles=tiles)


@pytest.fixture
def chain_record():
    """3x1: landmark, mis-rotated straight, turnpike. One rotation solves it."""
    return make_record(3, 1, [
        tile(0, 0, "landmark", "landmark", 180, rotatable=False, landmark_kind="diner"),
        tile(1, 0, "straight", "local_road", 90, solution=0),
        tile(2, 0, "turnpike", "turnpike", 0, rotatable=False),
    ])


@pytest.fixture(autouse=True)
def clear_level_cache():
    load_level.cache_clear()
    yield
    load_level.cache_clear()
