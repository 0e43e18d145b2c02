import pytest

from conftest import make_record, tile

from citylines.services.errors import DanglingOpening, UnreachableLandmark
from citylines.services.grid import Direction, Grid, RoadType, Tile, TileShape
from citylines.services.level_loader import grid_from_record
from citylines.services.progression import fallback_level
from citylines.services.structural import (
    assert_no_dangling,
    assert_solvable,
    can_reach_hub,
    find_dangling_openings,
    validate_structure,
)


def test_fallback_level_is_structurally_valid():
    grid = grid_from_record(fallback_level())
    assert find_dangling_openings(grid) == []
    validate_structure(grid)


def test_checks_use_solution_not_visible_rotation():
    grid = grid_from_record(fallback_level())
    for t in grid.tiles():
        if t.rotatable:
            t.rotation = (t.solution_rotation + 90) % 360
    validate_structure(grid)


def test_opening_into_empty_cell_is_dangling():
    grid = Grid(2, 2)
    lone = grid.place(Tile(0, 0, TileShape.CORNER, RoadType.LOCAL_ROAD, rotation=90))

    defects = find_dangling_openings(grid)

    assert {(t.pos, d) for t, d in defects} == {((0, 0), Direction.EAST), ((0, 0), Direction.SOUTH)}
    with pytest.raises(DanglingOpening) as exc_info:
        assert_no_dangling(grid)
    assert exc_info.value.kind == "dangling_opening"
    assert all(t is lone for t, _ in exc_info.value.defects)


def test_opening_off_grid_and_non_reciprocal_are_dangling():
    grid = Grid(1, 2)
    grid.place(Tile(0, 0, TileShape.STRAIGHT, RoadType.LOCAL_ROAD, rotation=0))
    grid.place(Tile(0, 1, TileShape.LANDMARK, RoadType.LANDMARK, rotatable=False, rotation=270))

    defects = {(t.pos, d) for t, d in find_dangling_openings(grid)}

    assert ((0, 0), Direction.NORTH) in defects
    assert ((0, 0), Direction.SOUTH) in defects
    assert ((0, 1), Direction.WEST) in defects


def test_hierarchy_mismatch_is_unreachable():
    record = make_record(3, 1, [
        tile(0, 0, "landmark", "landmark", 180, rotatable=False),
        tile(1, 0, "straight", "arterial_road", 0),
        tile(2, 0, "turnpike", "turnpike", 0, rotatable=False),
    ])
    grid = grid_from_record(record)

    assert find_dangling_openings(grid) == []
    assert not can_reach_hub(grid, grid.get(0, 0))
    with pytest.raises(UnreachableLandmark) as exc_info:
        assert_solvable(grid)
    assert exc_info.value.landmark.pos == (0, 0)


def test_local_chain_reaches_hub(chain_record):
    grid = grid_from_record(chain_record)
    assert can_reach_hub(grid, grid.get(0, 0))
    validate_structure(grid)
