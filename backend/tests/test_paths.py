import pytest

from citylines.services.errors import PathTooShort, RouteBlocked
from citylines.services.grid import Grid, LandmarkKind, RoadType, Tile, TileShape
from citylines.services.paths import l_route_cells, synthesize_route


def fixed(grid, row, col, road_type=RoadType.LANDMARK):
    shape = TileShape.LANDMARK if road_type is RoadType.LANDMARK else TileShape.TURNPIKE
    return grid.place(Tile(row, col, shape, road_type, rotatable=False, landmark_kind=(
        LandmarkKind.DINER if road_type is RoadType.LANDMARK else None
    )))


def test_l_route_vertical_first():
    assert l_route_cells((0, 0), (3, 2)) == [(1, 0), (2, 0), (3, 0), (3, 1)]


def test_l_route_horizontal_first():
    assert l_route_cells((0, 0), (3, 2), vertical_first=False) == [(0, 1), (0, 2), (1, 2), (2, 2)]


def test_l_route_straight_line_and_adjacent():
    assert l_route_cells((4, 1), (0, 1)) == [(3, 1), (2, 1), (1, 1)]
    assert l_route_cells((0, 0), (0, 1)) == []


def test_route_lays_local_roads():
    grid = Grid(4, 4)
    landmark = fixed(grid, 0, 0)
    hub = fixed(grid, 3, 2, RoadType.TURNPIKE)

    route = synthesize_route(grid, landmark, hub, min_path_length=2)

    assert route[0] is landmark
    assert route[-1] is hub
    assert [t.pos for t in route[1:-1]] == [(1, 0), (2, 0), (3, 0), (3, 1)]
    for road in route[1:-1]:
        assert road.rotatable
        assert road.road_type is RoadType.LOCAL_ROAD


def test_route_too_short_leaves_grid_untouched():
    grid = Grid(4, 4)
    landmark = fixed(grid, 0, 0)
    hub = fixed(grid, 3, 2, RoadType.TURNPIKE)

    with pytest.raises(PathTooShort):
        synthesize_route(grid, landmark, hub, min_path_length=5)
    assert len(grid) == 2


def test_route_falls_back_to_horizontal_first():
    grid = Grid(4, 4)
    landmark = fixed(grid, 0, 0)
    hub = fixed(grid, 3, 2, RoadType.TURNPIKE)
    fixed(grid, 2, 0)

    route = synthesize_route(grid, landmark, hub, min_path_length=0)
    assert [t.pos for t in route[1:-1]] == [(0, 1), (0, 2), (1, 2), (2, 2)]


def test_route_blocked_both_ways():
    grid = Grid(4, 4)
    landmark = fixed(grid, 0, 0)
    hub = fixed(grid, 3, 2, RoadType.TURNPIKE)
    fixed(grid, 2, 0)
    fixed(grid, 1, 2)

    with pytest.raises(RouteBlocked) as exc_info:
        synthesize_route(grid, landmark, hub, min_path_length=0)
    assert exc_info.value.kind == "route_blocked"


def test_crossing_route_reuses_tile_and_flags_merge():
    grid = Grid(4, 4)
    landmark = fixed(grid, 0, 0)
    hub = fixed(grid, 3, 2, RoadType.TURNPIKE)
    existing = grid.place(Tile(3, 1, TileShape.STRAIGHT, RoadType.LOCAL_ROAD))
    merged = set()

    route = synthesize_route(grid, landmark, hub, min_path_length=2, merged=merged)

    assert route[-2] is existing
    assert merged == {(3, 1)}
    assert len(grid) == 6
