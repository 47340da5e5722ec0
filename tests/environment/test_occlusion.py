from __future__ import annotations

import pytest

from crawlspace.environment.occlusion import GridOcclusion
from crawlspace.environment.room_graph import RoomGraph
from crawlspace.environment.walls import WallSide, open_sides, wall_sides
from tests.helpers import graph_from_links, line_graph, room


def test_walls_follow_missing_links() -> None:
    graph = line_graph(3)
    middle = room(graph, (1, 0))

    assert open_sides(middle) == [WallSide.EAST, WallSide.WEST]
    assert wall_sides(middle) == [WallSide.NORTH, WallSide.SOUTH]
    assert wall_sides(room(graph, (0, 0))) == [
        WallSide.NORTH,
        WallSide.SOUTH,
        WallSide.WEST,
    ]


def test_touching_unlinked_rooms_keep_their_walls() -> None:
    graph = graph_from_links([((0, 0), (1, 0))], extra_rooms=[(0, 1)])

    assert WallSide.NORTH in wall_sides(room(graph, (0, 0)))
    assert WallSide.SOUTH in wall_sides(room(graph, (0, 1)))


def test_raster_covers_layout_bounds() -> None:
    occlusion = GridOcclusion(line_graph(3))

    assert occlusion.tile_size == pytest.approx(1.0)
    assert occlusion.transparent.shape == (30, 10)
    # West wall of the entrance, open doorway between the first two rooms.
    assert not occlusion.transparent[0, 5]
    assert occlusion.transparent[9, 5]
    assert occlusion.transparent[10, 5]
    assert occlusion.transparent[5, 5]


def test_world_to_tile_uses_ground_plane() -> None:
    occlusion = GridOcclusion(line_graph(3))

    assert occlusion.world_to_tile((0.0, 1.0, 0.0)) == (5, 5)
    assert occlusion.world_to_tile((20.0, 50.0, 0.0)) == (25, 5)
    assert occlusion.world_to_tile((-6.0, 1.0, 0.0)) == (-1, 5)


def test_straight_corridor_is_clear() -> None:
    graph = line_graph(3)
    occlusion = GridOcclusion(graph)

    start = graph.world_position(room(graph, (0, 0)))
    end = graph.world_position(room(graph, (2, 0)))
    assert not occlusion.is_blocked(start, end)
    assert not occlusion(end, start)


def test_corner_blocks_diagonal_sight() -> None:
    graph = graph_from_links([((0, 0), (1, 0)), ((1, 0), (1, 1))])
    occlusion = GridOcclusion(graph)

    start = graph.world_position(room(graph, (0, 0)))
    end = graph.world_position(room(graph, (1, 1)))
    assert occlusion.is_blocked(start, end)


def test_wall_between_touching_unlinked_rooms_blocks() -> None:
    graph = graph_from_links(
        [((0, 0), (1, 0)), ((1, 0), (1, 1)), ((1, 1), (0, 1))]
    )
    occlusion = GridOcclusion(graph)

    start = graph.world_position(room(graph, (0, 0)))
    end = graph.world_position(room(graph, (0, 1)))
    assert occlusion.is_blocked(start, end)


def test_points_outside_raster_are_blocked() -> None:
    graph = line_graph(2)
    occlusion = GridOcclusion(graph)

    inside = graph.world_position(room(graph, (0, 0)))
    assert occlusion.is_blocked(inside, (100.0, 1.0, 100.0))


def test_endpoint_tiles_never_occlude() -> None:
    graph = line_graph(2)
    occlusion = GridOcclusion(graph)

    # Standing inside the entrance's west wall tile.
    on_wall = (-4.5, 1.0, 0.0)
    assert occlusion.world_to_tile(on_wall) == (0, 5)
    assert not occlusion.is_blocked(on_wall, (0.0, 1.0, 0.0))


def test_same_tile_is_never_blocked() -> None:
    occlusion = GridOcclusion(line_graph(2))
    assert not occlusion.is_blocked((0.0, 1.0, 0.0), (0.2, 1.0, 0.3))


def test_empty_graph_blocks_everything() -> None:
    occlusion = GridOcclusion(RoomGraph())

    assert occlusion.transparent.size == 0
    assert occlusion.is_blocked((0.0, 0.0, 0.0), (1.0, 0.0, 1.0))


def test_tiles_per_cell_must_leave_floor() -> None:
    with pytest.raises(ValueError):
        GridOcclusion(line_graph(2), tiles_per_cell=2)
