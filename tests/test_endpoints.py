from voxelforge.dungeon.endpoints import (
    farthest_pair_euclidean,
    graph_diameter_endpoints,
    select_start_end,
)
from voxelforge.dungeon.graph import make_edge
from voxelforge.dungeon.rooms import Room


def _rooms(*xs):
    return [Room(i, x, 0, 0, 1, 1, 1) for i, x in enumerate(xs)]


def test_fewer_than_two_rooms():
    assert farthest_pair_euclidean(_rooms(3)) is None
    assert select_start_end(_rooms(3), []) is None
    assert select_start_end([], []) is None
    assert graph_diameter_endpoints(1, []) is None


def test_euclidean_farthest_pair():
    assert farthest_pair_euclidean(_rooms(0, 10, 3, -5)) == (1, 3)


def test_euclidean_first_pair_wins_ties():
    assert farthest_pair_euclidean(_rooms(0, 5, 10, 15, 5)) == (0, 3)
    assert farthest_pair_euclidean(_rooms(0, 4, 4)) == (0, 1)


def test_double_bfs_on_chain():
    edges = [make_edge(0, 1, 1), make_edge(1, 2, 1), make_edge(2, 3, 1)]
    assert graph_diameter_endpoints(4, edges) == (3, 0)


def test_double_bfs_ties_go_to_lowest_id():
    star = [make_edge(0, 1, 1), make_edge(0, 2, 1), make_edge(0, 3, 1)]
    assert graph_diameter_endpoints(4, star) == (1, 2)


def test_graph_strategy_uses_corridor_distance():
    # Room 3 is far in space but one hop away; room 2 is the far end of the corridors.
    rooms = _rooms(0, 1, 2, 100)
    edges = [make_edge(0, 3, 1), make_edge(0, 1, 1), make_edge(1, 2, 1)]
    assert select_start_end(rooms, edges, "graph") == (2, 3)
    assert select_start_end(rooms, edges, "euclidean") == (0, 3)


def test_isolated_room_zero_starts_from_first_connected_room():
    # Room 0's corridor failed while rooms 1-2-3 are still joined. The
    # Euclidean pair would pick room 0, which no corridor reaches.
    rooms = _rooms(100, 7, 2, -50)
    edges = [make_edge(1, 2, 1), make_edge(2, 3, 1)]
    assert graph_diameter_endpoints(4, edges) == (3, 1)
    assert select_start_end(rooms, edges, "graph") == (3, 1)
    assert farthest_pair_euclidean(rooms) == (0, 3)


def test_no_carved_edges_falls_back_to_euclidean():
    rooms = _rooms(0, 7, 2)
    assert graph_diameter_endpoints(3, []) is None
    assert select_start_end(rooms, [], "graph") == (0, 1)
