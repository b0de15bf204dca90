import pytest

from voxelforge.dungeon.grid import NEIGHBORS_6, VoxelGrid, cell_to_world, world_to_cell


def test_fresh_grid_is_empty():
    g = VoxelGrid((3, 2, 4))
    assert (g.width, g.height, g.depth) == (3, 2, 4)
    assert list(g.occupied_cells()) == []
    assert len(list(g.cells())) == 24


def test_bounds():
    g = VoxelGrid((3, 2, 4))
    assert g.in_bounds((0, 0, 0))
    assert g.in_bounds((2, 1, 3))
    for cell in [(-1, 0, 0), (3, 0, 0), (0, 2, 0), (0, 0, 4), (0, -1, 0)]:
        assert not g.in_bounds(cell)


def test_neighbors_clip_at_edges():
    g = VoxelGrid((3, 3, 3))
    assert len(list(g.neighbors6((1, 1, 1)))) == 6
    corner = list(g.neighbors6((0, 0, 0)))
    assert corner == [(1, 0, 0), (0, 1, 0), (0, 0, 1)]


def test_neighbor_order_fixed():
    assert NEIGHBORS_6[0] == (1, 0, 0)
    assert NEIGHBORS_6[-1] == (0, 0, -1)


def test_room_and_corridor_marking():
    g = VoxelGrid((4, 4, 4))
    g.mark_room((1, 1, 1))
    assert g.room_at((1, 1, 1)) and g.occupied_at((1, 1, 1))
    # Room cells are never re-marked as corridor.
    assert g.mark_corridor((1, 1, 1)) is False
    assert g.mark_corridor((2, 1, 1)) is True
    assert g.mark_corridor((2, 1, 1)) is False
    assert list(g.corridor_cells()) == [(2, 1, 1)]
    assert set(g.occupied_cells()) == {(1, 1, 1), (2, 1, 1)}


def test_clear_zeroes_everything():
    g = VoxelGrid((3, 3, 3))
    g.mark_room((0, 0, 0))
    g.mark_corridor((1, 1, 1))
    g.clear()
    assert list(g.occupied_cells()) == []
    assert not g.room_at((0, 0, 0))


def test_cell_to_world_scales_and_offsets():
    assert cell_to_world((2, 0, 5), 2.0) == (4.0, 0.0, 10.0)
    assert cell_to_world((1, 1, 1), 0.5, origin=(10.0, -1.0, 3.0)) == (10.5, -0.5, 3.5)


@pytest.mark.parametrize("cell", [(0, 0, 0), (3, 7, 1), (12, 2, 9)])
def test_world_to_cell_inverts(cell):
    origin = (5.0, -2.0, 1.5)
    assert world_to_cell(cell_to_world(cell, 1.5, origin), 1.5, origin) == cell


def test_world_to_cell_rounds_to_nearest():
    assert world_to_cell((2.4, 0.6, -0.4), 1.0) == (2, 1, 0)
