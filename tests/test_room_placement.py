import random

from voxelforge.dungeon.config import VoxelDungeonConfig
from voxelforge.dungeon.grid import VoxelGrid
from voxelforge.dungeon.rooms import Room, place_rooms


def _place(seed=5, **kw):
    cfg = VoxelDungeonConfig(**kw).normalized()
    grid = VoxelGrid(cfg.size)
    return grid, place_rooms(grid, cfg, random.Random(seed))


def test_room_geometry():
    r = Room(0, 2, 1, 3, w=4, h=2, d=3)
    assert r.max_corner == (6, 3, 6)
    assert r.center == (4, 2, 4)
    assert r.volume == 24
    assert len(list(r.cells())) == 24
    assert r.contains((5, 2, 5)) and not r.contains((6, 2, 5))
    assert r.on_surface((2, 2, 4))
    # 4x2x3 box: every cell lies on some face
    assert len(list(r.perimeter_cells())) == 24


def test_interior_cells_not_on_surface():
    r = Room(0, 0, 0, 0, w=3, h=3, d=3)
    assert not r.on_surface((1, 1, 1))
    assert len(list(r.perimeter_cells())) == 26


def test_overlap_with_gap():
    a = Room(0, 0, 0, 0, w=3, h=1, d=3)
    touching = Room(1, 3, 0, 0, w=3, h=1, d=3)
    spaced = Room(2, 4, 0, 0, w=3, h=1, d=3)
    assert not a.overlaps(touching)
    assert a.overlaps(touching, gap=1)
    assert not a.overlaps(spaced, gap=1)
    assert spaced.overlaps(a, gap=2)


def test_rooms_in_bounds_and_marked():
    grid, res = _place(size_x=30, size_y=8, size_z=30, room_count=8)
    assert res.rooms
    for r in res.rooms:
        for c in r.cells():
            assert grid.in_bounds(c)
            assert grid.room_at(c) and grid.occupied_at(c)
    marked = sum(1 for c in grid.cells() if grid.room_at(c))
    assert marked == sum(r.volume for r in res.rooms)


def test_ids_dense_and_sizes_in_range():
    grid, res = _place(seed=9, size_x=40, size_y=10, size_z=40, room_count=10,
                       room_size_range_xz=(3, 6), min_room_y=2, max_room_y=3)
    assert [r.id for r in res.rooms] == list(range(len(res.rooms)))
    for r in res.rooms:
        assert 3 <= r.w <= 6 and 3 <= r.d <= 6
        assert 2 <= r.h <= 3


def test_no_overlap_including_gap():
    for seed in range(5):
        _grid, res = _place(seed=seed, size_x=30, size_y=8, size_z=30, room_count=12, room_gap=2)
        rooms = res.rooms
        for i, a in enumerate(rooms):
            for b in rooms[i + 1:]:
                assert not a.overlaps(b)
                assert not a.overlaps(b, 2)
                assert not b.overlaps(a, 2)


def test_gap_kept_from_grid_edge():
    _grid, res = _place(seed=3, size_x=20, size_y=8, size_z=20, room_count=6, room_gap=2)
    for r in res.rooms:
        assert r.x >= 2 and r.z >= 2 and r.y >= 2
        mx, my, mz = r.max_corner
        assert mx <= 18 and my <= 6 and mz <= 18


def test_stops_when_target_reached():
    _grid, res = _place(size_x=40, size_y=6, size_z=40, room_count=2, max_placement_tries=1000)
    assert len(res.rooms) == 2
    assert res.attempts < 1000


def test_footprint_too_large_places_nothing():
    _grid, res = _place(size_x=5, size_y=5, size_z=5, room_size_range_xz=(6, 8))
    assert res.rooms == []
    assert res.attempts == 0


def test_shortfall_is_not_an_error():
    _grid, res = _place(size_x=10, size_y=5, size_z=10, room_count=2,
                        room_size_range_xz=(3, 3), min_room_y=1, max_room_y=1,
                        room_gap=2, max_placement_tries=150)
    assert len(res.rooms) == 1
    assert res.attempts == 150
    assert res.target == 2


def test_same_seed_same_rooms():
    _g1, a = _place(seed=11, room_count=6)
    _g2, b = _place(seed=11, room_count=6)
    assert [(r.origin, r.extents) for r in a.rooms] == [(r.origin, r.extents) for r in b.rooms]
