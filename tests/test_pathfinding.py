import pytest

from voxelforge.dungeon.grid import VoxelGrid
from voxelforge.dungeon.noise import NoiseField
from voxelforge.dungeon.pathfinding import astar_path, bfs_path, manhattan
from tests.dungeon_test_utils import is_connected_path


def _wall(grid, x, door=None):
    """Room cells filling the plane at x, optionally leaving one as a door."""
    for y in range(grid.height):
        for z in range(grid.depth):
            grid.mark_room((x, y, z))
    return {door} if door else set()


def _longest_vertical_run(path):
    best = run = 0
    last = None
    for p, q in zip(path, path[1:]):
        step = tuple(b - a for a, b in zip(p, q))
        if step[1] != 0:
            run = run + 1 if step == last else 1
            best = max(best, run)
        else:
            run = 0
        last = step
    return best


def test_manhattan():
    assert manhattan((0, 0, 0), (2, -3, 4)) == 9


def test_bfs_straight_line():
    g = VoxelGrid((5, 1, 1))
    res = bfs_path(g, (0, 0, 0), (4, 0, 0), set())
    assert res.path == [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0), (4, 0, 0)]


def test_bfs_same_cell():
    g = VoxelGrid((2, 2, 2))
    assert bfs_path(g, (1, 1, 1), (1, 1, 1), set()).path == [(1, 1, 1)]


def test_bfs_passes_only_through_doors():
    g = VoxelGrid((5, 3, 3))
    doors = _wall(g, 2, door=(2, 2, 2))
    res = bfs_path(g, (0, 0, 0), (4, 0, 0), doors)
    assert res.path is not None
    assert (2, 2, 2) in res.path
    assert is_connected_path(res.path)
    assert len(res.path) - 1 == 4 + 2 * 2 + 2 * 2
    for c in res.path:
        assert not g.room_at(c) or c in doors


def test_bfs_blocked_returns_none():
    g = VoxelGrid((5, 3, 3))
    _wall(g, 2)
    res = bfs_path(g, (0, 0, 0), (4, 0, 0), set())
    assert res.path is None
    assert res.expansions == 18  # every cell left of the wall


def test_astar_shortest_without_noise():
    g = VoxelGrid((6, 4, 6))
    res = astar_path(g, (0, 0, 0), (5, 3, 5), max_slope_run=0)
    assert res.path[0] == (0, 0, 0) and res.path[-1] == (5, 3, 5)
    assert len(res.path) == manhattan((0, 0, 0), (5, 3, 5)) + 1
    assert is_connected_path(res.path)


def test_astar_room_endpoints_allowed_other_rooms_blocked():
    g = VoxelGrid((5, 1, 3))
    for z in range(3):
        g.mark_room((2, 0, z))
    g.mark_room((0, 0, 1))
    g.mark_room((4, 0, 1))
    # The wall at x=2 spans the whole grid: no route even though endpoints are rooms.
    assert astar_path(g, (0, 0, 1), (4, 0, 1)).path is None
    g2 = VoxelGrid((5, 1, 3))
    g2.mark_room((2, 0, 1))
    g2.mark_room((0, 0, 1))
    g2.mark_room((4, 0, 1))
    path = astar_path(g2, (0, 0, 1), (4, 0, 1)).path
    assert path is not None and (2, 0, 1) not in path
    assert len(path) == 7


def test_astar_slope_limit_forces_flat_steps():
    g = VoxelGrid((1, 5, 2))
    limited = astar_path(g, (0, 0, 0), (0, 4, 0), max_slope_run=2).path
    assert limited is not None
    assert _longest_vertical_run(limited) <= 2
    assert len(limited) == 7
    free = astar_path(g, (0, 0, 0), (0, 4, 0), max_slope_run=0).path
    assert len(free) == 5
    assert _longest_vertical_run(free) == 4


def test_astar_slope_limit_can_make_goal_unreachable():
    g = VoxelGrid((1, 5, 1))
    assert astar_path(g, (0, 0, 0), (0, 4, 0), max_slope_run=2).path is None


def test_astar_expansion_cap():
    g = VoxelGrid((10, 3, 10))
    res = astar_path(g, (0, 0, 0), (9, 2, 9), max_expansions=3)
    assert res.path is None
    assert res.expansions == 3


def test_astar_noise_is_deterministic_and_valid():
    g = VoxelGrid((16, 4, 16))
    noise = NoiseField(seed=123, scale=0.2)
    kwargs = dict(noise=noise, noise_weight=2.0, meander_strength=1.0, max_slope_run=2)
    a = astar_path(g, (0, 0, 0), (15, 3, 15), **kwargs).path
    b = astar_path(g, (0, 0, 0), (15, 3, 15), **kwargs).path
    assert a == b
    assert is_connected_path(a)
    assert _longest_vertical_run(a) <= 2
    assert len(a) >= manhattan((0, 0, 0), (15, 3, 15)) + 1


@pytest.mark.parametrize("search", ["bfs", "astar"])
def test_paths_stay_in_bounds(search):
    g = VoxelGrid((4, 2, 4))
    if search == "bfs":
        path = bfs_path(g, (0, 0, 0), (3, 1, 3), set()).path
    else:
        path = astar_path(g, (0, 0, 0), (3, 1, 3)).path
    assert all(g.in_bounds(c) for c in path)


def test_astar_noise_changes_route():
    g = VoxelGrid((30, 4, 30))
    start, goal = (0, 0, 0), (29, 3, 29)
    plain = astar_path(g, start, goal, max_slope_run=2).path
    routes = [
        astar_path(
            g, start, goal, noise=NoiseField(seed=s, scale=0.15), noise_weight=3.0, max_slope_run=2,
        ).path
        for s in range(5)
    ]
    assert all(is_connected_path(r) for r in routes)
    assert any(r != plain for r in routes)


def test_astar_noise_weight_raises_step_cost():
    g = VoxelGrid((8, 1, 1))
    noise = NoiseField(seed=99, scale=0.3)
    flat = astar_path(g, (0, 0, 0), (7, 0, 0), noise=noise)
    assert flat.cost == pytest.approx(7.0)
    weighted = astar_path(g, (0, 0, 0), (7, 0, 0), noise=noise, noise_weight=2.0)
    expected = 7.0 + sum(2.0 * noise.sample((x, 0, 0)) for x in range(1, 8))
    assert weighted.cost == pytest.approx(expected)


def test_astar_meander_taxes_straight_horizontal_runs():
    # The only route is a straight line, so meander can only add cost.
    g = VoxelGrid((8, 1, 1))
    noise = NoiseField(seed=7, scale=0.3)
    plain = astar_path(g, (0, 0, 0), (7, 0, 0), noise=noise)
    meander = astar_path(g, (0, 0, 0), (7, 0, 0), noise=noise, meander_strength=1.5)
    assert meander.path == plain.path
    # The first step has no previous direction to continue.
    expected = plain.cost + sum(1.5 * noise.sample((x, 0, 0)) for x in range(2, 8))
    assert meander.cost == pytest.approx(expected)
    assert meander.cost > plain.cost


def test_bfs_cost_is_step_count():
    g = VoxelGrid((5, 1, 1))
    assert bfs_path(g, (0, 0, 0), (4, 0, 0), set()).cost == 4.0
