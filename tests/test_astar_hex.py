from __future__ import annotations

import heapq
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
import pytest

from hex_navigation import (
    AStarHex,
    MapSize,
    NodeType,
    SearchConfig,
    build_graph,
    cube_to_offset,
    map_coordinates,
    search,
)


@dataclass(eq=False)
class Tile:
    x: int
    y: int
    wall: bool = False
    cost: float = 1


def make_graph(map_size, walls=(), costs=None):
    """walls and costs are keyed by (col, row) offset positions"""
    tiles = []
    for x, y in map_coordinates(map_size):
        offset = cube_to_offset(x, y)
        tiles.append(Tile(x, y, offset in walls, (costs or {}).get(offset, 1)))
    return build_graph(
        tiles,
        lambda t: t.x,
        lambda t: t.y,
        lambda t: NodeType.WALL if t.wall else NodeType.OPEN,
        lambda t: t.cost,
        map_size,
    )


def dijkstra_cost(graph, start, goal):
    """Reference shortest path cost, None when unreachable"""
    best = {start.handle: 0}
    heap = [(0, start.handle)]
    while heap:
        g, handle = heapq.heappop(heap)
        if handle == goal.handle:
            return g
        if g > best[handle]:
            continue
        for neighbor in graph.neighbors(graph.nodes[handle]):
            if neighbor.is_wall():
                continue
            ng = g + neighbor.cost
            if ng < best.get(neighbor.handle, float("inf")):
                best[neighbor.handle] = ng
                heapq.heappush(heap, (ng, neighbor.handle))
    return None


def assert_valid_path(graph, start, goal, path):
    assert path[-1] is goal.data
    previous = start
    for tile in path:
        node = graph.get_node(tile.x, tile.y)
        assert node.data is tile
        assert not node.is_wall()
        assert graph.distance(previous.pos, node.pos) == 1
        previous = node


def path_cost(path):
    return sum(tile.cost for tile in path)


def test_straight_line_on_open_grid() -> None:
    graph = make_graph(MapSize(5, 5))
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 0)
    path = search(graph, start, goal)
    assert len(path) == 4
    assert path_cost(path) == 4
    assert_valid_path(graph, start, goal, path)


def test_open_grid_paths_match_cube_distance() -> None:
    graph = make_graph(MapSize(5, 5))
    planner = AStarHex(graph)
    for start in graph.nodes:
        for goal in graph.nodes:
            path = planner.search(start, goal)
            assert len(path) == graph.distance(start.pos, goal.pos)
            if path:
                assert_valid_path(graph, start, goal, path)


def test_routes_around_wall_column() -> None:
    walls = {(2, row) for row in range(4)}
    graph = make_graph(MapSize(5, 5), walls=walls)
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 0)
    path = search(graph, start, goal)
    assert len(path) > graph.distance(start.pos, goal.pos)
    assert path_cost(path) == dijkstra_cost(graph, start, goal)
    assert_valid_path(graph, start, goal, path)


def test_enclosed_start_has_no_path() -> None:
    map_size = MapSize(5, 5)
    probe = make_graph(map_size)
    start = probe.get_node_at_offset(2, 2)
    walls = {cube_to_offset(n.x, n.y) for n in probe.neighbors(start)}

    graph = make_graph(map_size, walls=walls)
    start = graph.get_node_at_offset(2, 2)
    goal = graph.get_node_at_offset(4, 4)
    success, path, stats = AStarHex(graph).plan(start, goal)
    assert not success
    assert path == []
    assert stats["error"] == "No path found"
    assert stats["nodes_explored"] == 1


def test_start_is_goal() -> None:
    graph = make_graph(MapSize(3, 3))
    node = graph.get_node_at_offset(1, 1)
    assert search(graph, node, node) == []


def test_wall_goal_is_unreachable() -> None:
    graph = make_graph(MapSize(4, 4), walls={(3, 2)})
    assert search(graph, graph.get_node_at_offset(0, 0), graph.get_node_at_offset(3, 2)) == []


def test_random_maps_optimal_and_wall_free() -> None:
    rng = np.random.default_rng(3)
    map_size = MapSize(12, 10)
    for _ in range(5):
        walls = {(int(c), int(r)) for c, r in zip(rng.integers(0, 12, 30), rng.integers(0, 10, 30))}
        costs = {(int(c), int(r)): int(v) for c, r, v in
                 zip(rng.integers(0, 12, 40), rng.integers(0, 10, 40), rng.integers(1, 6, 40))}
        graph = make_graph(map_size, walls=walls, costs=costs)
        open_nodes = [n for n in graph.nodes if not n.is_wall()]
        for _ in range(10):
            start, goal = (open_nodes[int(i)] for i in rng.choice(len(open_nodes), 2, replace=False))
            path = search(graph, start, goal)
            expected = dijkstra_cost(graph, start, goal)
            if expected is None:
                assert path == []
            else:
                assert path_cost(path) == expected
                assert_valid_path(graph, start, goal, path)


def test_prefers_cheaper_detour() -> None:
    # swamp straight ahead, grass around it
    costs = {(col, 0): 10 for col in range(1, 4)}
    graph = make_graph(MapSize(5, 3), costs=costs)
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 0)
    path = search(graph, start, goal)
    assert path_cost(path) == dijkstra_cost(graph, start, goal)
    assert path_cost(path) < 21


def test_repeated_searches_are_independent() -> None:
    walls = {(2, row) for row in range(4)}
    graph = make_graph(MapSize(5, 5), walls=walls)
    planner = AStarHex(graph)
    pairs = [((0, 0), (4, 0)), ((4, 4), (0, 4)), ((0, 0), (4, 0)), ((1, 3), (3, 1))]

    for a, b in pairs:
        start, goal = graph.get_node_at_offset(*a), graph.get_node_at_offset(*b)
        fresh = make_graph(MapSize(5, 5), walls=walls)
        expected = search(fresh, fresh.get_node_at_offset(*a), fresh.get_node_at_offset(*b))
        path = planner.search(start, goal)
        assert path_cost(path) == path_cost(expected)
        assert_valid_path(graph, start, goal, path)


def test_concurrent_searches_share_graph() -> None:
    rng = np.random.default_rng(5)
    graph = make_graph(MapSize(15, 15), walls={(7, row) for row in range(12)})
    open_nodes = [n for n in graph.nodes if not n.is_wall()]
    pairs = [tuple(open_nodes[int(i)] for i in rng.choice(len(open_nodes), 2, replace=False))
             for _ in range(40)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda pair: search(graph, *pair), pairs))

    for (start, goal), path in zip(pairs, results):
        assert path_cost(path) == dijkstra_cost(graph, start, goal)


def test_heuristic_computed_once_per_node() -> None:
    calls = Counter()

    def zero(graph, pos_a, pos_b):
        calls[pos_a] += 1
        return 0

    walls = {(2, row) for row in range(4)}
    graph = make_graph(MapSize(5, 5), walls=walls)
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 0)
    path = search(graph, start, goal, heuristic=zero)
    assert path_cost(path) == dijkstra_cost(graph, start, goal)
    assert calls
    assert max(calls.values()) == 1


def test_inadmissible_heuristic_still_finds_a_path() -> None:
    def overestimate(graph, pos_a, pos_b):
        return 10 * graph.distance(pos_a, pos_b)

    costs = {(col, 0): 10 for col in range(1, 4)}
    graph = make_graph(MapSize(5, 3), costs=costs)
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 0)
    path = search(graph, start, goal, heuristic=overestimate)
    assert path
    assert_valid_path(graph, start, goal, path)
    assert path_cost(path) >= dijkstra_cost(graph, start, goal)


def test_plan_reports_stats() -> None:
    graph = make_graph(MapSize(5, 5))
    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(4, 4)
    success, path, stats = AStarHex(graph).plan(start, goal)
    assert success
    assert stats["path_length"] == len(path)
    assert stats["path_cost"] == path_cost(path)
    assert stats["nodes_explored"] >= len(path)
    assert "error" not in stats


def test_time_limit() -> None:
    graph = make_graph(MapSize(5, 5))
    planner = AStarHex(graph, SearchConfig(time_limit=-1.0))
    success, path, stats = planner.plan(graph.get_node_at_offset(0, 0), graph.get_node_at_offset(4, 4))
    assert not success
    assert path == []
    assert stats["error"] == "Time limit exceeded"


def test_rejects_foreign_nodes() -> None:
    graph = make_graph(MapSize(3, 3))
    other = make_graph(MapSize(3, 3))
    with pytest.raises(ValueError):
        search(graph, graph.nodes[0], other.nodes[1])
