#!/usr/bin/env python3
"""
Example usage of the hex A* navigation system
Demonstrates map building, wall avoidance, terrain costs and custom heuristics
"""

import math
import time
from dataclasses import dataclass

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import RegularPolygon

from hex_navigation import (
    AStarHex,
    MapSize,
    NodeType,
    SearchConfig,
    build_graph,
    cube_to_offset,
    map_coordinates,
    search
)


@dataclass
class Tile:
    """Caller-side map tile"""
    x: int
    y: int
    terrain: str = "grass"

    @property
    def walkable(self):
        return self.terrain != "rock"

    @property
    def cost(self):
        return {"grass": 1, "forest": 3, "swamp": 5, "rock": 1}[self.terrain]


def make_tiles(map_size, terrain_at=None):
    tiles = []
    for x, y in map_coordinates(map_size):
        col, row = cube_to_offset(x, y)
        terrain = terrain_at(col, row) if terrain_at else "grass"
        tiles.append(Tile(x, y, terrain))
    return tiles


def make_graph(tiles, map_size):
    return build_graph(
        tiles,
        lambda t: t.x,
        lambda t: t.y,
        lambda t: NodeType.OPEN if t.walkable else NodeType.WALL,
        lambda t: t.cost,
        map_size
    )


def visualize_path_hex(tiles, path, start_tile, goal_tile):
    """Visualize the planned path on the hex map"""
    colors = {"grass": "#b5d99c", "forest": "#4f7942", "swamp": "#6b8e7f", "rock": "#555555"}
    fig, ax = plt.subplots(figsize=(10, 8))

    def center(tile):
        col, row = cube_to_offset(tile.x, tile.y)
        return col * math.sqrt(3) + (row % 2) * math.sqrt(3) / 2, row * 1.5

    for tile in tiles:
        cx, cy = center(tile)
        ax.add_patch(RegularPolygon((cx, cy), numVertices=6, radius=1.0,
                                    facecolor=colors[tile.terrain], edgecolor="white"))

    if path:
        points = np.array([center(start_tile)] + [center(tile) for tile in path])
        ax.plot(points[:, 0], points[:, 1], "b-", linewidth=2, label="Planned Path")

    ax.scatter(*center(start_tile), c="green", s=100, marker="o", label="Start", zorder=3)
    ax.scatter(*center(goal_tile), c="red", s=100, marker="*", label="Goal", zorder=3)

    ax.set_aspect("equal")
    ax.autoscale_view()
    ax.invert_yaxis()
    ax.set_title("Hex A* Path Planning")
    ax.legend()
    plt.tight_layout()
    plt.show()


def example_simple_navigation():
    """Basic example with a rock ridge in the way"""
    print("=== Simple Hex Navigation Example ===")

    map_size = MapSize(width=12, height=10)

    def terrain_at(col, row):
        if col == 5 and row < 8:
            return "rock"
        return "grass"

    tiles = make_tiles(map_size, terrain_at)
    graph = make_graph(tiles, map_size)

    start = graph.get_node_at_offset(0, 0)
    goal = graph.get_node_at_offset(10, 0)
    print(f"Planning path from {start} to {goal} on a {map_size.width}x{map_size.height} map")

    planner = AStarHex(graph)
    start_time = time.time()
    success, path, stats = planner.plan(start, goal)
    planning_time = time.time() - start_time

    if success:
        print("✅ Path found!")
        print(f"Path length: {len(path)} steps (direct distance {graph.distance(start.pos, goal.pos):.0f})")
        print(f"Planning time: {planning_time:.3f}s")
        print(f"Search stats: {stats}")

        try:
            visualize_path_hex(tiles, path, start.data, goal.data)
        except ImportError:
            print("Matplotlib not available for visualization")
    else:
        print("❌ No path found!")
        print(f"Error: {stats.get('error', 'Unknown error')}")


def example_terrain_costs():
    """Cheaper detours win over costly terrain"""
    print("\n=== Terrain Cost Example ===")

    map_size = MapSize(width=10, height=6)

    def terrain_at(col, row):
        if 2 <= col <= 6 and row <= 2:
            return "swamp"
        if row == 3 and col % 3 == 0:
            return "forest"
        return "grass"

    tiles = make_tiles(map_size, terrain_at)
    graph = make_graph(tiles, map_size)

    start = graph.get_node_at_offset(0, 2)
    goal = graph.get_node_at_offset(9, 2)
    path = search(graph, start, goal)

    total_cost = sum(tile.cost for tile in path)
    print(f"Path of {len(path)} steps, total cost {total_cost}")
    for i, tile in enumerate(path):
        col, row = cube_to_offset(tile.x, tile.y)
        print(f"  {i+1}: ({col}, {row}) {tile.terrain}")


def example_performance_test():
    """Performance test with different map sizes and heuristics"""
    print("\n=== Performance Test ===")

    def dijkstra(graph, pos_a, pos_b):
        return 0

    configurations = [
        ("Cube distance", SearchConfig()),
        ("Dijkstra", SearchConfig(heuristic=dijkstra)),
    ]

    rng = np.random.default_rng(7)

    print("Map      | Heuristic     | Success | Time(ms) | Path Length | Nodes Explored")
    print("-" * 78)

    for width, height in [(20, 20), (50, 50), (100, 100)]:
        map_size = MapSize(width, height)
        rocks = rng.random((height, width)) < 0.2
        tiles = make_tiles(map_size, lambda col, row: "rock" if rocks[row, col] else "grass")
        graph = make_graph(tiles, map_size)

        start = graph.get_node_at_offset(0, 0)
        goal = graph.get_node_at_offset(width - 2, height - 1)

        for name, config in configurations:
            planner = AStarHex(graph, config)

            start_time = time.time()
            success, path, stats = planner.plan(start, goal)
            elapsed_time = (time.time() - start_time) * 1000

            status = "✅" if success else "❌"
            print(f"{width}x{height:<5} | {name:13} | {status:7} | {elapsed_time:8.1f} | "
                  f"{len(path):11} | {stats['nodes_explored']:14}")


if __name__ == "__main__":
    example_simple_navigation()
    example_terrain_costs()
    example_performance_test()

    print("\n=== Examples Complete ===")
