"""
A* algorithm implementation for hex-grid pathfinding
Searches a Graph using a BinaryHeap open set keyed by f = g + h
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .binary_heap import BinaryHeap
from .grid_node import Cube, GraphNode
from .hex_map import Graph


logger = logging.getLogger(__name__)

Heuristic = Callable[[Graph, Cube, Cube], float]

NO_PARENT = -1


def distance(graph: Graph, pos_a: Cube, pos_b: Cube) -> float:
    """Default heuristic: cube distance, admissible for costs >= 1 per step"""
    return graph.distance(pos_a, pos_b)


@dataclass
class SearchConfig:
    """Configuration parameters for A* search"""
    heuristic: Optional[Heuristic] = None  # defaults to cube distance
    time_limit: Optional[float] = None  # seconds, None searches to completion


class SearchState:
    """
    Scratch state of one search, indexed by node handle

    Attributes:
        g: Best known cost from start
        h: Cached heuristic estimate to goal
        f: Priority key g + h
        has_h: Whether h has been computed for the node
        visited: Node has been reached by any path
        closed: Node has been fully expanded
        parent: Handle of the predecessor on the best known path
    """

    def __init__(self, node_count: int):
        self.g = np.zeros(node_count, dtype=np.float64)
        self.h = np.zeros(node_count, dtype=np.float64)
        self.f = np.zeros(node_count, dtype=np.float64)
        self.has_h = np.zeros(node_count, dtype=bool)
        self.visited = np.zeros(node_count, dtype=bool)
        self.closed = np.zeros(node_count, dtype=bool)
        self.parent = np.full(node_count, NO_PARENT, dtype=np.int64)

    def score(self, handle: int) -> float:
        return self.f[handle]

    def path_handles(self, goal: int) -> List[int]:
        """Handles from the first step after start up to goal"""
        handles = []
        current = goal
        while self.parent[current] != NO_PARENT:
            handles.append(current)
            current = int(self.parent[current])
        handles.reverse()
        return handles


class AStarHex:
    """
    A* pathfinding over a hex map Graph

    Every search allocates a fresh SearchState and open set, so an AStarHex
    (and the Graph it searches) can be reused across independent searches.
    """

    def __init__(self, graph: Graph, config: SearchConfig = None):
        self.graph = graph
        self.config = config if config is not None else SearchConfig()
        self.heuristic: Heuristic = self.config.heuristic or distance

    def search(self, start: GraphNode, goal: GraphNode) -> List[Any]:
        """
        Find a path from start to goal

        Returns:
            Caller tiles ordered from the first step after start to (and
            including) goal; empty if no path exists or start is goal
        """
        _, path, _ = self.plan(start, goal)
        return path

    def plan(self, start: GraphNode, goal: GraphNode) -> Tuple[bool, List[Any], Dict[str, Any]]:
        """
        Perform A* search from start to goal

        Returns:
            success: Whether goal was reached
            path: Caller tiles from the first step after start to goal
            stats: Search statistics
        """
        graph = self.graph
        for node in (start, goal):
            if not graph.owns(node):
                raise ValueError(f"{node!r} does not belong to the searched graph")

        start_time = time.time()
        state = SearchState(len(graph.nodes))
        open_heap = BinaryHeap(state.score)
        open_heap.push(start.handle)

        nodes = graph.nodes
        goal_pos = goal.pos
        time_limit = self.config.time_limit
        iterations = 0
        nodes_explored = 0

        while open_heap:
            iterations += 1

            if time_limit is not None and time.time() - start_time > time_limit:
                logger.debug("A* search %s -> %s hit the %.3fs time limit", start, goal, time_limit)
                return False, [], {
                    "error": "Time limit exceeded",
                    "iterations": iterations,
                    "nodes_explored": nodes_explored,
                    "time": time.time() - start_time
                }

            # Lowest f first, the heap keeps this sorted
            current = open_heap.pop()

            if current == goal.handle:
                handles = state.path_handles(current)
                stats = {
                    "iterations": iterations,
                    "nodes_explored": nodes_explored,
                    "path_length": len(handles),
                    "path_cost": float(state.g[current]),
                    "time": time.time() - start_time
                }
                logger.debug("A* search %s -> %s found %d steps, cost %s",
                             start, goal, len(handles), stats["path_cost"])
                return True, [nodes[handle].data for handle in handles], stats

            state.closed[current] = True
            nodes_explored += 1

            for neighbor in graph.neighbor_handles(current):
                node = nodes[neighbor]
                if state.closed[neighbor] or node.is_wall():
                    continue

                # Cost is paid for entering the neighbour cell
                g_score = state.g[current] + node.cost
                been_visited = state.visited[neighbor]

                if not been_visited or g_score < state.g[neighbor]:
                    state.visited[neighbor] = True
                    state.parent[neighbor] = current
                    if not state.has_h[neighbor]:
                        state.h[neighbor] = self.heuristic(graph, node.pos, goal_pos)
                        state.has_h[neighbor] = True
                    state.g[neighbor] = g_score
                    state.f[neighbor] = g_score + state.h[neighbor]

                    if not been_visited:
                        open_heap.push(neighbor)
                    else:
                        open_heap.rescore(neighbor)

        logger.debug("A* search %s -> %s found no path", start, goal)
        return False, [], {
            "error": "No path found",
            "iterations": iterations,
            "nodes_explored": nodes_explored,
            "time": time.time() - start_time
        }


def search(graph: Graph, start: GraphNode, goal: GraphNode,
           heuristic: Optional[Heuristic] = None) -> List[Any]:
    """
    Shortest path from start to goal as a list of caller tiles

    heuristic(graph, pos_a, pos_b) overrides the cube distance; an
    inadmissible one still returns a path, just not necessarily the
    shortest. An empty list means no path (or start is goal).
    """
    return AStarHex(graph, SearchConfig(heuristic=heuristic)).search(start, goal)
