"""
Hex Navigation Package

A Python implementation of A* pathfinding over hexagonal tile maps in
cube coordinates.

Key Features:
- Hex map graph built from arbitrary caller tiles
- Binary min-heap open set with in-place rescoring
- A* search returning the caller's own tiles
- Pluggable heuristic functions
- Reusable graphs, safe for concurrent searches
"""

from .grid_node import Cube, GraphNode, NodeType
from .binary_heap import BinaryHeap
from .hex_map import (
    CUBE_DIRECTIONS,
    Graph,
    GraphConfigurationError,
    MapSize,
    build_graph,
    cube_to_offset,
    map_coordinates,
    offset_to_cube
)
from .astar_hex import AStarHex, SearchConfig, SearchState, distance, search

__version__ = "1.0.0"
__author__ = "Hex Navigation Team"

__all__ = [
    'Cube',
    'GraphNode',
    'NodeType',
    'BinaryHeap',
    'CUBE_DIRECTIONS',
    'Graph',
    'GraphConfigurationError',
    'MapSize',
    'build_graph',
    'cube_to_offset',
    'map_coordinates',
    'offset_to_cube',
    'AStarHex',
    'SearchConfig',
    'SearchState',
    'distance',
    'search'
]
