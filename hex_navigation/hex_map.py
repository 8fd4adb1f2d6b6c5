"""
Hex map model for A* pathfinding
Maps caller tiles to graph nodes on a pointy-top hex grid in cube coordinates
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from .grid_node import Cube, GraphNode, NodeType


logger = logging.getLogger(__name__)

T = TypeVar("T")

# (dx, dy) steps to the six cube-adjacent cells; dz follows from x + y + z == 0
CUBE_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, -1), (1, 0), (0, 1),
    (-1, 1), (-1, 0), (0, -1),
)

NO_NODE = -1


class GraphConfigurationError(ValueError):
    """Raised when a graph cannot be built from the supplied tiles"""


@dataclass(frozen=True)
class MapSize:
    """Map bounds in cells: width of a row, number of rows"""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise GraphConfigurationError(
                f"Map size must be positive, got {self.width}x{self.height}")

    @classmethod
    def coerce(cls, value: Union["MapSize", Tuple[int, int], dict]) -> "MapSize":
        """Accept a MapSize, a (width, height) pair or a {width, height} mapping"""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls(int(value["width"]), int(value["height"]))
        width, height = value
        return cls(int(width), int(height))


def is_on_map(x: int, y: int, map_size: MapSize) -> bool:
    """Check if cube coordinates (x, y) lie inside the map bounds"""
    z = -x - y
    return (0 <= z < map_size.height  # top and bottom rows
            and x >= y  # left edge
            and math.ceil((x - y) / 2) < map_size.width)  # right edge


def index(x: int, y: int, map_size: MapSize) -> int:
    """Dense array slot of on-map coordinates (x, y)"""
    return map_size.width * (-x - y) + x


def offset_to_cube(col: int, row: int) -> Tuple[int, int]:
    """Convert a (column, row) map position to cube (x, y)"""
    x = col - row // 2
    return x, -x - row


def cube_to_offset(x: int, y: int) -> Tuple[int, int]:
    """Convert cube (x, y) to a (column, row) map position"""
    row = -x - y
    return x + row // 2, row


def map_coordinates(map_size: MapSize) -> Iterator[Tuple[int, int]]:
    """Yield every on-map cube (x, y) in index order"""
    map_size = MapSize.coerce(map_size)
    for row in range(map_size.height):
        for col in range(map_size.width):
            x, y = offset_to_cube(col, row)
            if is_on_map(x, y, map_size):
                yield x, y


class Graph(Generic[T]):
    """
    Hex map graph used by the A* search

    Holds exactly one GraphNode per caller tile, in input order, plus a slot
    table mapping index(x, y) to node handles and the precomputed neighbour
    handles of every node. Nodes carry no search state, so one Graph can be
    searched any number of times, also concurrently.
    """

    def __init__(self,
                 tiles: Sequence[T],
                 x_func: Callable[[T], int],
                 y_func: Callable[[T], int],
                 type_func: Callable[[T], Any],
                 cost_func: Callable[[T], float],
                 map_size: Union[MapSize, Tuple[int, int], dict]):
        """
        Build the graph

        Args:
            tiles: Caller's tile objects
            x_func: Returns a tile's cube x coordinate
            y_func: Returns a tile's cube y coordinate
            type_func: Returns a tile's NodeType (or 0/1)
            cost_func: Returns the cost of entering a tile
            map_size: Map bounds {width, height}

        Raises:
            GraphConfigurationError: tile off the map, duplicate coordinates,
                unknown classification or invalid cost
        """
        self.input = list(tiles)
        self.map_size = MapSize.coerce(map_size)
        self.nodes: List[GraphNode[T]] = []

        slot_count = max(index(x, y, self.map_size) for x, y in map_coordinates(self.map_size)) + 1
        self._slots = np.full(slot_count, NO_NODE, dtype=np.int64)

        for handle, tile in enumerate(self.input):
            x, y = int(x_func(tile)), int(y_func(tile))
            if not self.is_on_map(x, y):
                raise GraphConfigurationError(
                    f"Tile {handle} at ({x}, {y}) lies outside the {self.map_size.width}x"
                    f"{self.map_size.height} map")

            slot = self.index(x, y)
            if self._slots[slot] != NO_NODE:
                raise GraphConfigurationError(
                    f"Tile {handle} duplicates coordinates ({x}, {y}) of tile {self._slots[slot]}")

            try:
                node_type = NodeType(type_func(tile))
            except ValueError as exc:
                raise GraphConfigurationError(f"Tile {handle} has no valid NodeType") from exc

            cost = cost_func(tile)
            if not math.isfinite(cost) or cost < 0:
                raise GraphConfigurationError(f"Tile {handle} has invalid cost {cost!r}")

            self._slots[slot] = handle
            self.nodes.append(GraphNode(handle, x, y, node_type, cost, tile))

        self._neighbors: List[Tuple[int, ...]] = [self._adjacent_handles(node) for node in self.nodes]

        logger.debug("Built hex graph with %d nodes on a %dx%d map",
                     len(self.nodes), self.map_size.width, self.map_size.height)

    def __len__(self):
        return len(self.nodes)

    def __str__(self):
        return "\n" + "".join(f"{node} " for node in self.nodes)

    def is_on_map(self, x: int, y: int) -> bool:
        """True, if the tile with coordinates x, y is in the valid map area"""
        return is_on_map(x, y, self.map_size)

    def index(self, x: int, y: int) -> int:
        return index(x, y, self.map_size)

    def get_node(self, x: int, y: int) -> Optional[GraphNode[T]]:
        """Node at coordinates x, y, or None if off the map or not supplied"""
        if not self.is_on_map(x, y):
            return None
        handle = self._slots[self.index(x, y)]
        if handle == NO_NODE:
            return None
        return self.nodes[handle]

    def get_node_at_offset(self, col: int, row: int) -> Optional[GraphNode[T]]:
        """Node at a (column, row) map position, or None"""
        return self.get_node(*offset_to_cube(col, row))

    def distance(self, pos_a: Cube, pos_b: Cube) -> float:
        """Manhattan distance in cube coordinates (hex step count)"""
        return (abs(pos_a.x - pos_b.x)
                + abs(pos_a.y - pos_b.y)
                + abs(pos_a.z - pos_b.z)) / 2

    def neighbors(self, node: GraphNode[T]) -> List[GraphNode[T]]:
        """Adjacent nodes in fixed direction order, walls included"""
        return [self.nodes[handle] for handle in self._neighbors[node.handle]]

    def neighbor_handles(self, handle: int) -> Tuple[int, ...]:
        return self._neighbors[handle]

    def owns(self, node: GraphNode) -> bool:
        """Check that a node belongs to this graph"""
        return 0 <= node.handle < len(self.nodes) and self.nodes[node.handle] is node

    def _adjacent_handles(self, node: GraphNode[T]) -> Tuple[int, ...]:
        handles = []
        for dx, dy in CUBE_DIRECTIONS:
            neighbor = self.get_node(node.x + dx, node.y + dy)
            if neighbor is not None:
                handles.append(neighbor.handle)
        return tuple(handles)


def build_graph(tiles: Sequence[T],
                x_func: Callable[[T], int],
                y_func: Callable[[T], int],
                type_func: Callable[[T], Any],
                cost_func: Callable[[T], float],
                map_size: Union[MapSize, Tuple[int, int], dict]) -> Graph[T]:
    """Create a Graph from caller tiles and accessor functions"""
    return Graph(tiles, x_func, y_func, type_func, cost_func, map_size)
