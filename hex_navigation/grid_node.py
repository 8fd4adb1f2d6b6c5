"""
Graph node class for hex-grid A* pathfinding
Represents a single cell of the map in cube coordinates
"""

from enum import IntEnum
from typing import Any, Generic, NamedTuple, TypeVar


T = TypeVar("T")


class NodeType(IntEnum):
    """Walkability classification of a cell"""
    WALL = 0
    OPEN = 1


class Cube(NamedTuple):
    """Cube coordinates of a hex cell, x + y + z == 0"""
    x: int
    y: int
    z: int

    @classmethod
    def from_xy(cls, x: int, y: int) -> "Cube":
        return cls(x, y, -x - y)


class GraphNode(Generic[T]):
    """
    Represents a single cell of the hex map for A* pathfinding

    Nodes only carry static data; the g/h/f scores, visited/closed flags and
    parent links of a search live in a separate SearchState.

    Attributes:
        handle: Position of the node in Graph.nodes
        x, y: Cube coordinates (z is derived)
        pos: Full cube position (x, y, z)
        type: NodeType.WALL or NodeType.OPEN
        cost: Cost of entering this cell
        data: Caller's tile object this node was built from
    """

    __slots__ = ("handle", "x", "y", "pos", "type", "cost", "data")

    def __init__(self, handle: int, x: int, y: int, node_type: NodeType,
                 cost: float, data: Any = None):
        self.handle = handle
        self.x = x
        self.y = y
        self.pos = Cube.from_xy(x, y)
        self.type = node_type
        self.cost = cost
        self.data: T = data

    @property
    def z(self) -> int:
        return self.pos.z

    def is_wall(self) -> bool:
        return self.type == NodeType.WALL

    def __str__(self):
        return f"[{self.x} {self.y}]"

    def __repr__(self):
        return (f"GraphNode(handle={self.handle}, pos=({self.x}, {self.y}, {self.z}), "
                f"type={self.type.name}, cost={self.cost})")
