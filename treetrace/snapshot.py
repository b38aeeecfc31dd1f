"""Positional view of a binary tree.

Nodes are addressed the way a complete binary tree is laid out in an array:
the root sits at 0 and the children of position i sit at 2i + 1 and 2i + 2.
Positions are recomputed for every snapshot; they are not node identifiers.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import networkx as nx


def left_index(index: int) -> int:
    return 2 * index + 1


def right_index(index: int) -> int:
    return 2 * index + 2


def child_index(index: int, direction: int) -> int:
    """Position of the child of `index` on the given side (LEFT=0, RIGHT=1)"""
    return 2 * index + 1 + int(direction)


def parent_index(index: int) -> Optional[int]:
    if index <= 0:
        return None
    return (index - 1) // 2


def index_positions(root, index: int = 0) -> Iterator[Tuple[int, Any]]:
    """Pre-order walk yielding (position, node) pairs"""
    if root is None:
        return
    yield index, root
    yield from index_positions(root.left, left_index(index))
    yield from index_positions(root.right, right_index(index))


class TreeSnapshot:
    """Immutable picture of a tree at one instant.

    `positions` maps position to key and, for coloured trees, `colours` maps
    position to colour. `size` is the length of the sparse array view
    (1 + the largest occupied position), while `count` is the number of nodes.
    """

    __slots__ = ("_positions", "_colours")

    def __init__(self, positions: Mapping[int, Any], colours: Optional[Mapping[int, Any]] = None):
        self._positions = MappingProxyType(dict(positions))
        self._colours = None if colours is None else MappingProxyType(dict(colours))

    @classmethod
    def of(cls, root, coloured: bool = False) -> "TreeSnapshot":
        positions: Dict[int, Any] = {}
        colours: Optional[Dict[int, Any]] = {} if coloured else None
        for index, node in index_positions(root):
            positions[index] = node.key
            if colours is not None:
                colours[index] = node.colour
        return cls(positions, colours)

    @property
    def positions(self) -> Mapping[int, Any]:
        return self._positions

    @property
    def colours(self) -> Optional[Mapping[int, Any]]:
        return self._colours

    @property
    def size(self) -> int:
        if not self._positions:
            return 0
        return max(self._positions) + 1

    @property
    def count(self) -> int:
        return len(self._positions)

    def __len__(self):
        return self.count

    @property
    def storage(self) -> List[Any]:
        storage = [None] * self.size
        for index, key in self._positions.items():
            storage[index] = key
        return storage

    @property
    def root_key(self):
        return self._positions.get(0)

    def key_at(self, index: int):
        return self._positions.get(index)

    def colour_at(self, index: int):
        if self._colours is None:
            return None
        return self._colours.get(index)

    def keys(self) -> List[Any]:
        return [self._positions[i] for i in sorted(self._positions)]

    def to_graph(self) -> nx.DiGraph:
        """Returns the snapshot as a directed graph of positions.

        Every position becomes a node carrying its `key` (and `colour` for
        red-black snapshots); edges run from parent to child and are tagged
        with the `side` the child hangs on.
        """
        graph = nx.DiGraph()
        for index, key in self._positions.items():
            attrs = {"key": key}
            if self._colours is not None:
                attrs["colour"] = self._colours[index]
            graph.add_node(index, **attrs)
        for index in self._positions:
            parent = parent_index(index)
            if parent is not None:
                side = "left" if index == left_index(parent) else "right"
                graph.add_edge(parent, index, side=side)
        return graph

    def __eq__(self, other):
        if not isinstance(other, TreeSnapshot):
            return NotImplemented
        return (dict(self._positions) == dict(other._positions)
                and self._colour_dict() == other._colour_dict())

    def _colour_dict(self) -> Optional[Dict[int, Any]]:
        return None if self._colours is None else dict(self._colours)

    def __hash__(self):
        colours = self._colour_dict()
        return hash((frozenset(self._positions.items()),
                     None if colours is None else frozenset(colours.items())))

    def __repr__(self):
        return f"TreeSnapshot({dict(self._positions)!r}, colours={self._colour_dict()!r})"


def find_index_by_key(snapshot: TreeSnapshot, key) -> int:
    """Returns the position holding `key`, or -1 if it is not in the snapshot"""
    for index, value in snapshot.positions.items():
        if value == key:
            return index
    return -1
