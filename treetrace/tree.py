import enum
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .snapshot import TreeSnapshot, find_index_by_key, index_positions
from .trace import EventKind, Failure, Trace

logger = logging.getLogger(__name__)


class Direction(enum.IntEnum):
    ROOT = -1
    LEFT = 0
    RIGHT = 1


class TraversalOrder(enum.Enum):
    INORDER = "inorder"
    PREORDER = "preorder"
    POSTORDER = "postorder"


TRAVERSAL_INTROS = {
    TraversalOrder.INORDER: "Inorder traversal (Left → Root → Right) visits the keys in sorted order.",
    TraversalOrder.PREORDER: "Preorder traversal (Root → Left → Right).",
    TraversalOrder.POSTORDER: "Postorder traversal (Left → Right → Root).",
}


class Node:

    def __init__(self, key):
        self.key = key
        self.left: Optional[Node] = None
        self.right: Optional[Node] = None

    def get_child(self, direction: Direction):
        if direction == Direction.LEFT:
            return self.left
        return self.right

    def set_child(self, direction: Direction, node: Optional["Node"]):
        if direction == Direction.LEFT:
            self.left = node
        else:
            self.right = node

    def __repr__(self):
        return f"{type(self).__name__}({self.key!r})"


class BalancedTree:
    """Common surface of the traced search trees.

    Every public operation returns a `Trace`; failures (duplicate keys,
    missing keys, empty trees) are reported as the final event of that trace
    and never raised. Subclasses provide `insert`, `delete` and the property
    check, plus the `_relinked` hook that does their bookkeeping after the
    shared rotation primitive has moved the child pointers.
    """

    name = "binary search tree"
    coloured = False
    EXAMPLES: Dict[str, Sequence] = {}

    def __init__(self):
        self.root: Optional[Node] = None
        self._size = 0

    def __len__(self):
        return self._size

    def __contains__(self, key):
        return self._find(key) is not None

    def is_empty(self):
        return self.root is None

    def clear(self):
        self.root = None
        self._size = 0

    def snapshot(self) -> TreeSnapshot:
        return TreeSnapshot.of(self.root, coloured=self.coloured)

    def insert(self, key) -> Trace:
        raise NotImplementedError

    def delete(self, key) -> Trace:
        raise NotImplementedError

    def properties(self):
        raise NotImplementedError

    def _describe_properties(self, props) -> str:
        raise NotImplementedError

    def check_properties(self) -> Trace:
        trace = Trace()
        if self.root is None:
            self._emit(trace, EventKind.INFO, [],
                       f"The {self.name} is empty; there is nothing to check.",
                       Failure.EMPTY_TREE)
            return trace

        props = self.properties()
        kind = EventKind.INFO if props.valid else EventKind.ERROR
        self._emit(trace, kind, [], self._describe_properties(props))
        if not props.valid:
            logger.debug("%s violates its invariants: %r", self.name, props)
        return trace

    # traversals

    def inorder(self) -> List[Any]:
        return self.keys(TraversalOrder.INORDER)

    def preorder(self) -> List[Any]:
        return self.keys(TraversalOrder.PREORDER)

    def postorder(self) -> List[Any]:
        return self.keys(TraversalOrder.POSTORDER)

    def keys(self, order=TraversalOrder.INORDER) -> List[Any]:
        acc: List[Any] = []
        self._walk(self.root, TraversalOrder(order), acc)
        return acc

    def _walk(self, node: Optional[Node], order: TraversalOrder, acc: List[Any]):
        if node is None:
            return
        if order == TraversalOrder.PREORDER:
            acc.append(node.key)
        self._walk(node.left, order, acc)
        if order == TraversalOrder.INORDER:
            acc.append(node.key)
        self._walk(node.right, order, acc)
        if order == TraversalOrder.POSTORDER:
            acc.append(node.key)

    def traverse(self, order=TraversalOrder.INORDER) -> Trace:
        order = TraversalOrder(order)
        trace = Trace()
        snapshot = self.snapshot()
        if self.root is None:
            trace.emit(EventKind.INFO, [], snapshot,
                       "Tree is empty; traversal has no nodes to visit.")
            return trace

        trace.emit(EventKind.INFO, [], snapshot, TRAVERSAL_INTROS[order])
        for step, key in enumerate(self.keys(order), start=1):
            trace.emit(EventKind.VISIT, [find_index_by_key(snapshot, key)], snapshot,
                       f"Visit node {key} as step {step} of the {order.value} traversal.")
        return trace

    # bulk building

    def build(self, keys: Iterable) -> Trace:
        """Clears the tree, then inserts each key in turn"""
        self.clear()
        trace = Trace()
        self._emit(trace, EventKind.INFO, [],
                   f"Building a {self.name} by inserting each key and rebalancing after every insert.")
        for key in keys:
            trace.extend(self.insert(key))
        self._emit(trace, EventKind.INFO, [], f"{self.name.capitalize()} build finished.")
        return trace

    def example(self, name: str) -> Trace:
        return self.build(self.EXAMPLES[name])

    # shared helpers

    def _find(self, key) -> Optional[Node]:
        node = self.root
        while node is not None and node.key != key:
            node = node.get_child(Direction(int(key > node.key)))
        return node

    def _search(self, key, trace: Trace) -> Optional[Node]:
        """Walks towards `key`, highlighting every node compared along the way"""
        node = self.root
        while node is not None:
            self._emit(trace, EventKind.HIGHLIGHT, [node],
                       f"At node {node.key}. Compare {key} with {node.key} "
                       "while searching for the key to delete.")
            if node.key == key:
                return node
            node = node.get_child(Direction(int(key > node.key)))
        return None

    def _min_node(self, node: Node, trace: Trace) -> Node:
        """Returns the leftmost node of the subtree, i.e. the inorder successor
        of that subtree's parent when called on a right child"""
        while node.left is not None:
            self._emit(trace, EventKind.HIGHLIGHT, [node],
                       f"Move left from node {node.key} while searching for the "
                       "minimum node (inorder successor).")
            node = node.left
        return node

    def _reject_empty_delete(self, trace: Trace):
        self._emit(trace, EventKind.ERROR, [], f"Cannot delete from an empty {self.name}.",
                   Failure.EMPTY_TREE)

    def _reject_missing(self, trace: Trace, key):
        self._emit(trace, EventKind.ERROR, [],
                   f"Key {key} was not found in the {self.name}; nothing was deleted.",
                   Failure.KEY_NOT_FOUND)

    def _reject_duplicate(self, trace: Trace, key):
        self._emit(trace, EventKind.INFO, [self._find(key)],
                   f"Key {key} already exists in the {self.name}; duplicates are ignored.",
                   Failure.DUPLICATE_KEY)

    def _emit(self, trace: Trace, kind: EventKind, nodes: Iterable[Optional[Node]],
              explanation: str, failure: Optional[Failure] = None):
        # positions are resolved by identity: a successor copy briefly leaves
        # two nodes holding the same key
        located = {id(node): index for index, node in index_positions(self.root)}
        positions = [located.get(id(node), -1) for node in nodes if node is not None]
        return trace.emit(kind, positions, self.snapshot(), explanation, failure)

    # rotation

    def _rotate_subtree(self, sub: Node, direction: Direction, trace: Trace, reason: str) -> Node:
        """Rotates the subtree rooted at `sub` towards `direction`.

        Rotating LEFT lifts the right child into `sub`'s place and hangs `sub`
        off its left side; the child's inner subtree moves across to `sub`.
        One rotate event carrying the pre-rotation snapshot is emitted.
        Returns the new subtree root.
        """
        new_root = sub.get_child(Direction(1 - direction))
        side = direction.name.lower()
        kind = EventKind.ROTATE_LEFT if direction == Direction.LEFT else EventKind.ROTATE_RIGHT
        self._emit(trace, kind, [sub, new_root],
                   f"{side.capitalize()} rotation ({reason}) around node {sub.key}: "
                   f"{new_root.key} moves up and {sub.key} becomes its {side} child.")

        moved = new_root.get_child(direction)
        sub.set_child(Direction(1 - direction), moved)
        new_root.set_child(direction, sub)
        self._relinked(sub, new_root, moved)

        logger.debug("%s: %s at %r (%s)", self.name, kind.value, sub.key, reason)
        return new_root

    def _relinked(self, sub: Node, new_root: Node, moved: Optional[Node]):
        """Bookkeeping after a rotation has swapped `sub` and `new_root`"""
