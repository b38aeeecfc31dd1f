import logging
import math
from typing import NamedTuple, Optional

from .trace import EventKind, Trace
from .tree import BalancedTree, Direction, Node

logger = logging.getLogger(__name__)


class AVLNode(Node):

    def __init__(self, key):
        super().__init__(key)
        self.height = 1


def height(node: Optional[AVLNode]) -> int:
    return node.height if node is not None else 0


def balance_factor(node: Optional[AVLNode]) -> int:
    if node is None:
        return 0
    return height(node.left) - height(node.right)


class AVLProperties(NamedTuple):
    min_balance: int
    max_balance: int
    height: int

    @property
    def valid(self) -> bool:
        return self.min_balance >= -1 and self.max_balance <= 1


class AVLTree(BalancedTree):
    """Height-balanced search tree that records every step it takes.

    Heights are stored on the nodes; there are no parent pointers, so the
    recursion hands each rebalanced subtree root back to its caller, which
    hangs it in the right slot.
    """

    name = "AVL tree"
    EXAMPLES = {
        "LL": (30, 20, 10),
        "RR": (10, 20, 30),
        "LR": (30, 10, 20),
        "RL": (10, 30, 20),
    }

    def insert(self, key) -> Trace:
        trace = Trace()
        if key in self:
            self._reject_duplicate(trace, key)
            return trace

        if self.root is None:
            self.root = AVLNode(key)
            self._emit(trace, EventKind.ADD_NODE, [self.root],
                       f"Inserted {key} as the root of the AVL tree.")
        else:
            self.root = self._insert(self.root, key, trace)
        self._size += 1

        self._emit(trace, EventKind.INFO, [],
                   f"Insert operation finished for key {key}. The AVL tree remains "
                   "balanced after any necessary rotations.")
        logger.debug("insert %r: %d events", key, len(trace))
        return trace

    def _insert(self, node: AVLNode, key, trace: Trace) -> AVLNode:
        self._emit(trace, EventKind.HIGHLIGHT, [node],
                   f"At node {node.key}. Compare {key} with {node.key} to choose "
                   "left or right subtree.")

        direction = Direction(int(key > node.key))
        child = node.get_child(direction)
        if child is None:
            leaf = AVLNode(key)
            node.set_child(direction, leaf)
            self._emit(trace, EventKind.ADD_NODE, [leaf],
                       f"Inserted {key} as a new leaf under {node.key}.")
            self._emit(trace, EventKind.CONNECT, [node, leaf],
                       f"Connecting parent {node.key} to new {direction.name.lower()} child {key}.")
        else:
            node.set_child(direction, self._insert(child, key, trace))

        self._update_height(node)
        balance = balance_factor(node)

        # the new key's side tells us which of the four shapes we are in
        if balance > 1 and key < node.left.key:
            return self._rotate_subtree(node, Direction.RIGHT, trace, "LL case fix")
        if balance < -1 and key > node.right.key:
            return self._rotate_subtree(node, Direction.LEFT, trace, "RR case fix")
        if balance > 1 and key > node.left.key:
            node.left = self._rotate_subtree(node.left, Direction.LEFT, trace, "LR case, first step")
            return self._rotate_subtree(node, Direction.RIGHT, trace, "LR case fix")
        if balance < -1 and key < node.right.key:
            node.right = self._rotate_subtree(node.right, Direction.RIGHT, trace, "RL case, first step")
            return self._rotate_subtree(node, Direction.LEFT, trace, "RL case fix")
        return node

    def delete(self, key) -> Trace:
        trace = Trace()
        if self.root is None:
            self._reject_empty_delete(trace)
            return trace

        if self._search(key, trace) is None:
            self._reject_missing(trace, key)
            return trace

        self.root = self._delete(self.root, key, trace)
        self._size -= 1

        self._emit(trace, EventKind.INFO, [],
                   f"Delete operation finished for key {key}. The AVL tree has been "
                   "rebalanced if necessary.")
        logger.debug("delete %r: %d events", key, len(trace))
        return trace

    def _delete(self, node: AVLNode, key, trace: Trace) -> Optional[AVLNode]:
        # only called for keys known to be in the subtree
        if key < node.key:
            node.left = self._delete(node.left, key, trace)
        elif key > node.key:
            node.right = self._delete(node.right, key, trace)
        elif node.left is None or node.right is None:
            child = node.left if node.left is not None else node.right
            self._emit(trace, EventKind.INFO, [node],
                       f"Deleting node {node.key} which has "
                       f"{'one child' if child is not None else 'no children'} in the AVL tree.")
            return child
        else:
            successor = self._min_node(node.right, trace)
            self._emit(trace, EventKind.INFO, [node, successor],
                       f"Node {node.key} has two children. Its inorder successor "
                       f"{successor.key} will replace its key.")
            node.key = successor.key
            node.right = self._delete(node.right, successor.key, trace)

        self._update_height(node)
        balance = balance_factor(node)

        # deletes shrink the other side, so the child's own balance decides
        if balance > 1 and balance_factor(node.left) >= 0:
            return self._rotate_subtree(node, Direction.RIGHT, trace, "LL case fix")
        if balance > 1 and balance_factor(node.left) < 0:
            node.left = self._rotate_subtree(node.left, Direction.LEFT, trace, "LR case, first step")
            return self._rotate_subtree(node, Direction.RIGHT, trace, "LR case fix")
        if balance < -1 and balance_factor(node.right) <= 0:
            return self._rotate_subtree(node, Direction.LEFT, trace, "RR case fix")
        if balance < -1 and balance_factor(node.right) > 0:
            node.right = self._rotate_subtree(node.right, Direction.RIGHT, trace, "RL case, first step")
            return self._rotate_subtree(node, Direction.LEFT, trace, "RL case fix")
        return node

    def _update_height(self, node: AVLNode) -> int:
        node.height = 1 + max(height(node.left), height(node.right))
        return node.height

    def _relinked(self, sub: AVLNode, new_root: AVLNode, moved: Optional[AVLNode]):
        # sub is now a child of new_root, so it has to be recomputed first
        self._update_height(sub)
        self._update_height(new_root)

    def properties(self) -> AVLProperties:
        if self.root is None:
            return AVLProperties(0, 0, 0)
        stats = [math.inf, -math.inf, 0]
        self._collect(self.root, 1, stats)
        return AVLProperties(int(stats[0]), int(stats[1]), stats[2])

    def _collect(self, node: Optional[AVLNode], depth: int, stats: list):
        if node is None:
            return
        bf = balance_factor(node)
        stats[0] = min(stats[0], bf)
        stats[1] = max(stats[1], bf)
        stats[2] = max(stats[2], depth)
        self._collect(node.left, depth + 1, stats)
        self._collect(node.right, depth + 1, stats)

    def _describe_properties(self, props: AVLProperties) -> str:
        return (f"AVL properties: height = {props.height}, minimum balance factor = "
                f"{props.min_balance}, maximum balance factor = {props.max_balance}. "
                f"All nodes {'satisfy' if props.valid else 'do not satisfy'} the AVL "
                "condition (−1 ≤ bf ≤ 1).")
