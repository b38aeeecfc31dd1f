from .avl import AVLNode, AVLProperties, AVLTree
from .rbtree import Colour, RBNode, RBProperties, RedBlackTree
from .snapshot import TreeSnapshot, find_index_by_key
from .trace import EventKind, Failure, Trace, TraceEvent
from .tree import BalancedTree, Direction, TraversalOrder

__all__ = [
    "AVLNode", "AVLProperties", "AVLTree",
    "BalancedTree", "Colour", "Direction", "EventKind", "Failure",
    "RBNode", "RBProperties", "RedBlackTree",
    "Trace", "TraceEvent", "TraversalOrder", "TreeSnapshot", "find_index_by_key",
]
