import enum
import logging
import weakref
from typing import NamedTuple, Optional

from .trace import EventKind, Trace
from .tree import BalancedTree, Direction, Node

logger = logging.getLogger(__name__)


class Colour(enum.Enum):
    BLACK = 0
    RED = 1


class RBNode(Node):

    def __init__(self, key):
        super().__init__(key)
        self.colour = Colour.RED
        self._parent: Optional[weakref.ref] = None

    # the parent link is a back-reference only, children are owned top-down
    @property
    def parent(self) -> Optional["RBNode"]:
        return None if self._parent is None else self._parent()

    @parent.setter
    def parent(self, node: Optional["RBNode"]):
        self._parent = None if node is None else weakref.ref(node)

    def get_direction(self) -> Direction:
        parent = self.parent
        if parent is None:
            return Direction.ROOT
        return Direction.LEFT if self is parent.left else Direction.RIGHT


def colour_of(node: Optional[RBNode]) -> Colour:
    # null leaves count as black
    return Colour.BLACK if node is None else node.colour


class RBProperties(NamedTuple):
    root_black: bool
    no_red_red: bool
    black_height_equal: bool
    black_height: int

    @property
    def valid(self) -> bool:
        return self.root_black and self.no_red_red and self.black_height_equal


class RedBlackTree(BalancedTree):
    """Colour-balanced search tree that records every step it takes.

    With `delete_fixup=False` deletions of black nodes only force the root
    black afterwards instead of running the double-black repair;
    `check_properties` will then report any violation left behind.
    """

    name = "red-black tree"
    coloured = True
    EXAMPLES = {
        "recolor": (10, 5, 15, 1, 7, 13, 17),
        "left-rotate": (10, 20, 30),
        "right-rotate": (30, 20, 10),
        "double-rotate": (30, 10, 20),
    }

    def __init__(self, delete_fixup: bool = True):
        super().__init__()
        self.delete_fixup = delete_fixup

    def insert(self, key) -> Trace:
        trace = Trace()
        if key in self:
            self._reject_duplicate(trace, key)
            return trace

        node = RBNode(key)
        if self.root is None:
            node.colour = Colour.BLACK
            self.root = node
            self._emit(trace, EventKind.ADD_NODE, [node],
                       f"Inserted {key} as root and colored it black.")
        else:
            parent = self.root
            while True:
                self._emit(trace, EventKind.HIGHLIGHT, [parent],
                           f"At node {parent.key}. Compare {key} with {parent.key} "
                           "to choose left or right child.")
                direction = Direction(int(key > parent.key))
                child = parent.get_child(direction)
                if child is None:
                    break
                parent = child

            node.parent = parent
            parent.set_child(direction, node)
            self._emit(trace, EventKind.ADD_NODE, [node],
                       f"Inserted {key} as a red child of {parent.key}.")
            self._emit(trace, EventKind.CONNECT, [parent, node],
                       f"Connecting parent {parent.key} to new "
                       f"{direction.name.lower()} child {key}.")
            self._insert_fixup(node, trace)
        self._size += 1

        self._emit(trace, EventKind.INFO, [],
                   f"Insert operation for {key} finished. All red-black properties are "
                   "restored (root black, no red parent/child, equal black heights).")
        logger.debug("insert %r: %d events", key, len(trace))
        return trace

    def _insert_fixup(self, node: RBNode, trace: Trace):
        parent = node.parent
        while parent is not None and parent.colour == Colour.RED:
            # a red root is repainted below
            grandparent = parent.parent
            if grandparent is None:
                break

            direction = parent.get_direction()
            uncle = grandparent.get_child(Direction(1 - direction))

            # red uncle: push the blackness down from the grandparent and
            # carry on two levels up
            if colour_of(uncle) == Colour.RED:
                parent.colour = Colour.BLACK
                uncle.colour = Colour.BLACK
                grandparent.colour = Colour.RED
                self._emit(trace, EventKind.RECOLOR, [parent, uncle, grandparent],
                           f"Parent {parent.key} and uncle {uncle.key} are red. Recolor "
                           f"parent and uncle black, and grandparent {grandparent.key} red.")
                node = grandparent
                parent = node.parent
                continue

            outer = "L" if direction == Direction.LEFT else "R"
            # inner grandchild: rotate it above its parent so the shape
            # becomes the outer case
            if node is parent.get_child(Direction(1 - direction)):
                inner = "R" if outer == "L" else "L"
                self._emit(trace, EventKind.INFO, [node],
                           f"{outer}{inner} case: node {node.key} is the "
                           f"{Direction(1 - direction).name.lower()} child of a "
                           f"{direction.name.lower()} parent. Perform "
                           f"{direction.name.lower()} rotation at parent {parent.key}.")
                self._rotate_subtree(parent, direction, trace, f"{outer}{inner} case")
                node, parent = parent, node

            parent.colour = Colour.BLACK
            grandparent.colour = Colour.RED
            self._emit(trace, EventKind.RECOLOR, [parent, grandparent],
                       f"{outer}{outer} case: recolor parent {parent.key} black and "
                       f"grandparent {grandparent.key} red, then rotate "
                       f"{Direction(1 - direction).name.lower()} at {grandparent.key}.")
            self._rotate_subtree(grandparent, Direction(1 - direction), trace,
                                 f"{outer}{outer} case")

        if self.root.colour != Colour.BLACK:
            self.root.colour = Colour.BLACK
            self._emit(trace, EventKind.RECOLOR, [self.root],
                       f"Root must be black. Color root {self.root.key} black.")

    def delete(self, key) -> Trace:
        trace = Trace()
        if self.root is None:
            self._reject_empty_delete(trace)
            return trace

        target = self._search(key, trace)
        if target is None:
            self._reject_missing(trace, key)
            return trace

        # a node with 2 non-null children takes its successor's key, the
        # successor (which has no left child) is the node that gets removed
        node = target
        if target.left is not None and target.right is not None:
            node = self._min_node(target.right, trace)
            self._emit(trace, EventKind.INFO, [target, node],
                       f"Deleting node {target.key} with two children. Its inorder "
                       f"successor {node.key} will replace it.")
            target.key = node.key

        child = node.left if node.left is not None else node.right
        parent = node.parent
        direction = node.get_direction()
        removed_colour = node.colour
        self._emit(trace, EventKind.INFO, [node],
                   f"Splicing out node {node.key}, which has "
                   f"{'one child' if child is not None else 'no children'}.")
        self._transplant(node, child)
        node.left = node.right = None
        self._size -= 1

        if removed_colour == Colour.BLACK:
            if self.delete_fixup:
                self._delete_fixup(child, parent, direction, trace)
            else:
                if self.root is not None:
                    self.root.colour = Colour.BLACK
                self._emit(trace, EventKind.INFO, [],
                           "Deletion finished. Root is recolored black; full red-black "
                           "fix-up steps are simplified in this mode.")

        self._emit(trace, EventKind.INFO, [],
                   f"Delete operation finished for key {key}.")
        logger.debug("delete %r: %d events", key, len(trace))
        return trace

    def _transplant(self, old: RBNode, new: Optional[RBNode]):
        parent = old.parent
        if parent is None:
            self.root = new
        else:
            parent.set_child(old.get_direction(), new)
        if new is not None:
            new.parent = parent

    def _delete_fixup(self, node: Optional[RBNode], parent: Optional[RBNode],
                      direction: Direction, trace: Trace):
        # `node` (possibly null) hangs off `parent` on `direction` and carries
        # an extra black that has to be pushed up or absorbed
        while parent is not None and colour_of(node) == Colour.BLACK:
            opposite = Direction(1 - direction)
            sibling = parent.get_child(opposite)

            # red sibling: rotate it above the parent so the new sibling is black
            if sibling.colour == Colour.RED:
                sibling.colour = Colour.BLACK
                parent.colour = Colour.RED
                self._emit(trace, EventKind.RECOLOR, [sibling, parent],
                           f"Sibling {sibling.key} is red. Recolor it black and parent "
                           f"{parent.key} red, then rotate {direction.name.lower()} at "
                           f"{parent.key}.")
                self._rotate_subtree(parent, direction, trace, "red sibling")
                sibling = parent.get_child(opposite)

            close_nephew = sibling.get_child(direction)
            distant_nephew = sibling.get_child(opposite)

            # black sibling with black children: take one black off both
            # sides and move the deficiency up to the parent
            if colour_of(close_nephew) == Colour.BLACK and colour_of(distant_nephew) == Colour.BLACK:
                sibling.colour = Colour.RED
                self._emit(trace, EventKind.RECOLOR, [sibling],
                           f"Sibling {sibling.key} and both its children are black. "
                           f"Recolor {sibling.key} red and move the extra black up to "
                           f"{parent.key}.")
                node = parent
                parent = node.parent
                direction = node.get_direction()
                continue

            # only the close nephew is red: rotate it into the distant slot
            if colour_of(distant_nephew) == Colour.BLACK:
                close_nephew.colour = Colour.BLACK
                sibling.colour = Colour.RED
                self._emit(trace, EventKind.RECOLOR, [close_nephew, sibling],
                           f"Close nephew {close_nephew.key} is red and the distant one "
                           f"is black. Recolor {close_nephew.key} black and sibling "
                           f"{sibling.key} red, then rotate {opposite.name.lower()} "
                           f"at {sibling.key}.")
                self._rotate_subtree(sibling, opposite, trace, "red close nephew")
                sibling = parent.get_child(opposite)
                distant_nephew = sibling.get_child(opposite)

            sibling.colour = parent.colour
            parent.colour = Colour.BLACK
            distant_nephew.colour = Colour.BLACK
            self._emit(trace, EventKind.RECOLOR, [sibling, parent, distant_nephew],
                       f"Distant nephew {distant_nephew.key} is red. Sibling "
                       f"{sibling.key} takes the colour of parent {parent.key}, which "
                       f"becomes black along with {distant_nephew.key}, then rotate "
                       f"{direction.name.lower()} at {parent.key}.")
            self._rotate_subtree(parent, direction, trace, "red distant nephew")
            node = self.root
            break

        if node is not None and node.colour != Colour.BLACK:
            node.colour = Colour.BLACK
            self._emit(trace, EventKind.RECOLOR, [node],
                       f"Node {node.key} absorbs the extra black and is recolored black.")

    def _relinked(self, sub: RBNode, new_root: RBNode, moved: Optional[RBNode]):
        parent = sub.parent
        if parent is None:
            self.root = new_root
        else:
            parent.set_child(sub.get_direction(), new_root)
        new_root.parent = parent
        sub.parent = new_root
        if moved is not None:
            moved.parent = sub

    def properties(self) -> RBProperties:
        if self.root is None:
            return RBProperties(True, True, True, 0)

        state = {"no_red_red": True, "equal": True, "expected": None}

        def dfs(node: Optional[RBNode], black_count: int, parent_red: bool):
            if node is None:
                if state["expected"] is None:
                    state["expected"] = black_count
                elif black_count != state["expected"]:
                    state["equal"] = False
                return
            if node.colour == Colour.BLACK:
                black_count += 1
            elif parent_red:
                state["no_red_red"] = False
            red = node.colour == Colour.RED
            dfs(node.left, black_count, red)
            dfs(node.right, black_count, red)

        dfs(self.root, 0, False)
        root_black = self.root.colour == Colour.BLACK
        # black-height excludes the root itself
        black_height = state["expected"] - (1 if root_black else 0)
        return RBProperties(root_black, state["no_red_red"], state["equal"], black_height)

    def _describe_properties(self, props: RBProperties) -> str:
        return (f"Red-black properties: root is {'' if props.root_black else 'not '}black, "
                f"no red node has a red child ({props.no_red_red}), all root-to-leaf "
                f"paths have black height {props.black_height} "
                f"({'equal' if props.black_height_equal else 'not equal'}).")

    def pprint(self, node: Optional[RBNode], depth=0):
        if node is None:
            return "\t" * depth + "|_ null\n"
        # recursively draw a tree
        direction = node.get_direction()
        return ("\t" * depth + f"|_ {direction.name} | {node.key}: {node.colour.name}\n"
                + self.pprint(node.left, depth + 1)
                + self.pprint(node.right, depth + 1))
