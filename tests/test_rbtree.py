import gc

import pytest

from treetrace import rbtree as rb
from treetrace.trace import EventKind, Failure


@pytest.fixture
def tree():
    yield rb.RedBlackTree()


@pytest.mark.parametrize(
        "values,rmv,expected", [
            ([10, 12, 8], 10, 12),
            ([10, 12], 10, 12),
            ([10], 10, None),
            ([10, 12, 8], 8, 10),
            ([10, 12, 8, 6], 8, 10),
            ([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], 6, 4)
        ],
        ids=[
            "two_children",
            "one_child",
            "no_children_root",
            "no_children_red",
            "simple_rebalance",
            "complex_rebalance"
        ]
)
def test_remove(tree: rb.RedBlackTree, values, rmv, expected):
    tree.build(values)

    trace = tree.delete(rmv)

    print(tree.pprint(tree.root))

    assert trace.succeeded
    assert len(tree) == len(values) - 1
    if expected is None:
        assert tree.root is None
    else:
        assert tree.root.key == expected
        assert tree.properties().valid


def test_complex_rebalance_shape(tree: rb.RedBlackTree):
    tree.build(range(1, 11))
    tree.delete(6)

    snap = tree.snapshot()
    # the successor 7 replaced 6, then 9 was rotated above 8
    assert snap.positions[2] == 7
    assert snap.positions[6] == 9
    assert snap.colour_at(6) == rb.Colour.RED
    assert snap.positions[13] == 8 and snap.positions[14] == 10
    assert snap.colour_at(13) == rb.Colour.BLACK


def test_insert_recolor_example(tree: rb.RedBlackTree):
    trace = tree.example("recolor")

    assert trace.count_of(EventKind.RECOLOR) >= 1
    snap = tree.snapshot()
    assert snap.root_key == 10
    assert snap.colour_at(0) == rb.Colour.BLACK
    assert tree.check_properties().succeeded


def test_first_insert_is_black_root(tree: rb.RedBlackTree):
    trace = tree.insert(42)

    assert trace.kinds() == [EventKind.ADD_NODE, EventKind.INFO]
    assert trace[0].snapshot.colour_at(0) == rb.Colour.BLACK


def test_insert_connects_red_child(tree: rb.RedBlackTree):
    tree.insert(10)
    trace = tree.insert(5)

    assert trace.kinds() == [
        EventKind.HIGHLIGHT, EventKind.ADD_NODE, EventKind.CONNECT, EventKind.INFO
    ]
    connect = trace[2]
    assert connect.positions == (0, 1)
    assert connect.snapshot.colour_at(1) == rb.Colour.RED


@pytest.mark.parametrize(
        "name,rotations,root", [
            ("left-rotate", [EventKind.ROTATE_LEFT], 20),
            ("right-rotate", [EventKind.ROTATE_RIGHT], 20),
            ("double-rotate", [EventKind.ROTATE_LEFT, EventKind.ROTATE_RIGHT], 20),
        ]
)
def test_rotation(tree: rb.RedBlackTree, name, rotations, root):
    trace = tree.example(name)

    kinds = [k for k in trace.kinds() if k in (EventKind.ROTATE_LEFT, EventKind.ROTATE_RIGHT)]
    assert kinds == rotations

    snap = tree.snapshot()
    assert snap.root_key == root
    assert dict(snap.colours) == {0: rb.Colour.BLACK, 1: rb.Colour.RED, 2: rb.Colour.RED}


def test_rotation_keeps_parent_links(tree: rb.RedBlackTree):
    tree.build([30, 10, 20])

    root = tree.root
    assert root.parent is None
    assert root.left.parent is root
    assert root.right.parent is root
    assert root.left.get_direction() == rb.Direction.LEFT
    assert root.right.get_direction() == rb.Direction.RIGHT


def test_parent_is_not_an_owner(tree: rb.RedBlackTree):
    tree.build([2, 1, 3])
    child = tree.root.left

    tree.clear()
    gc.collect()

    assert child.parent is None
    assert len(tree) == 0


def test_delete_fixup_red_distant_nephew(tree: rb.RedBlackTree):
    tree.build([10, 5, 15, 1])

    trace = tree.delete(15)

    assert EventKind.ROTATE_RIGHT in trace.kinds()
    assert dict(tree.snapshot().positions) == {0: 5, 1: 1, 2: 10}
    assert tree.properties().valid


def test_delete_fixup_red_sibling(tree: rb.RedBlackTree):
    # 20 ends up with a red sibling subtree after these inserts
    tree.build([10, 5, 20, 15, 25, 30, 35])
    before = tree.properties()

    trace = tree.delete(5)

    assert before.valid
    assert trace.succeeded
    assert tree.inorder() == [10, 15, 20, 25, 30, 35]
    assert tree.properties().valid


def test_simplified_delete_reports_violation():
    tree = rb.RedBlackTree(delete_fixup=False)
    tree.build([10, 5, 15, 1])

    trace = tree.delete(15)
    check = tree.check_properties()

    assert trace.succeeded
    assert "simplified" in trace[-2].explanation
    assert not check.succeeded
    assert check.last.kind == EventKind.ERROR
    assert not tree.properties().black_height_equal


def test_delete_two_children_copies_successor(tree: rb.RedBlackTree):
    tree.build([20, 10, 30, 25, 35])

    trace = tree.delete(20)

    assert tree.root.key == 25
    assert 20 not in tree
    assert trace.count_of(EventKind.HIGHLIGHT) == 2
    assert tree.properties().valid


def test_delete_missing(tree: rb.RedBlackTree):
    tree.build([10, 5, 15])
    before = tree.snapshot()

    trace = tree.delete(7)

    assert trace.last.kind == EventKind.ERROR
    assert trace.failure == Failure.KEY_NOT_FOUND
    assert tree.snapshot() == before


def test_properties_black_height(tree: rb.RedBlackTree):
    tree.build([10, 5, 15, 1, 7, 13, 17])

    props = tree.properties()

    assert props.valid
    assert props.black_height == 1
