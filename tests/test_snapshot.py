import networkx as nx
import pytest

from treetrace import AVLTree, Colour, RedBlackTree
from treetrace import snapshot as sn


@pytest.mark.parametrize(
        "index,left,right,parent", [
            (0, 1, 2, None),
            (1, 3, 4, 0),
            (2, 5, 6, 0),
            (6, 13, 14, 2),
        ]
)
def test_position_arithmetic(index, left, right, parent):
    assert sn.left_index(index) == left
    assert sn.right_index(index) == right
    assert sn.parent_index(index) == parent
    assert sn.parent_index(left) == index and sn.parent_index(right) == index
    assert sn.child_index(index, 0) == left and sn.child_index(index, 1) == right


def test_empty_snapshot():
    snap = AVLTree().snapshot()

    assert snap.size == 0
    assert snap.count == 0
    assert snap.storage == []
    assert snap.root_key is None
    assert snap.colours is None
    assert nx.number_of_nodes(snap.to_graph()) == 0


def test_sparse_storage():
    tree = AVLTree()
    tree.build([20, 10, 30, 35])

    snap = tree.snapshot()

    assert snap.storage == [20, 10, 30, None, None, None, 35]
    assert snap.size == 7
    assert len(snap) == 4
    assert snap.keys() == [20, 10, 30, 35]
    assert sn.find_index_by_key(snap, 35) == 6
    assert sn.find_index_by_key(snap, 99) == -1


def test_snapshot_is_immutable():
    tree = AVLTree()
    tree.build([2, 1, 3])
    snap = tree.snapshot()

    with pytest.raises(TypeError):
        snap.positions[0] = 5

    tree.insert(4)
    assert snap.count == 3
    assert snap != tree.snapshot()


def test_coloured_snapshot():
    tree = RedBlackTree()
    tree.build([2, 1, 3])

    snap = tree.snapshot()

    assert snap.colour_at(0) == Colour.BLACK
    assert snap.colour_at(1) == Colour.RED
    assert snap.colour_at(5) is None
    # same keys, different colours
    assert snap != sn.TreeSnapshot(snap.positions, {0: Colour.BLACK, 1: Colour.BLACK, 2: Colour.BLACK})


def test_to_graph(shuffled_keys):
    tree = RedBlackTree()
    tree.build(shuffled_keys)

    graph = tree.snapshot().to_graph()

    assert nx.is_arborescence(graph)
    assert graph.number_of_nodes() == len(shuffled_keys)
    assert graph.in_degree(0) == 0
    assert graph.nodes[0]["key"] == tree.root.key
    assert graph.nodes[0]["colour"] == Colour.BLACK
    for parent, child, side in graph.edges(data="side"):
        assert side == ("left" if child == sn.left_index(parent) else "right")
        if side == "left":
            assert graph.nodes[child]["key"] < graph.nodes[parent]["key"]
        else:
            assert graph.nodes[child]["key"] > graph.nodes[parent]["key"]


def test_index_positions_preorder():
    tree = AVLTree()
    tree.build([20, 10, 30, 5])

    pairs = [(index, node.key) for index, node in sn.index_positions(tree.root)]

    assert pairs == [(0, 20), (1, 10), (3, 5), (2, 30)]
