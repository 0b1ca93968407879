from types import SimpleNamespace

import pytest

from hbplace.bstar_tree import Node
from hbplace.rng import set_current_seed
from hbplace.tree_ops import (
    LeafMoveOp,
    RotateNodeOp,
    SwapNodeOp,
    build_balanced_tree,
    build_left_skewed_tree,
    build_right_skewed_tree,
    mirror_tree,
    replace_parent_child,
    swap_node_direction,
)
from hbplace.types import Block


def make_nodes(count):
    return [Node(width=i + 1, height=count - i, block_id=i) for i in range(count)]


def inorder(root):
    result, stack, node = [], [], root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.lchild
        node = stack.pop()
        result.append(node)
        node = node.rchild
    return result


def reachable(root):
    found, stack = [], [root] if root is not None else []
    while stack:
        node = stack.pop()
        found.append(node)
        stack.extend(c for c in (node.lchild, node.rchild) if c is not None)
    return found


def assert_links_consistent(root):
    assert root.parent is None
    for node in reachable(root):
        for child in (node.lchild, node.rchild):
            if child is not None:
                assert child.parent is node


def structure(root):
    def bid(node):
        return None if node is None else node.block_id

    return (
        bid(root),
        sorted(
            (n.block_id, bid(n.parent), bid(n.lchild), bid(n.rchild))
            for n in reachable(root)
        ),
    )


def test_empty_builders_return_none():
    assert build_balanced_tree([]) is None
    assert build_left_skewed_tree([]) is None
    assert build_right_skewed_tree([]) is None


def test_balanced_tree_shape():
    nodes = make_nodes(7)
    root = build_balanced_tree(nodes)
    assert root is nodes[3]
    assert root.lchild is nodes[1] and root.rchild is nodes[5]
    assert inorder(root) == nodes
    assert_links_consistent(root)


def test_left_skewed_chain():
    nodes = make_nodes(5)
    root = build_left_skewed_tree(nodes)
    chain, node = [], root
    while node is not None:
        chain.append(node)
        assert node.rchild is None
        node = node.lchild
    assert chain == nodes
    assert_links_consistent(root)


def test_right_skewed_chain():
    nodes = make_nodes(5)
    root = build_right_skewed_tree(nodes)
    chain, node = [], root
    while node is not None:
        chain.append(node)
        assert node.lchild is None
        node = node.rchild
    assert chain == nodes
    assert_links_consistent(root)


def test_replace_parent_child():
    parent, old, new = make_nodes(3)
    parent.lchild = old
    replace_parent_child(parent, old, new)
    assert parent.lchild is new
    assert parent.rchild is None
    replace_parent_child(None, new, old)
    assert parent.lchild is new


def test_swap_distant_nodes_and_back():
    nodes = make_nodes(7)
    root = build_balanced_tree(nodes)
    before = structure(root)
    swap_node_direction(nodes[0], nodes[6])
    assert nodes[6].parent is nodes[1]
    assert nodes[1].lchild is nodes[6]
    assert nodes[0].parent is nodes[5]
    assert nodes[5].rchild is nodes[0]
    assert_links_consistent(root)
    swap_node_direction(nodes[0], nodes[6])
    assert structure(root) == before


def test_swap_parent_with_child():
    nodes = make_nodes(7)
    build_balanced_tree(nodes)
    swap_node_direction(nodes[3], nodes[1])
    new_root = nodes[1]
    assert new_root.parent is None
    assert new_root.lchild is nodes[3]
    assert new_root.rchild is nodes[5]
    assert nodes[3].lchild is nodes[0] and nodes[3].rchild is nodes[2]
    assert_links_consistent(new_root)
    assert len(reachable(new_root)) == 7


def test_swap_siblings():
    nodes = make_nodes(7)
    root = build_balanced_tree(nodes)
    swap_node_direction(nodes[0], nodes[2])
    assert nodes[1].lchild is nodes[2]
    assert nodes[1].rchild is nodes[0]
    assert_links_consistent(root)


def test_mirror_reverses_inorder_and_is_involution():
    nodes = make_nodes(6)
    root = build_balanced_tree(nodes)
    before = structure(root)
    mirror_tree(root)
    assert inorder(root) == nodes[::-1]
    mirror_tree(root)
    assert structure(root) == before


def test_rotate_op_and_undo():
    set_current_seed(17)
    blocks = [Block(f"b{i}", i + 1, i + 2) for i in range(4)]
    nodes = make_nodes(4)
    op = RotateNodeOp()
    op.apply(blocks, nodes)
    assert op.valid()
    assert sum(b.rotated for b in blocks) == 1
    op.undo()
    assert not any(b.rotated for b in blocks)


def test_rotate_op_without_nodes_is_invalid():
    blocks = [Block("a", 1, 2)]
    op = RotateNodeOp()
    op.apply(blocks, [])
    assert not op.valid()
    assert blocks[0].rotated is False


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 4254943934])
def test_swap_op_keeps_tree_and_undo_restores(seed):
    set_current_seed(seed)
    nodes = make_nodes(7)
    holder = SimpleNamespace(root=build_balanced_tree(nodes))
    before = structure(holder.root)
    op = SwapNodeOp()
    op.apply(holder, "root", nodes)
    assert op.valid()
    assert_links_consistent(holder.root)
    assert len(reachable(holder.root)) == 7
    op.undo()
    assert structure(holder.root) == before


def test_swap_op_needs_two_nodes():
    nodes = make_nodes(1)
    holder = SimpleNamespace(root=build_balanced_tree(nodes))
    op = SwapNodeOp()
    op.apply(holder, "root", nodes)
    assert not op.valid()
    assert holder.root is nodes[0]


@pytest.mark.parametrize("seed", [1, 7, 99, 123456, 4254943934])
def test_leaf_move_keeps_tree_and_undo_restores(seed):
    set_current_seed(seed)
    nodes = make_nodes(7)
    root = build_balanced_tree(nodes)
    before = structure(root)
    op = LeafMoveOp()
    op.apply(root)
    assert op.valid()
    assert_links_consistent(root)
    assert len(reachable(root)) == 7
    op.undo()
    assert structure(root) == before


def test_leaf_move_on_single_node_is_invalid():
    nodes = make_nodes(1)
    root = build_balanced_tree(nodes)
    op = LeafMoveOp()
    op.apply(root)
    assert not op.valid()
    assert root.lchild is None and root.rchild is None


def test_leaf_move_on_empty_tree_is_invalid():
    op = LeafMoveOp()
    op.apply(None)
    assert not op.valid()