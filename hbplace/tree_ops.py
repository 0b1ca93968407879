"""Tree construction helpers and undoable random moves on B*-trees."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from .bstar_tree import Node
from .rng import rand_int, rand_sample
from .types import Block


def _preorder(root: Node | None) -> Iterator[Node]:
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.rchild is not None:
            stack.append(node.rchild)
        if node.lchild is not None:
            stack.append(node.lchild)


def build_balanced_tree(nodes: Sequence[Node]) -> Node | None:
    """Link ``nodes`` into a balanced tree whose inorder is their order; return the root."""

    def build(parent: Node | None, lo: int, hi: int) -> Node | None:
        if lo > hi:
            return None
        mid = (lo + hi) // 2
        node = nodes[mid]
        node.parent = parent
        node.lchild = build(node, lo, mid - 1)
        node.rchild = build(node, mid + 1, hi)
        return node

    return build(None, 0, len(nodes) - 1)


def _build_chain(nodes: Sequence[Node], attr: str) -> Node | None:
    root: Node | None = None
    parent: Node | None = None
    for node in nodes:
        node.parent = parent
        node.lchild = None
        node.rchild = None
        if parent is None:
            root = node
        else:
            setattr(parent, attr, node)
        parent = node
    return root


def build_left_skewed_tree(nodes: Sequence[Node]) -> Node | None:
    """Chain ``nodes`` through left children; return the root."""
    return _build_chain(nodes, "lchild")


def build_right_skewed_tree(nodes: Sequence[Node]) -> Node | None:
    """Chain ``nodes`` through right children; return the root."""
    return _build_chain(nodes, "rchild")


def replace_parent_child(parent: Node | None, old_child: Node | None, new_child: Node | None) -> None:
    """Point whichever child link of ``parent`` held ``old_child`` at ``new_child``."""
    if parent is None:
        return
    if parent.lchild is old_child:
        parent.lchild = new_child
    if parent.rchild is old_child:
        parent.rchild = new_child


def swap_node_direction(src: Node, dst: Node) -> None:
    """Exchange the tree positions of two nodes of the same tree."""
    if src.parent is not dst.parent:
        replace_parent_child(src.parent, src, dst)
        replace_parent_child(dst.parent, dst, src)
    elif src.parent is not None:
        parent = src.parent
        parent.lchild, parent.rchild = parent.rchild, parent.lchild

    src.parent, dst.parent = dst.parent, src.parent
    src.lchild, dst.lchild = dst.lchild, src.lchild
    src.rchild, dst.rchild = dst.rchild, src.rchild

    for node in (src, dst):
        for child in (node.lchild, node.rchild):
            if child is not None:
                child.parent = node


def mirror_tree(node: Node | None) -> None:
    """Swap left and right children throughout the subtree."""
    for current in list(_preorder(node)):
        current.lchild, current.rchild = current.rchild, current.lchild


class RotateNodeOp:
    """Rotate the block of one randomly chosen node."""

    def __init__(self) -> None:
        self._num_nodes = 0
        self._block: Block | None = None

    def apply(self, blocks: Sequence[Block], nodes: Sequence[Node]) -> None:
        self._num_nodes = len(nodes)
        if not self.valid():
            return
        node = nodes[rand_int(0, self._num_nodes - 1)]
        self._block = blocks[node.block_id]
        self._block.rotate()

    def undo(self) -> None:
        if self.valid() and self._block is not None:
            self._block.rotate()

    def valid(self) -> bool:
        return self._num_nodes >= 1


class SwapNodeOp:
    """Swap the positions of two random nodes; the root lives at ``owner.attr``."""

    def __init__(self) -> None:
        self._num_nodes = 0
        self._owner: Any = None
        self._attr = ""
        self._src: Node | None = None
        self._dst: Node | None = None

    def apply(self, owner: Any, attr: str, nodes: Sequence[Node]) -> None:
        self._num_nodes = len(nodes)
        if not self.valid():
            return
        first, second = rand_sample(0, self._num_nodes - 1, 2)
        self._src = nodes[first]
        self._dst = nodes[second]
        self._owner = owner
        self._attr = attr
        self._exchange()

    def _exchange(self) -> None:
        assert self._src is not None and self._dst is not None
        root = getattr(self._owner, self._attr)
        if root is self._src:
            setattr(self._owner, self._attr, self._dst)
        elif root is self._dst:
            setattr(self._owner, self._attr, self._src)
        swap_node_direction(self._src, self._dst)

    def undo(self) -> None:
        if self.valid():
            self._exchange()

    def valid(self) -> bool:
        return self._num_nodes >= 2


class LeafMoveOp:
    """Detach a random leaf and attach it at a random free child slot."""

    def __init__(self) -> None:
        self._leaf: Node | None = None
        self._old_parent: Node | None = None
        self._was_left_child = False
        self._new_parent: Node | None = None
        self._inserted_as_left = False

    def apply(self, root: Node | None) -> None:
        if root is None:
            return
        leaves = [n for n in _preorder(root) if n.lchild is None and n.rchild is None]
        leaf = leaves[rand_int(0, len(leaves) - 1)]
        old_parent = leaf.parent
        if old_parent is None:
            return
        self._leaf = leaf
        self._old_parent = old_parent
        self._was_left_child = old_parent.lchild is leaf

        if self._was_left_child:
            old_parent.lchild = None
        else:
            old_parent.rchild = None
        leaf.parent = None

        candidates = [
            n
            for n in _preorder(root)
            if (n.lchild is None or n.rchild is None) and n is not leaf
        ]
        if not candidates:
            return
        new_parent = candidates[rand_int(0, len(candidates) - 1)]
        self._new_parent = new_parent
        self._inserted_as_left = new_parent.lchild is None
        if self._inserted_as_left:
            new_parent.lchild = leaf
        else:
            new_parent.rchild = leaf
        leaf.parent = new_parent

    def undo(self) -> None:
        if not self.valid():
            return
        assert self._leaf is not None and self._old_parent is not None
        new_parent = self._new_parent
        assert new_parent is not None
        if self._inserted_as_left:
            new_parent.lchild = None
        else:
            new_parent.rchild = None
        if self._was_left_child:
            self._old_parent.lchild = self._leaf
        else:
            self._old_parent.rchild = self._leaf
        self._leaf.parent = self._old_parent

    def valid(self) -> bool:
        return self._new_parent is not None