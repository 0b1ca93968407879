"""B*-tree packing with a contour kept in a range-assign, range-max segment tree."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

_NEG_INF = -(1 << 63)


class SegmentTree:
    """Range assignment and range maximum over positions ``0 .. size - 1``.

    Empty ranges, and any range on an empty tree, query as 0 and update nothing.
    """

    def __init__(self, size: int = 0) -> None:
        self._size = size
        slots = max(4 * size, 1)
        self._data = [0] * slots
        self._tag = [0] * slots
        self._has_tag = [False] * slots

    def _value(self, idx: int) -> int:
        return self._tag[idx] if self._has_tag[idx] else self._data[idx]

    def _pull(self, idx: int) -> None:
        self._data[idx] = max(self._value(2 * idx), self._value(2 * idx + 1))

    def _push(self, idx: int) -> None:
        if self._has_tag[idx]:
            tag = self._tag[idx]
            self._data[idx] = tag
            self._has_tag[idx] = False
            for child in (2 * idx, 2 * idx + 1):
                self._tag[child] = tag
                self._has_tag[child] = True

    def _query(self, ql: int, qr: int, lo: int, hi: int, idx: int) -> int:
        if ql > hi or qr < lo:
            return _NEG_INF
        if ql <= lo and qr >= hi:
            return self._value(idx)
        self._push(idx)
        mid = (lo + hi) // 2
        return max(
            self._query(ql, qr, lo, mid, 2 * idx),
            self._query(ql, qr, mid + 1, hi, 2 * idx + 1),
        )

    def _update(self, val: int, ql: int, qr: int, lo: int, hi: int, idx: int) -> None:
        if ql > hi or qr < lo:
            return
        if ql <= lo and qr >= hi:
            self._tag[idx] = val
            self._has_tag[idx] = True
            return
        self._push(idx)
        mid = (lo + hi) // 2
        self._update(val, ql, qr, lo, mid, 2 * idx)
        self._update(val, ql, qr, mid + 1, hi, 2 * idx + 1)
        self._pull(idx)

    def query(self, ql: int, qr: int) -> int:
        """Maximum value over positions ``ql .. qr`` inclusive."""
        if self._size == 0 or ql > qr:
            return 0
        return self._query(ql, qr, 0, self._size - 1, 1)

    def update(self, ql: int, qr: int, val: int) -> None:
        """Assign ``val`` to positions ``ql .. qr`` inclusive."""
        if self._size == 0 or ql > qr:
            return
        self._update(val, ql, qr, 0, self._size - 1, 1)


@dataclass(eq=False)
class Node:
    """A B*-tree node: a rectangle with a position and tree links."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    parent: Node | None = field(default=None, repr=False)
    lchild: Node | None = field(default=None, repr=False)
    rchild: Node | None = field(default=None, repr=False)
    block_id: int = 0

    def set_position(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def set_shape(self, width: int, height: int) -> None:
        self.width = width
        self.height = height


def _preorder(root: Node | None) -> Iterator[Node]:
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.rchild is not None:
            stack.append(node.rchild)
        if node.lchild is not None:
            stack.append(node.lchild)


class BStarTree:
    """Packs the rectangles of a binary tree: left child to the right, right child above."""

    def __init__(self, root: Node | None = None) -> None:
        self.root = root

    def build_tree(self, preorder: Sequence[Node], inorder: Sequence[Node]) -> None:
        """Rebuild the links of the tree from its preorder and inorder sequences."""
        if len(preorder) != len(inorder):
            raise ValueError("preorder and inorder must have the same length")
        position = {node: idx for idx, node in enumerate(inorder)}
        cursor = 0

        def build(parent: Node | None, lo: int, hi: int) -> Node | None:
            nonlocal cursor
            if lo > hi or cursor >= len(preorder):
                return None
            node = preorder[cursor]
            cursor += 1
            try:
                idx = position[node]
            except KeyError:
                raise ValueError("node not found in inorder sequence") from None
            node.parent = parent
            node.lchild = build(node, lo, idx - 1)
            node.rchild = build(node, idx + 1, hi)
            return node

        self.root = build(None, 0, len(inorder) - 1)

    def set_position(self) -> None:
        """Assign coordinates to every node of the tree."""
        if self.root is None:
            return
        contour = SegmentTree(sum(node.width for node in _preorder(self.root)))
        stack: list[tuple[Node, int]] = [(self.root, 0)]
        while stack:
            node, start = stack.pop()
            end = start + node.width
            y = contour.query(start, end - 1)
            contour.update(start, end - 1, y + node.height)
            node.set_position(start, y)
            if node.rchild is not None:
                stack.append((node.rchild, start))
            if node.lchild is not None:
                stack.append((node.lchild, end))

    def area(self) -> int:
        """Area of the bounding box of the placed nodes, anchored at the origin."""
        width = height = 0
        for node in _preorder(self.root):
            width = max(width, node.x + node.width)
            height = max(height, node.y + node.height)
        return width * height