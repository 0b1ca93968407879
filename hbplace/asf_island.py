"""Symmetry islands: pack the representative half of a group, then mirror it."""

from __future__ import annotations

from collections.abc import Sequence

from .bstar_tree import BStarTree, Node
from .tree_ops import (
    LeafMoveOp,
    RotateNodeOp,
    SwapNodeOp,
    build_balanced_tree,
    build_left_skewed_tree,
    build_right_skewed_tree,
    mirror_tree,
)
from .types import Axis, Block, SymmGroup


def _by_area_descending(nodes: Sequence[Node]) -> list[Node]:
    return sorted(nodes, key=lambda n: n.width * n.height, reverse=True)


class AsfIsland:
    """A symmetry island packed through a B*-tree of its representative half."""

    def __init__(self, group: SymmGroup) -> None:
        self.group = group
        self._bs_tree = BStarTree()
        self._block_ids: list[int] = []
        self._pair_nodes: list[Node] = []
        self._self_nodes: list[Node] = []
        self._all_nodes: list[Node] = []
        self._mates: dict[int, int] = {}
        self._self_ids: set[int] = set()
        self._bbox_w = 0
        self._bbox_h = 0
        self._axis_pos = 0
        self._pair_root: Node | None = None
        self._self_root: Node | None = None

    @property
    def _vertical(self) -> bool:
        return self.group.axis is Axis.VERTICAL

    def initialize(self, blocks: Sequence[Block]) -> None:
        """Create representative nodes and the initial trees; a second call does nothing."""
        if self._pair_nodes or self._self_nodes:
            return
        for pair in self.group.pairs:
            self._pair_nodes.append(Node(block_id=pair.bid))
            self._block_ids.extend((pair.aid, pair.bid))
            self._mates.setdefault(pair.bid, pair.aid)
        for single in self.group.selfs:
            self._self_nodes.append(Node(block_id=single.id))
            self._block_ids.append(single.id)
            self._self_ids.add(single.id)
        self._all_nodes = self._pair_nodes + self._self_nodes
        self.update_nodes(blocks)
        self.build_initial_solution()

    def build_initial_solution(self) -> None:
        """Balanced tree of pair representatives and a chain of self-symmetric halves."""
        pairs = _by_area_descending(self._pair_nodes)
        self._pair_root = build_balanced_tree(pairs) if pairs else None
        selfs = _by_area_descending(self._self_nodes)
        if not selfs:
            self._self_root = None
        elif self._vertical:
            self._self_root = build_right_skewed_tree(selfs)
        else:
            self._self_root = build_left_skewed_tree(selfs)

    def update_nodes(self, blocks: Sequence[Block]) -> None:
        """Copy block shapes into the nodes, halving self-symmetric blocks across the axis."""
        for node in self._pair_nodes:
            block = blocks[node.block_id]
            node.set_shape(block.rotated_width(), block.rotated_height())
        for node in self._self_nodes:
            block = blocks[node.block_id]
            width = block.rotated_width()
            height = block.rotated_height()
            if self._vertical:
                width //= 2
            else:
                height //= 2
            node.set_shape(width, height)

    def _trees_root(self) -> Node | None:
        return self._pair_root if self._pair_root is not None else self._self_root

    def _connect_trees(self) -> Node | None:
        if self._pair_root is None:
            return None
        attr = "rchild" if self._vertical else "lchild"
        node = self._pair_root
        while getattr(node, attr) is not None:
            node = getattr(node, attr)
        setattr(node, attr, self._self_root)
        return node

    def pack_and_get_penalty_area(self, blocks: Sequence[Block]) -> int:
        """Place the island's blocks from the origin and return its unused area."""
        self.update_nodes(blocks)
        connect_node = self._connect_trees()
        self._bs_tree.root = self._trees_root()
        try:
            return self._pack(blocks)
        finally:
            if connect_node is not None:
                if self._vertical:
                    connect_node.rchild = None
                else:
                    connect_node.lchild = None

    def _pack(self, blocks: Sequence[Block]) -> int:
        vertical = self._vertical
        self._axis_pos = 0
        root = self._bs_tree.root
        if root is None:
            self._bbox_w = self._bbox_h = 0
            return 0
        self._bs_tree.set_position()
        full_area = self._bs_tree.area() * 2
        block_area = 0
        min_x = min_y = None
        max_x = max_y = None

        def extend(block: Block) -> None:
            nonlocal min_x, min_y, max_x, max_y
            right = block.x + block.rotated_width()
            top = block.y + block.rotated_height()
            min_x = block.x if min_x is None else min(min_x, block.x)
            min_y = block.y if min_y is None else min(min_y, block.y)
            max_x = right if max_x is None else max(max_x, right)
            max_y = top if max_y is None else max(max_y, top)

        stack = [root]
        while stack:
            node = stack.pop()
            rep = blocks[node.block_id]
            rep.x, rep.y = node.x, node.y

            mate_id = self._mates.get(node.block_id)
            if mate_id is not None:
                mate = blocks[mate_id]
                mate.rotated = rep.rotated
                if vertical:
                    mate.x = 2 * self._axis_pos - rep.x - rep.rotated_width()
                    mate.y = rep.y
                else:
                    mate.x = rep.x
                    mate.y = 2 * self._axis_pos - rep.y - rep.rotated_height()
                block_area += rep.rotated_width() * rep.rotated_height() * 2
                extend(mate)

            if node.block_id in self._self_ids:
                if vertical:
                    rep.x = self._axis_pos - rep.rotated_width() // 2
                else:
                    rep.y = self._axis_pos - rep.rotated_height() // 2
                block_area += rep.rotated_width() * rep.rotated_height()

            extend(rep)
            if node.lchild is not None:
                stack.append(node.lchild)
            if node.rchild is not None:
                stack.append(node.rchild)

        assert min_x is not None and min_y is not None
        assert max_x is not None and max_y is not None
        dx, dy = -min_x, -min_y
        for bid in self._block_ids:
            blocks[bid].x += dx
            blocks[bid].y += dy
        self._bbox_w = max_x - min_x
        self._bbox_h = max_y - min_y
        self._axis_pos += dx if vertical else dy
        return full_area - block_area

    def mirror(self, blocks: Sequence[Block]) -> None:
        """Turn the axis by 90 degrees, rotating every block and mirroring the tree."""
        self.group.axis = Axis.HORIZONTAL if self._vertical else Axis.VERTICAL
        for bid in self._block_ids:
            blocks[bid].rotate()
        mirror_tree(self._bs_tree.root)

    def node_count(self) -> int:
        return len(self._all_nodes)

    def rotate_node_randomize(self, blocks: Sequence[Block]) -> RotateNodeOp:
        op = RotateNodeOp()
        op.apply(blocks, self._all_nodes)
        return op

    def swap_node_randomize(self) -> SwapNodeOp:
        op = SwapNodeOp()
        op.apply(self, "_pair_root", self._pair_nodes)
        return op

    def move_leaf_node_randomize(self) -> LeafMoveOp:
        op = LeafMoveOp()
        op.apply(self._pair_root)
        return op

    def width(self) -> int:
        """Width of the island's bounding box after the last packing."""
        return self._bbox_w

    def height(self) -> int:
        """Height of the island's bounding box after the last packing."""
        return self._bbox_h

    def block_ids(self) -> list[int]:
        """Indices of every block in the island."""
        return self._block_ids