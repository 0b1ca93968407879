"""Hierarchical B*-tree: symmetry islands packed as rectangles beside solo blocks."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .asf_island import AsfIsland
from .bstar_tree import BStarTree, Node
from .tree_ops import LeafMoveOp, SwapNodeOp, build_left_skewed_tree
from .types import Block, SymmGroup


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class HbTree:
    """Top-level tree holding one node per solo block and one per symmetry island."""

    def __init__(self) -> None:
        self._solo_nodes: list[Node] = []
        self._hier_nodes: list[Node] = []
        self._all_nodes: list[Node] = []
        self._islands: list[AsfIsland] = []
        self._bs_tree = BStarTree()

    def initialize(self, blocks: Sequence[Block], groups: Sequence[SymmGroup]) -> None:
        """Create nodes for solo blocks and islands, then the initial tree."""
        for idx, block in enumerate(blocks):
            if block.is_solo():
                self._solo_nodes.append(Node(block_id=idx))
        for idx, group in enumerate(groups):
            self._hier_nodes.append(Node(block_id=idx))
            island = AsfIsland(group)
            island.initialize(blocks)
            self._islands.append(island)
        self._all_nodes = self._solo_nodes + self._hier_nodes
        self.update_nodes(blocks)
        self.build_initial_solution()

    def update_nodes(self, blocks: Sequence[Block]) -> None:
        """Copy block shapes and island bounding boxes into the nodes."""
        for node in self._solo_nodes:
            block = blocks[node.block_id]
            node.set_shape(block.rotated_width(), block.rotated_height())
        for node in self._hier_nodes:
            island = self._islands[node.block_id]
            node.set_shape(island.width(), island.height())

    def build_initial_solution(self) -> None:
        """Chain all nodes, largest first, through left children."""
        ordered = sorted(self._all_nodes, key=lambda n: n.width * n.height, reverse=True)
        self._bs_tree.root = build_left_skewed_tree(ordered)

    def pack_and_get_area(self, blocks: Sequence[Block], penalty_factor: float = 0.0) -> int:
        """Place every block and return the layout area plus the weighted island penalty."""
        penalty = sum(island.pack_and_get_penalty_area(blocks) for island in self._islands)
        penalty = _round_half_away(penalty_factor * penalty)

        self.update_nodes(blocks)
        self._bs_tree.set_position()

        for node, island in zip(self._hier_nodes, self._islands):
            for bid in island.block_ids():
                blocks[bid].x += node.x
                blocks[bid].y += node.y

        for node in self._solo_nodes:
            block = blocks[node.block_id]
            block.x, block.y = node.x, node.y

        return self._bs_tree.area() + penalty

    def node_count(self) -> int:
        return len(self._all_nodes)

    def _is_solo_node(self, idx: int) -> bool:
        return idx < len(self._solo_nodes)

    def _get_node(self, idx: int) -> Node:
        if not 0 <= idx < len(self._all_nodes):
            raise IndexError(f"node index {idx} out of range")
        return self._all_nodes[idx]

    def get_island(self, idx: int) -> AsfIsland:
        if not 0 <= idx < len(self._islands):
            raise IndexError(f"island index {idx} out of range")
        return self._islands[idx]

    def rotate_node(self, blocks: Sequence[Block], idx: int) -> None:
        """Rotate a solo block or mirror an island, chosen by node index."""
        node = self._get_node(idx)
        if self._is_solo_node(idx):
            blocks[node.block_id].rotate()
        else:
            self._islands[node.block_id].mirror(blocks)

    def swap_node_randomize(self) -> SwapNodeOp:
        op = SwapNodeOp()
        op.apply(self._bs_tree, "root", self._all_nodes)
        return op

    def move_leaf_node_randomize(self) -> LeafMoveOp:
        op = LeafMoveOp()
        op.apply(self._bs_tree.root)
        return op