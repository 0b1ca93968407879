"""Core data records: blocks, symmetry constraints and symmetry groups."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass
class Block:
    """A hard block with its placement and orientation state."""

    name: str
    w: int
    h: int
    x: int = 0
    y: int = 0
    gid: int = -1
    rotated: bool = False
    pre_rotated: bool = False

    def rotated_width(self) -> int:
        """Width of the block in its current orientation."""
        return self.h if self.rotated else self.w

    def rotated_height(self) -> int:
        """Height of the block in its current orientation."""
        return self.w if self.rotated else self.h

    def pre_rotate(self) -> None:
        """Swap the stored dimensions and remember that this was done."""
        self.w, self.h = self.h, self.w
        self.pre_rotated = not self.pre_rotated

    def rotate(self) -> None:
        """Toggle the 90 degree rotation flag."""
        self.rotated = not self.rotated

    def is_solo(self) -> bool:
        """True when the block belongs to no symmetry group."""
        return self.gid == -1


class Axis(enum.Enum):
    """Orientation of a symmetry axis."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass
class SymmPair:
    """Two blocks mirrored about the group's axis."""

    a: str
    aid: int
    b: str
    bid: int


@dataclass
class SymmSelf:
    """A block that is symmetric about the group's axis on its own."""

    a: str
    id: int


@dataclass
class SymmGroup:
    """A named symmetry group of pairs and self-symmetric blocks."""

    name: str = ""
    gid: int = -1
    axis: Axis = Axis.VERTICAL
    pairs: list[SymmPair] = field(default_factory=list)
    selfs: list[SymmSelf] = field(default_factory=list)