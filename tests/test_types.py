import pytest

from hbplace.types import Axis, Block, SymmGroup, SymmPair, SymmSelf


def test_unrotated_dimensions_match_stored():
    block = Block("a", 3, 5)
    assert block.rotated_width() == 3
    assert block.rotated_height() == 5


def test_rotate_swaps_reported_dimensions():
    block = Block("a", 3, 5)
    block.rotate()
    assert block.rotated is True
    assert block.rotated_width() == 5
    assert block.rotated_height() == 3
    block.rotate()
    assert block.rotated is False
    assert (block.rotated_width(), block.rotated_height()) == (3, 5)


def test_pre_rotate_swaps_stored_dimensions():
    block = Block("a", 3, 5)
    block.pre_rotate()
    assert (block.w, block.h) == (5, 3)
    assert block.pre_rotated is True
    assert block.rotated is False
    block.pre_rotate()
    assert (block.w, block.h) == (3, 5)
    assert block.pre_rotated is False


def test_pre_rotate_and_rotate_compose():
    block = Block("a", 2, 7)
    block.pre_rotate()
    block.rotate()
    assert (block.rotated_width(), block.rotated_height()) == (2, 7)


def test_default_placement_is_origin():
    block = Block("a", 4, 4)
    assert (block.x, block.y) == (0, 0)


@pytest.mark.parametrize("gid, solo", [(-1, True), (0, False), (3, False)])
def test_is_solo_depends_on_group(gid, solo):
    block = Block("a", 1, 1, gid=gid)
    assert block.is_solo() is solo


def test_group_defaults():
    group = SymmGroup(name="g")
    assert group.axis is Axis.VERTICAL
    assert group.gid == -1
    assert group.pairs == []
    assert group.selfs == []


def test_group_lists_are_not_shared():
    first = SymmGroup()
    second = SymmGroup()
    first.pairs.append(SymmPair("a", 0, "b", 1))
    first.selfs.append(SymmSelf("c", 2))
    assert second.pairs == []
    assert second.selfs == []


def test_group_keeps_given_axis():
    group = SymmGroup(name="g", axis=Axis.HORIZONTAL)
    assert group.axis is Axis.HORIZONTAL
    assert group.name == "g"