# hbplace

Placement of hard blocks under symmetry constraints.

Each symmetry group becomes a symmetry island. The island packs its
representative half with a B\*-tree and mirrors it about the group's axis.
Symmetric pairs are represented by their second block, and self-symmetric
blocks are halved across the axis. The islands and the remaining (solo) blocks
are then placed by a hierarchical B\*-tree. Simulated annealing searches over
block rotations, island mirroring, node swaps and leaf moves. Its cost mixes
the placement area, a penalty for unused space inside the islands, and the
total wirelength.

## Installation

```
pip install .
```

No third-party libraries are needed at run time.

## Command line

```
hbplace input.txt output.out
```

The command reads the problem, anneals it and writes the best placement found.

- Annealing stops when the temperature drops below 1, when 50 rounds in a row
  find no better cost, or after 295 seconds.
- Progress lines go to standard error through `logging`.
- With the wrong number of arguments, the command prints
  `usage: hbplace in.txt out.out` and exits with a non-zero status.
- If the input cannot be read or parsed, it prints `error: ...` to standard
  error and exits with status 1.

### Input format

The input is read as whitespace-separated tokens:

```
NumHardBlocks 3
HardBlock A 4 2
HardBlock B 4 2
HardBlock C 3 3
NumSymGroups 1
SymGroup G1 2
SymPair A B
SymSelf C
```

- Each `HardBlock` line gives a name, a width and a height.
- The `NumSymGroups` section may be left out, which means there are no groups.
- Inside a group, each entry is `SymPair <a> <b>` or `SymSelf <name>`.
- Every group uses a vertical axis at first. Annealing may turn it to a
  horizontal one.
- If the two blocks of a pair differ in width, the first block's dimensions
  are swapped before placement.
- A block name that was not declared raises `ValueError`.

### Output format

```
Area <area>

NumHardBlocks <count>
<name> <x> <y> <rotated>
...
```

Each block line gives the block's lower-left corner. The last field is `1` if
the block ends up rotated relative to its input shape, otherwise `0`.

## Library use

```python
from hbplace.placer import Placer

placer = Placer(time_limit=60)  # seconds; defaults to 295
placer.read_file("input.txt")
placer.run_simulated_annealing()
placer.write_file("output.out")
```

The modules can also be used on their own:

- `hbplace.types`: `Block`, `Axis`, `SymmPair`, `SymmSelf` and `SymmGroup`.
- `hbplace.bstar_tree`: `BStarTree` packs a tree of `Node` rectangles on a
  contour kept in a `SegmentTree`. Use `set_position()`, `area()` and
  `build_tree(preorder, inorder)`.
- `hbplace.tree_ops`: tree builders (`build_balanced_tree`,
  `build_left_skewed_tree`, `build_right_skewed_tree`), `mirror_tree` and
  `swap_node_direction`. It also has the undoable random moves
  `RotateNodeOp`, `SwapNodeOp` and `LeafMoveOp`.
- `hbplace.asf_island`: `AsfIsland` handles a single symmetry island.
  `pack_and_get_penalty_area(blocks)` places the island's blocks from the
  origin and returns its unused area.
- `hbplace.hb_tree`: `HbTree` handles the whole hierarchy.
  `pack_and_get_area(blocks, penalty_factor)` places every block and returns
  the layout area plus the weighted island penalty.
- `hbplace.placer`: `Placer`, and `total_wirelength(blocks)`, which sums the
  Manhattan distances between the centres of every pair of blocks.
- `hbplace.rng`: a seedable xorshift64\* generator (`PRNG`) and per-thread
  helpers (`rand_int`, `rand01`, `rand_sample`, `get_current_seed`,
  `set_current_seed`). It also has a `Timer` stopwatch.

The annealer draws from the calling thread's generator. That generator is
seeded from the system unless you call `set_current_seed`, so runs differ from
one another. An input of exactly 110 blocks switches to a fixed seed.

## What it does not do

- There are no nets. Wirelength is measured between every pair of blocks,
  not along connections given in the input.
- There is no drawing or viewing of placements. Output is the text file
  described above.
- Blocks are hard rectangles only. There are no soft blocks, fixed pre-placed
  blocks or outline constraints.

## Running the tests

```
pip install ".[test]"
pytest
```