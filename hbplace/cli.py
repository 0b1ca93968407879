"""Command-line entry point: read a problem, anneal it, write the layout."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from .placer import Placer

USAGE = "usage: hbplace in.txt out.out"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the placer on ``argv`` (input path, output path) and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print(USAGE)
        return -1
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)
    in_path, out_path = args
    placer = Placer()
    try:
        placer.read_file(in_path)
        placer.run_simulated_annealing()
        placer.write_file(out_path)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())