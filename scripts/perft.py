#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `chessduel/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chessduel.engine.board import Board, Side
from chessduel.engine.perft import perft
from chessduel.engine.state import GameState


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft from the start position or a diagram")
    parser.add_argument(
        "--diagram",
        type=str,
        default=None,
        help="File holding an 8-line board diagram (default: start position)",
    )
    parser.add_argument("--side", choices=("w", "b"), default="w", help="Side to move")
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    args = parser.parse_args()

    if args.diagram:
        with open(args.diagram, "r", encoding="utf-8") as f:
            board = Board.from_diagram(f.read())
    else:
        board = Board.startpos()
    start = time.perf_counter()
    nodes = perft(board, Side(args.side), GameState.initial(), args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
