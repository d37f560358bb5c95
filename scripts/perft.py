#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo's src/ directory to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from chessai.engine.board import Board
from chessai.engine.move import Color
from chessai.engine.perft import divide, perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Count move paths from a position")
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--diagram",
        type=str,
        default=None,
        help="File with an 8-line board diagram (default: starting position)",
    )
    parser.add_argument(
        "--color", choices=[c.value for c in Color], default="white", help="Side to move"
    )
    parser.add_argument("--divide", action="store_true", help="Print per-root-move counts")
    args = parser.parse_args()

    if args.diagram:
        with open(args.diagram, "r", encoding="utf-8") as f:
            board = Board.from_diagram(f.read())
    else:
        board = Board.initial()
    color = Color(args.color)

    start = time.perf_counter()
    if args.divide:
        counts = divide(board, color, args.depth)
        for uci, n in sorted(counts.items()):
            print(f"{uci}: {n}")
        nodes = sum(counts.values())
    else:
        nodes = perft(board, color, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
