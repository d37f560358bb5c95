#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import logging
import os
import platform
import sys
import time
from typing import Any, Dict, List

# Ensure src/ is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from chessai.search.arena import DEFAULT_MAX_PLIES, play_match
from chessai.search.service import MAX_LEVEL, MIN_LEVEL


def run(levels: List[int], baseline: int, games: int, seed: int, max_plies: int) -> Dict[str, Any]:
    rows: List[Dict[str, Any]] = []
    for level in levels:
        start = time.perf_counter()
        res = play_match(level, baseline, games, seed=seed, max_plies=max_plies)
        rows.append(
            {
                "level": level,
                "baseline": baseline,
                "games": res.total_games,
                "wins": res.wins,
                "losses": res.losses,
                "draws": res.draws,
                "score": round(res.score, 3),
                "time_ms": int((time.perf_counter() - start) * 1000),
            }
        )
    return {
        "python": platform.python_version(),
        "seed": seed,
        "max_plies": max_plies,
        "results": rows,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Play AI levels against a baseline level")
    parser.add_argument(
        "--levels",
        type=int,
        nargs="+",
        default=[3, 5],
        choices=range(MIN_LEVEL, MAX_LEVEL + 1),
        help="Levels to test (default: 3 5)",
    )
    parser.add_argument("--baseline", type=int, default=MIN_LEVEL, help="Opponent level")
    parser.add_argument("--games", type=int, default=4, help="Games per level (default: 4)")
    parser.add_argument("--seed", type=int, default=0, help="RNG seed (default: 0)")
    parser.add_argument("--max-plies", type=int, default=DEFAULT_MAX_PLIES)
    parser.add_argument("--out", type=str, default=None, help="Write JSON report to this path")
    parser.add_argument("--verbose", action="store_true", help="Log every finished game")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    report = run(args.levels, args.baseline, args.games, args.seed, args.max_plies)

    for row in report["results"]:
        print(
            f"level {row['level']} vs {row['baseline']}: +{row['wins']} -{row['losses']} "
            f"={row['draws']} score={row['score']:.3f} time_ms={row['time_ms']}"
        )
    scores = [row["score"] for row in report["results"]]
    if scores != sorted(scores):
        print("warning: scores are not monotonic in level", file=sys.stderr)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)


if __name__ == "__main__":
    main()
