from __future__ import annotations

from typing import Dict, Sequence

from .board import Board
from .move import Color, Move
from .rules import get_all_valid_moves


def perft(board: Board, color: Color, depth: int, history: Sequence[Move] = ()) -> int:
    """Count legal move paths of length ``depth`` from ``board``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Children are produced with ``Board.apply`` and the move just played is
    passed on as history so en passant is generated inside the tree.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = get_all_valid_moves(board, color, history)
    if depth == 1:
        return len(moves)
    nodes = 0
    for m in moves:
        nodes += perft(board.apply(m), color.opponent, depth - 1, (m,))
    return nodes


def divide(board: Board, color: Color, depth: int, history: Sequence[Move] = ()) -> Dict[str, int]:
    """Return per-root-move perft counts, keyed by coordinate notation."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    return {
        m.to_uci(): perft(board.apply(m), color.opponent, depth - 1, (m,))
        for m in get_all_valid_moves(board, color, history)
    }
