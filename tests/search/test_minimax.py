from __future__ import annotations

import pytest

from chessai.engine.board import Board
from chessai.engine.move import Color
from chessai.eval import evaluate_board
from chessai.search.service import MATE_SCORE, minimax


MATED_WHITE = """
rnb.kbnr
pppp.ppp
........
....p...
......Pq
.....P..
PPPPP..P
RNBQKBNR
"""

STALEMATED_BLACK = """
.......k
.....Q..
......K.
........
........
........
........
........
"""


def test_depth_zero_is_static_evaluation() -> None:
    b = Board.initial()
    assert minimax(b, 0, True, Color.WHITE) == evaluate_board(b, Color.WHITE)


def test_checkmate_scores_from_the_fixed_side() -> None:
    b = Board.from_diagram(MATED_WHITE)
    # White to move and mated: bad for a white maximizer, good for a black one
    assert minimax(b, 1, True, Color.WHITE) == -MATE_SCORE
    assert minimax(b, 2, False, Color.BLACK) == MATE_SCORE


def test_stalemate_scores_zero() -> None:
    b = Board.from_diagram(STALEMATED_BLACK)
    assert minimax(b, 1, True, Color.BLACK) == 0.0
    assert minimax(b, 1, False, Color.WHITE) == 0.0


def test_node_callback_counts_visits() -> None:
    visits = []
    minimax(Board.initial(), 1, True, Color.WHITE, on_node=lambda: visits.append(1))
    assert len(visits) == 21


@pytest.mark.parametrize("depth", [1, 2])
def test_opening_scores_stay_near_balance(depth: int) -> None:
    score = minimax(Board.initial(), depth, True, Color.WHITE)
    assert -1.0 < score < 1.0
