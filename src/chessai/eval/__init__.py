"""Evaluation heuristics for move selection.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Final, Mapping, Tuple

from ..engine.board import Board
from ..engine.move import Color, Move, PieceType, Position


Table = Tuple[Tuple[int, ...], ...]

# Material values in pawns; the king's value only guards against a capture
# that legal play never produces.
PIECE_VALUES: Final[Mapping[PieceType, int]] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 1000,
}

CAPTURE_WEIGHT: Final = 10
CENTER_BONUS: Final = 20
CENTER_SQUARES: Final = frozenset(
    {Position(3, 3), Position(3, 4), Position(4, 3), Position(4, 4)}
)
# Positional bonuses are centipawn-like; the board evaluation works in pawns.
POSITION_SCALE: Final = 100

# Positional tables from white's point of view: row 0 is the far (black) side.
PAWN_TABLE: Final[Table] = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)
KNIGHT_TABLE: Final[Table] = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)
BISHOP_TABLE: Final[Table] = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)
ROOK_TABLE: Final[Table] = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (5, 10, 10, 10, 10, 10, 10, 5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (0, 0, 0, 5, 5, 0, 0, 0),
)
QUEEN_TABLE: Final[Table] = (
    (-20, -10, -10, -5, -5, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 5, 5, 5, 0, -10),
    (-5, 0, 5, 5, 5, 5, 0, -5),
    (0, 0, 5, 5, 5, 5, 0, -5),
    (-10, 5, 5, 5, 5, 5, 0, -10),
    (-10, 0, 5, 0, 0, 0, 0, -10),
    (-20, -10, -10, -5, -5, -10, -10, -20),
)
KING_TABLE: Final[Table] = (
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-20, -30, -30, -40, -40, -30, -30, -20),
    (-10, -20, -20, -20, -20, -20, -20, -10),
    (20, 20, 0, 0, 0, 0, 20, 20),
    (20, 30, 10, 0, 0, 10, 30, 20),
)

POSITION_TABLES: Final[Mapping[PieceType, Table]] = {
    PieceType.PAWN: PAWN_TABLE,
    PieceType.KNIGHT: KNIGHT_TABLE,
    PieceType.BISHOP: BISHOP_TABLE,
    PieceType.ROOK: ROOK_TABLE,
    PieceType.QUEEN: QUEEN_TABLE,
    PieceType.KING: KING_TABLE,
}


def position_bonus(kind: PieceType, color: Color, pos: Position) -> int:
    """Return the table bonus for ``kind`` of ``color`` standing on ``pos``.

    Tables are read directly for white and mirrored vertically for black.
    """
    row = pos.row if color is Color.WHITE else 7 - pos.row
    return POSITION_TABLES[kind][row][pos.col]


def evaluate_move(move: Move, color: Color) -> int:
    """Score a single move for ``color`` without looking ahead.

    Sum of: captured value x10, the mover's positional bonus at the
    destination, and a flat bonus for landing on one of the four center
    squares.
    """
    score = 0
    if move.captured_piece is not None:
        score += PIECE_VALUES[move.captured_piece.type] * CAPTURE_WEIGHT
    score += position_bonus(move.piece.type, color, move.to_sq)
    if move.to_sq in CENTER_SQUARES:
        score += CENTER_BONUS
    return score


def evaluate_board(board: Board, perspective: Color) -> float:
    """Material plus scaled positional score from ``perspective``'s side.

    Positive favours ``perspective`` regardless of who is to move.
    """
    score = 0.0
    for pos, piece in board.pieces():
        bonus = position_bonus(piece.type, piece.color, pos) / POSITION_SCALE
        value = PIECE_VALUES[piece.type] + bonus
        if piece.color is perspective:
            score += value
        else:
            score -= value
    return score
