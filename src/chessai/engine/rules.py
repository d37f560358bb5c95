"""Move generation, attack detection and legality filtering.

Pure functions over immutable boards. ``history`` arguments are the moves
played so far; only the most recent entry is consulted (en passant).
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .board import Board
from .move import Color, Move, Piece, PieceType, Position


Direction = Tuple[int, int]

ROOK_DIRS: Tuple[Direction, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
BISHOP_DIRS: Tuple[Direction, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: Tuple[Direction, ...] = ROOK_DIRS + BISHOP_DIRS
KNIGHT_OFFSETS: Tuple[Direction, ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)
KING_OFFSETS: Tuple[Direction, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

PAWN_START_ROW = {Color.WHITE: 6, Color.BLACK: 1}


def get_possible_moves(
    board: Board, pos: Position, history: Sequence[Move] = ()
) -> List[Position]:
    """Return pseudo-legal destinations for the piece on ``pos``.

    Destinations obey the piece's movement pattern plus blocking and capture
    rules but are not yet filtered for leaving the own king in check.

    Args:
        board (Board): Position to inspect.
        pos (Position): Square of the piece to move.
        history (Sequence[Move]): Moves played so far (en passant needs the
            last one).

    Returns:
        List[Position]: Destinations in generation order; empty when ``pos``
            holds no piece.
    """
    piece = board.piece_at(pos)
    if piece is None:
        return []
    kind = piece.type
    if kind is PieceType.PAWN:
        return _pawn_moves(board, pos, piece.color, history)
    elif kind is PieceType.KNIGHT:
        return _step_moves(board, pos, piece.color, KNIGHT_OFFSETS)
    elif kind is PieceType.BISHOP:
        return _sliding_moves(board, pos, piece.color, BISHOP_DIRS)
    elif kind is PieceType.ROOK:
        return _sliding_moves(board, pos, piece.color, ROOK_DIRS)
    elif kind is PieceType.QUEEN:
        return _sliding_moves(board, pos, piece.color, QUEEN_DIRS)
    elif kind is PieceType.KING:
        return _king_moves(board, pos, piece)
    raise ValueError(f"unknown piece type: {kind!r}")


def _pawn_moves(
    board: Board, pos: Position, color: Color, history: Sequence[Move]
) -> List[Position]:
    moves: List[Position] = []
    direction = color.forward

    one_step = pos.offset(direction, 0)
    if one_step.is_valid() and board.piece_at(one_step) is None:
        moves.append(one_step)
        if pos.row == PAWN_START_ROW[color]:
            two_step = pos.offset(2 * direction, 0)
            if two_step.is_valid() and board.piece_at(two_step) is None:
                moves.append(two_step)

    for dcol in (-1, 1):
        target = pos.offset(direction, dcol)
        victim = board.piece_at(target)
        if victim is not None and victim.color is not color:
            moves.append(target)

    if history:
        last = history[-1]
        if (
            last.piece.type is PieceType.PAWN
            and last.piece.color is not color
            and abs(last.from_sq.row - last.to_sq.row) == 2
            and last.to_sq.row == pos.row
            and abs(last.to_sq.col - pos.col) == 1
        ):
            target = Position(pos.row + direction, last.to_sq.col)
            if target.is_valid():
                moves.append(target)

    return moves


def _sliding_moves(
    board: Board, pos: Position, color: Color, directions: Sequence[Direction]
) -> List[Position]:
    moves: List[Position] = []
    for dr, dc in directions:
        target = pos.offset(dr, dc)
        while target.is_valid():
            occupant = board.piece_at(target)
            if occupant is None:
                moves.append(target)
            else:
                if occupant.color is not color:
                    moves.append(target)
                break
            target = target.offset(dr, dc)
    return moves


def _step_moves(
    board: Board, pos: Position, color: Color, offsets: Sequence[Direction]
) -> List[Position]:
    moves: List[Position] = []
    for dr, dc in offsets:
        target = pos.offset(dr, dc)
        if not target.is_valid():
            continue
        occupant = board.piece_at(target)
        if occupant is None or occupant.color is not color:
            moves.append(target)
    return moves


def _king_moves(board: Board, pos: Position, king: Piece) -> List[Position]:
    moves = _step_moves(board, pos, king.color, KING_OFFSETS)

    # Castling only checks the king is not in check now; transit squares are
    # not tested for attacks.
    if king.has_moved or is_in_check(board, king.color):
        return moves
    for rook_col, between, king_to in ((7, (5, 6), 6), (0, (1, 2, 3), 2)):
        rook = board.piece_at(Position(pos.row, rook_col))
        if (
            rook is not None
            and rook.type is PieceType.ROOK
            and rook.color is king.color
            and not rook.has_moved
            and all(board.piece_at(Position(pos.row, c)) is None for c in between)
        ):
            moves.append(Position(pos.row, king_to))
    return moves


def is_square_attacked(board: Board, target: Position, by_color: Color) -> bool:
    """Return True if any piece of ``by_color`` attacks ``target``.

    Uses per-piece attack patterns rather than move generation, so it never
    recurses into castling (which itself asks whether the king is in check).
    Pawns attack their two forward diagonals whether or not the square is
    occupied.
    """
    for pos, piece in board.pieces(by_color):
        if pos == target:
            continue
        if _attacks(board, pos, piece, target):
            return True
    return False


def _attacks(board: Board, pos: Position, piece: Piece, target: Position) -> bool:
    drow = target.row - pos.row
    dcol = target.col - pos.col
    kind = piece.type
    if kind is PieceType.PAWN:
        return drow == piece.color.forward and abs(dcol) == 1
    elif kind is PieceType.KNIGHT:
        return (abs(drow), abs(dcol)) in ((1, 2), (2, 1))
    elif kind is PieceType.BISHOP:
        return abs(drow) == abs(dcol) and _clear_path(board, pos, target)
    elif kind is PieceType.ROOK:
        return (drow == 0 or dcol == 0) and _clear_path(board, pos, target)
    elif kind is PieceType.QUEEN:
        return (drow == 0 or dcol == 0 or abs(drow) == abs(dcol)) and _clear_path(
            board, pos, target
        )
    elif kind is PieceType.KING:
        return max(abs(drow), abs(dcol)) == 1
    raise ValueError(f"unknown piece type: {kind!r}")


def _clear_path(board: Board, from_sq: Position, to_sq: Position) -> bool:
    """Return True if every square strictly between the two is empty."""
    dr = (to_sq.row > from_sq.row) - (to_sq.row < from_sq.row)
    dc = (to_sq.col > from_sq.col) - (to_sq.col < from_sq.col)
    cur = from_sq.offset(dr, dc)
    while cur != to_sq:
        if board.piece_at(cur) is not None:
            return False
        cur = cur.offset(dr, dc)
    return True


def is_in_check(board: Board, color: Color) -> bool:
    """Return True if ``color``'s king is attacked (False if it has no king)."""
    king = board.find_king(color)
    if king is None:
        return False
    return is_square_attacked(board, king, color.opponent)


def would_be_valid_after_move(
    board: Board, from_sq: Position, to_sq: Position, color: Color
) -> bool:
    """Return True if relocating ``from_sq`` to ``to_sq`` keeps ``color`` safe.

    The probe relocates the piece on a scratch board and, for a pawn moving
    diagonally onto an empty square, also lifts the en-passant victim so a
    line opened along the rank is seen. Castling rooks are not moved.
    """
    probe = board.relocate(from_sq, to_sq)
    piece = board.piece_at(from_sq)
    if (
        piece is not None
        and piece.type is PieceType.PAWN
        and from_sq.col != to_sq.col
        and board.piece_at(to_sq) is None
    ):
        probe = probe.with_changes({Position(from_sq.row, to_sq.col): None})
    return not is_in_check(probe, color)


def build_move(board: Board, from_sq: Position, to_sq: Position) -> Optional[Move]:
    """Describe playing ``from_sq`` -> ``to_sq`` on ``board`` as a Move record.

    Detects en passant (pawn changes file onto an empty square; the passed pawn
    beside the origin is the captured piece) and castling (king moves two
    files). Returns None when ``from_sq`` is empty.
    """
    piece = board.piece_at(from_sq)
    if piece is None:
        return None
    captured = board.piece_at(to_sq)
    is_en_passant = False
    if piece.type is PieceType.PAWN and captured is None and from_sq.col != to_sq.col:
        is_en_passant = True
        captured = board.piece_at(Position(from_sq.row, to_sq.col))
    is_castling = piece.type is PieceType.KING and abs(from_sq.col - to_sq.col) == 2
    return Move(
        from_sq=from_sq,
        to_sq=to_sq,
        piece=piece,
        captured_piece=captured,
        is_en_passant=is_en_passant,
        is_castling=is_castling,
    )


def get_all_valid_moves(
    board: Board, color: Color, history: Sequence[Move] = ()
) -> List[Move]:
    """Return every legal move for ``color``.

    Pieces are visited row-major from row 0; each piece's destinations keep
    generation order. Search tie-breaks rely on this order.
    """
    moves: List[Move] = []
    for from_sq, _ in board.pieces(color):
        for to_sq in get_possible_moves(board, from_sq, history):
            if would_be_valid_after_move(board, from_sq, to_sq, color):
                move = build_move(board, from_sq, to_sq)
                if move is not None:
                    moves.append(move)
    return moves


def has_valid_moves(board: Board, color: Color, history: Sequence[Move] = ()) -> bool:
    for from_sq, _ in board.pieces(color):
        for to_sq in get_possible_moves(board, from_sq, history):
            if would_be_valid_after_move(board, from_sq, to_sq, color):
                return True
    return False


def legal_destinations(
    board: Board, pos: Position, history: Sequence[Move] = ()
) -> List[Position]:
    """Destinations offered to a player who selects the piece on ``pos``."""
    piece = board.piece_at(pos)
    if piece is None:
        return []
    return [
        to_sq
        for to_sq in get_possible_moves(board, pos, history)
        if would_be_valid_after_move(board, pos, to_sq, piece.color)
    ]


def is_valid_move(
    board: Board, from_sq: Position, to_sq: Position, history: Sequence[Move] = ()
) -> bool:
    return to_sq in legal_destinations(board, from_sq, history)
