from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .move import Color, Move, Piece, PieceType, Position


Row = Tuple[Optional[Piece], ...]
Grid = Tuple[Row, ...]

STARTPOS_DIAGRAM = """
rnbqkbnr
pppppppp
........
........
........
........
PPPPPPPP
RNBQKBNR
"""

# Castling rook files: (rook origin column, rook destination column) per side
KINGSIDE_ROOK = (7, 5)
QUEENSIDE_ROOK = (0, 3)


def _empty_row() -> Row:
    return (None,) * 8


@dataclass(frozen=True)
class Board:
    """Immutable 8x8 board.

    Notes:
    - ``grid[row][col]``; row 0 is black's back rank, row 7 white's.
    - Every mutator returns a new Board; instances are safe to share between
      games, search branches, and threads.
    """

    grid: Grid

    @classmethod
    def empty(cls) -> "Board":
        return cls(tuple(_empty_row() for _ in range(8)))

    @classmethod
    def initial(cls) -> "Board":
        """Create a board set up in the standard starting position.

        Returns:
            Board: Board with both armies on their home ranks, nothing moved.
        """
        return cls.from_diagram(STARTPOS_DIAGRAM)

    @classmethod
    def from_diagram(cls, diagram: str, moved: Iterable[str] = ()) -> "Board":
        """Create a board from a text diagram.

        Args:
            diagram (str): Eight non-blank lines of eight characters, top line
                is row 0 (rank 8). Uppercase letters are white pieces,
                lowercase black, ``.`` is an empty square. Surrounding
                whitespace is ignored.
            moved (Iterable[str]): Squares (e.g. ``"e1"``) whose pieces are
                marked as having moved.

        Returns:
            Board: Board holding the described pieces.

        Raises:
            ValueError: If the diagram is not 8x8, holds an unknown symbol, or
                a ``moved`` square is empty.
        """
        lines = [ln.strip() for ln in diagram.strip().splitlines() if ln.strip()]
        if len(lines) != 8:
            raise ValueError("diagram must have 8 rows")
        moved_squares = {Position.from_str(s) for s in moved}
        rows: List[Row] = []
        for r, line in enumerate(lines):
            if len(line) != 8:
                raise ValueError(f"diagram row {r} must have 8 squares: {line!r}")
            cells: List[Optional[Piece]] = []
            for c, ch in enumerate(line):
                if ch == ".":
                    cells.append(None)
                else:
                    cells.append(Piece.from_symbol(ch, Position(r, c) in moved_squares))
            rows.append(tuple(cells))
        board = cls(tuple(rows))
        for sq in moved_squares:
            if board.piece_at(sq) is None:
                raise ValueError(f"no piece on moved square {sq}")
        return board

    def to_diagram(self) -> str:
        return "\n".join(self.rows())

    def rows(self) -> List[str]:
        """Return the board as eight diagram strings, row 0 first."""
        return ["".join(p.symbol if p else "." for p in row) for row in self.grid]

    def __str__(self) -> str:
        return self.to_diagram()

    def piece_at(self, pos: Position) -> Optional[Piece]:
        if not pos.is_valid():
            return None
        return self.grid[pos.row][pos.col]

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[Position, Piece]]:
        """Yield ``(position, piece)`` pairs in row-major order."""
        for r, row in enumerate(self.grid):
            for c, piece in enumerate(row):
                if piece is not None and (color is None or piece.color is color):
                    yield Position(r, c), piece

    def find_king(self, color: Color) -> Optional[Position]:
        for pos, piece in self.pieces(color):
            if piece.type is PieceType.KING:
                return pos
        return None

    def with_changes(self, changes: Dict[Position, Optional[Piece]]) -> "Board":
        """Return a copy with the given squares overwritten.

        Only the touched rows are rebuilt; untouched rows are shared.
        """
        rows = list(self.grid)
        by_row: Dict[int, List[Tuple[int, Optional[Piece]]]] = {}
        for pos, piece in changes.items():
            by_row.setdefault(pos.row, []).append((pos.col, piece))
        for r, cells in by_row.items():
            row = list(rows[r])
            for c, piece in cells:
                row[c] = piece
            rows[r] = tuple(row)
        return Board(tuple(rows))

    def relocate(self, from_sq: Position, to_sq: Position) -> "Board":
        """Move whatever stands on ``from_sq`` onto ``to_sq``, nothing else.

        Used for king-safety probes: no special-move handling, no stamping.
        """
        return self.with_changes({to_sq: self.piece_at(from_sq), from_sq: None})

    def apply(self, move: Move) -> "Board":
        """Return a new Board with ``move`` played.

        Handles en passant (the passed pawn beside the origin is removed) and
        castling (the rook jumps next to the king and is stamped as moved).
        The moving piece lands stamped as moved. The move is not validated.
        """
        changes: Dict[Position, Optional[Piece]] = {}
        if move.is_en_passant:
            changes[Position(move.from_sq.row, move.to_sq.col)] = None
        if move.is_castling:
            rook_from_col, rook_to_col = (
                KINGSIDE_ROOK if move.to_sq.col > move.from_sq.col else QUEENSIDE_ROOK
            )
            rook_from = Position(move.from_sq.row, rook_from_col)
            rook = self.piece_at(rook_from)
            changes[rook_from] = None
            changes[Position(move.from_sq.row, rook_to_col)] = rook.moved() if rook else None
        changes[move.from_sq] = None
        changes[move.to_sq] = move.piece.moved()
        return self.with_changes(changes)
