from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


FILES = "abcdefgh"


class Color(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a pawn step (white moves up the grid toward row 0)."""
        return -1 if self is Color.WHITE else 1


class PieceType(str, Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


PIECE_TO_CHAR = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}


@dataclass(frozen=True)
class Piece:
    """A piece value. Boards and moves hold snapshots, never shared mutable pieces.

    Attributes:
        type (PieceType): Kind of piece.
        color (Color): Owning side.
        has_moved (bool): Whether this piece instance has moved (castling rights).
    """

    type: PieceType
    color: Color
    has_moved: bool = False

    def moved(self) -> "Piece":
        return self if self.has_moved else replace(self, has_moved=True)

    @property
    def symbol(self) -> str:
        """Diagram letter: uppercase for white, lowercase for black."""
        ch = PIECE_TO_CHAR[self.type]
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str, has_moved: bool = False) -> "Piece":
        if ch.lower() not in CHAR_TO_PIECE:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        color = Color.WHITE if ch.isupper() else Color.BLACK
        return cls(CHAR_TO_PIECE[ch.lower()], color, has_moved)


@dataclass(frozen=True)
class Position:
    """Grid coordinate. Row 0 is black's back rank, row 7 is white's."""

    row: int
    col: int

    def is_valid(self) -> bool:
        return 0 <= self.row < 8 and 0 <= self.col < 8

    def offset(self, drow: int, dcol: int) -> "Position":
        return Position(self.row + drow, self.col + dcol)

    def to_str(self) -> str:
        """Serialize into algebraic notation.

        Returns:
            str: Square name such as ``"e2"``.

        Raises:
            ValueError: If the position is off the board.
        """
        if not self.is_valid():
            raise ValueError(f"invalid position: ({self.row}, {self.col})")
        return FILES[self.col] + str(8 - self.row)

    @classmethod
    def from_str(cls, s: str) -> "Position":
        """Parse algebraic notation into a grid position.

        Args:
            s (str): Square name such as ``"e4"``.

        Returns:
            Position: Row/column pair (``"a8"`` is ``(0, 0)``).

        Raises:
            ValueError: If ``s`` is not a valid square.
        """
        if len(s) != 2 or s[0] not in FILES or s[1] < "1" or s[1] > "8":
            raise ValueError(f"invalid square: {s!r}")
        return cls(8 - int(s[1]), FILES.index(s[0]))

    def __str__(self) -> str:
        return self.to_str() if self.is_valid() else f"({self.row}, {self.col})"


@dataclass(frozen=True)
class Move:
    """A move record as stored in game history.

    Attributes:
        from_sq (Position): Origin square.
        to_sq (Position): Destination square.
        piece (Piece): Snapshot of the moving piece before the move.
        captured_piece (Optional[Piece]): Snapshot of the captured piece, if any.
        is_en_passant (bool): Pawn captured the pawn beside it, landing behind it.
        is_castling (bool): King moved two files; the rook is relocated too.
        promotion (Optional[PieceType]): Reserved; pawns are never promoted.
    """

    from_sq: Position
    to_sq: Position
    piece: Piece
    captured_piece: Optional[Piece] = None
    is_en_passant: bool = False
    is_castling: bool = False
    promotion: Optional[PieceType] = None

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    def to_uci(self) -> str:
        """Serialize the move in coordinate form.

        Returns:
            str: Move encoded like ``"e2e4"``.
        """
        return self.from_sq.to_str() + self.to_sq.to_str()


def parse_uci(uci: str) -> Tuple[Position, Position]:
    """Parse a coordinate move string into its two squares.

    Args:
        uci (str): Move such as ``"e2e4"``.

    Returns:
        Tuple[Position, Position]: Origin and destination.

    Raises:
        ValueError: If the string has an invalid length or squares. Promotion
            suffixes are rejected since promotion is not part of the rules.
    """
    if len(uci) != 4:
        raise ValueError(f"invalid move length: {uci!r}")
    return Position.from_str(uci[0:2]), Position.from_str(uci[2:4])
