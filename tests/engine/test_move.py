from __future__ import annotations

import pytest

from chessai.engine.move import Color, Move, Piece, PieceType, Position, parse_uci


def test_square_names_map_to_grid_rows_from_the_black_side() -> None:
    assert Position.from_str("a8") == Position(0, 0)
    assert Position.from_str("h1") == Position(7, 7)
    assert Position.from_str("e2") == Position(6, 4)
    assert Position(4, 4).to_str() == "e4"


@pytest.mark.parametrize("bad", ["", "e", "e9", "i1", "e0", "E2", "e22"])
def test_invalid_square_names_rejected(bad: str) -> None:
    with pytest.raises(ValueError):
        Position.from_str(bad)


def test_off_board_position_cannot_be_named() -> None:
    assert not Position(8, 0).is_valid()
    with pytest.raises(ValueError):
        Position(-1, 3).to_str()


def test_parse_uci_and_back() -> None:
    from_sq, to_sq = parse_uci("g1f3")
    assert (from_sq, to_sq) == (Position(7, 6), Position(5, 5))
    mv = Move(from_sq, to_sq, Piece(PieceType.KNIGHT, Color.WHITE))
    assert mv.to_uci() == "g1f3"
    assert not mv.is_capture


@pytest.mark.parametrize("bad", ["e2", "e2e4q", "e2x4", "z9e4"])
def test_parse_uci_rejects_malformed(bad: str) -> None:
    with pytest.raises(ValueError):
        parse_uci(bad)


def test_piece_symbols_and_moved_stamp() -> None:
    p = Piece.from_symbol("N")
    assert p == Piece(PieceType.KNIGHT, Color.WHITE)
    assert Piece.from_symbol("q").color is Color.BLACK
    assert p.symbol == "N"
    stamped = p.moved()
    assert stamped.has_moved and not p.has_moved
    assert stamped.moved() is stamped
    with pytest.raises(ValueError):
        Piece.from_symbol("x")


def test_color_helpers() -> None:
    assert Color.WHITE.opponent is Color.BLACK
    assert Color.BLACK.opponent is Color.WHITE
    assert Color.WHITE.forward == -1 and Color.BLACK.forward == 1
