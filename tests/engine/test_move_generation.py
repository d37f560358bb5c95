from __future__ import annotations

from typing import List

from chessai.engine.board import Board
from chessai.engine.move import Color, Position
from chessai.engine.rules import (
    get_all_valid_moves,
    get_possible_moves,
    is_valid_move,
    legal_destinations,
)


def sq(name: str) -> Position:
    return Position.from_str(name)


def names(positions: List[Position]) -> List[str]:
    return [p.to_str() for p in positions]


def test_startpos_has_twenty_moves_for_each_side() -> None:
    b = Board.initial()
    assert len(get_all_valid_moves(b, Color.WHITE)) == 20
    assert len(get_all_valid_moves(b, Color.BLACK)) == 20


def test_knight_and_pawn_from_start() -> None:
    b = Board.initial()
    assert names(get_possible_moves(b, sq("b1"))) == ["a3", "c3"]
    assert names(get_possible_moves(b, sq("e2"))) == ["e3", "e4"]
    assert names(get_possible_moves(b, sq("e7"))) == ["e6", "e5"]
    # Nothing can leave the back rank except knights
    assert get_possible_moves(b, sq("a1")) == []
    assert get_possible_moves(b, sq("d1")) == []
    assert get_possible_moves(b, sq("e4")) == []


def test_blocked_pawn_cannot_advance_or_double_step() -> None:
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ........
        ........
        ....n...
        ....P...
        ....K...
        """
    )
    assert get_possible_moves(b, sq("e2")) == []

    b2 = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ........
        ....n...
        ........
        ....P...
        ....K...
        """
    )
    assert names(get_possible_moves(b2, sq("e2"))) == ["e3"]


def test_pawn_captures_diagonally_only_enemy_pieces() -> None:
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ........
        ...p.N..
        ....P...
        ........
        ....K...
        """
    )
    assert names(get_possible_moves(b, sq("e3"))) == ["e4", "d4"]


def test_sliders_stop_at_blockers_and_include_captures() -> None:
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ...p....
        ........
        ........
        ...P....
        ...R...K
        """
    )
    rook = set(names(get_possible_moves(b, sq("d1"))))
    assert rook == {"a1", "b1", "c1", "e1", "f1", "g1"}

    b2 = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ...p....
        ........
        ........
        ........
        ...R...K
        """
    )
    rook = set(names(get_possible_moves(b2, sq("d1"))))
    assert {"d2", "d3", "d4", "d5"} <= rook
    assert "d6" not in rook


def test_pinned_rook_may_only_move_along_the_pin() -> None:
    b = Board.from_diagram(
        """
        k...r...
        ........
        ........
        ........
        ........
        ........
        ....R...
        ....K...
        """
    )
    assert "d2" in names(get_possible_moves(b, sq("e2")))
    assert names(legal_destinations(b, sq("e2"))) == ["e3", "e4", "e5", "e6", "e7", "e8"]
    assert is_valid_move(b, sq("e2"), sq("e8"))
    assert not is_valid_move(b, sq("e2"), sq("d2"))


def test_king_cannot_step_into_attack() -> None:
    b = Board.from_diagram(
        """
        k.......
        ........
        ........
        ........
        ........
        ........
        .....r..
        ...K....
        """
    )
    dests = set(names(legal_destinations(b, sq("d1"))))
    assert dests == {"c1", "e1"}


def test_all_valid_moves_follow_board_order() -> None:
    moves = get_all_valid_moves(Board.initial(), Color.WHITE)
    assert [m.to_uci() for m in moves[:4]] == ["a2a3", "a2a4", "b2b3", "b2b4"]
    assert [m.to_uci() for m in moves[-4:]] == ["b1a3", "b1c3", "g1f3", "g1h3"]
