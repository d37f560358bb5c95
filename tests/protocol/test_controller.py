from __future__ import annotations

import random

import pytest

from chessai.engine.game import GameState, GameStatus, make_move
from chessai.engine.move import Color, Position, parse_uci
from chessai.protocol.controller import GameController


def sq(name: str) -> Position:
    return Position.from_str(name)


def _controller(**kwargs) -> GameController:
    return GameController(rng=random.Random(0), **kwargs)


def test_new_controller_defaults() -> None:
    ctl = _controller()
    assert ctl.ai_level == 1
    assert ctl.player_color is Color.WHITE
    assert ctl.ai_color is Color.BLACK
    assert ctl.is_player_turn
    assert not ctl.is_game_over
    assert len(ctl.legal_moves()) == 20


def test_select_own_piece_lists_destinations() -> None:
    ctl = _controller()
    assert ctl.select(sq("e2")) == [sq("e3"), sq("e4")]
    assert ctl.selected == sq("e2")
    assert ctl.select(sq("e7")) == []
    assert ctl.selected is None
    assert ctl.select(sq("e4")) == []


def test_two_clicks_play_a_move() -> None:
    ctl = _controller()
    assert not ctl.click(sq("g1"))
    assert ctl.selected == sq("g1")
    assert ctl.click(sq("f3"))
    assert ctl.selected is None
    assert ctl.state.current_player is Color.BLACK
    assert [m.to_uci() for m in ctl.state.moves] == ["g1f3"]


def test_click_elsewhere_reselects() -> None:
    ctl = _controller()
    ctl.click(sq("e2"))
    assert not ctl.click(sq("d2"))
    assert ctl.selected == sq("d2")
    assert not ctl.click(sq("d5"))
    assert ctl.selected is None


def test_move_rejects_illegal_and_out_of_turn() -> None:
    ctl = _controller()
    with pytest.raises(ValueError, match="illegal move"):
        ctl.move(sq("e2"), sq("e5"))
    with pytest.raises(ValueError, match="illegal move"):
        ctl.move(sq("e7"), sq("e5"))
    ctl.move(sq("e2"), sq("e4"))
    with pytest.raises(ValueError, match="not the player's turn"):
        ctl.move(sq("d2"), sq("d4"))


def test_ai_replies_and_hands_turn_back() -> None:
    ctl = _controller(ai_level=3)
    with pytest.raises(ValueError, match="not the AI's turn"):
        ctl.ai_move()
    ctl.move(sq("e2"), sq("e4"))
    played = ctl.ai_move()
    assert played is not None
    assert played.piece.color is Color.BLACK
    assert ctl.is_player_turn
    assert len(ctl.state.moves) == 2
    assert ctl.last_search is not None and ctl.last_search.level == 3


def test_ai_opens_when_human_plays_black() -> None:
    ctl = _controller(player_color=Color.BLACK)
    assert not ctl.is_player_turn
    assert ctl.select(sq("e2")) == []
    played = ctl.ai_move()
    assert played.piece.color is Color.WHITE
    assert ctl.is_player_turn


def test_ai_refuses_after_game_over() -> None:
    ctl = _controller(player_color=Color.BLACK)
    state = GameState.new()
    for uci in ("f2f3", "e7e5", "g2g4", "d8h4"):
        state = make_move(state, *parse_uci(uci))
    ctl.state = state
    assert ctl.is_game_over
    assert ctl.state.game_status is GameStatus.CHECKMATE
    with pytest.raises(ValueError, match="game is over"):
        ctl.ai_move()


def test_navigate_then_branch() -> None:
    ctl = _controller()
    ctl.move(sq("e2"), sq("e4"))
    ctl.ai_move()
    ctl.navigate(-1)
    assert ctl.is_viewing_history
    assert len(ctl.state.moves) == 2
    assert ctl.is_player_turn

    ctl.move(sq("d2"), sq("d4"))
    assert [m.to_uci() for m in ctl.state.moves] == ["d2d4"]
    assert not ctl.is_viewing_history

    with pytest.raises(ValueError):
        ctl.navigate(1)


def test_set_level_and_reset() -> None:
    ctl = _controller()
    ctl.set_level(5)
    assert ctl.ai_level == 5
    with pytest.raises(ValueError):
        ctl.set_level(0)
    with pytest.raises(ValueError):
        GameController(ai_level=6)

    ctl.move(sq("e2"), sq("e4"))
    ctl.reset()
    assert ctl.state.moves == ()
    assert ctl.ai_level == 5
