from __future__ import annotations

from typing import List, Sequence

from chessai.engine.board import Board
from chessai.engine.game import GameState, GameStatus, make_move, navigate_to_move, replay
from chessai.engine.move import Color, parse_uci


OPENING = ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "f8c5", "e1g1", "g8f6"]


def play_all(moves: Sequence[str]) -> List[GameState]:
    states = [GameState.new()]
    for uci in moves:
        after = make_move(states[-1], *parse_uci(uci))
        assert after is not states[-1], uci
        states.append(after)
    return states


def test_replay_reproduces_every_position() -> None:
    states = play_all(OPENING + ["d2d4", "e5d4", "e4e5", "d7d5", "e5d6"])
    final = states[-1]
    assert final.moves[6].is_castling
    assert final.moves[-1].is_en_passant
    for k in range(-1, len(final.moves)):
        board, player = replay(final.moves, k)
        assert board == states[k + 1].board
        assert player is states[k + 1].current_player


def test_navigate_keeps_history_and_marks_viewing() -> None:
    final = play_all(OPENING)[-1]
    start = navigate_to_move(final, -1)
    assert start.board == Board.initial()
    assert start.current_player is Color.WHITE
    assert start.moves == final.moves
    assert start.move_index == -1
    assert start.is_viewing_history
    assert start.last_move is None

    back = navigate_to_move(start, len(final.moves) - 1)
    assert back.board == final.board
    assert not back.is_viewing_history


def test_navigate_out_of_range_is_a_no_op() -> None:
    final = play_all(OPENING[:2])[-1]
    assert navigate_to_move(final, 2) is final
    assert navigate_to_move(final, -2) is final


def test_navigate_recomputes_status() -> None:
    final = play_all(["e2e4", "f7f6", "d1h5"])[-1]
    assert final.game_status is GameStatus.CHECK
    earlier = navigate_to_move(final, 1)
    assert earlier.game_status is GameStatus.PLAYING
    again = navigate_to_move(earlier, 2)
    assert again.game_status is GameStatus.CHECK


def test_move_while_viewing_history_truncates_the_future() -> None:
    states = play_all(OPENING[:6])
    final = states[-1]
    viewed = navigate_to_move(final, 2)
    assert viewed.current_player is Color.BLACK

    branched = make_move(viewed, *parse_uci("d7d6"))
    assert len(branched.moves) == 4
    assert branched.moves[:3] == final.moves[:3]
    assert branched.moves[3].to_uci() == "d7d6"
    assert branched.move_index == 3
    assert not branched.is_viewing_history
    assert branched.board == replay(branched.moves, 3)[0]
