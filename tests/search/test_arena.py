from __future__ import annotations

import random

import pytest

from chessai.engine.board import Board
from chessai.engine.move import Position
from chessai.search.arena import MatchResult, material_diff, play_game, play_match


def test_material_diff() -> None:
    b = Board.initial()
    assert material_diff(b) == 0
    assert material_diff(b.with_changes({Position.from_str("d8"): None})) == 9
    assert material_diff(b.with_changes({Position.from_str("a1"): None})) == -5


def test_match_score() -> None:
    r = MatchResult(level=3, opponent_level=1, wins=2, losses=1, draws=1)
    assert r.total_games == 4
    assert r.score == pytest.approx(0.625)
    assert MatchResult(level=1, opponent_level=1).score == 0.0


def test_short_game_is_cut_off() -> None:
    seen = []
    game = play_game(2, 1, random.Random(0), max_plies=6, on_move=lambda s, m: seen.append(m))
    assert game.plies <= 6
    assert len(game.moves) == game.plies == len(seen)
    assert game.termination in ("max_plies", "material", "checkmate", "stalemate")


def test_match_counts_every_game() -> None:
    result = play_match(1, 1, games=2, seed=5, max_plies=4)
    assert result.total_games == 2


@pytest.mark.slow
@pytest.mark.parametrize("baseline", [1, 2])
def test_deeper_search_scores_at_least_as_well(baseline: int) -> None:
    strong = play_match(5, baseline, games=12, seed=11, max_plies=100)
    medium = play_match(3, baseline, games=12, seed=11, max_plies=100)
    assert strong.total_games == medium.total_games == 12
    assert strong.score >= medium.score
