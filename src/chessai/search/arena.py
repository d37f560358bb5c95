"""Self-play between AI levels.

Used to guard against strength regressions: a stronger level should score
at least as well against a weaker one as an intermediate level does.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..engine.board import Board
from ..engine.game import GameState, GameStatus, make_move
from ..engine.move import Color, Move, PieceType
from ..eval import PIECE_VALUES
from .service import SearchService


logger = logging.getLogger(__name__)

DEFAULT_MAX_PLIES = 120
# Material lead (in pawns) that decides a game cut off at the ply limit
ADJUDICATION_MARGIN = 3


@dataclass
class GameResult:
    winner: Optional[Color]
    termination: str
    plies: int
    moves: List[Move] = field(default_factory=list)


@dataclass
class MatchResult:
    """Score of ``level`` against ``opponent_level`` over a series of games."""

    level: int
    opponent_level: int
    wins: int = 0
    losses: int = 0
    draws: int = 0

    @property
    def total_games(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def score(self) -> float:
        """Points per game: win 1, draw 0.5."""
        if self.total_games == 0:
            return 0.0
        return (self.wins + 0.5 * self.draws) / self.total_games


def material_diff(board: Board) -> int:
    """Material balance in pawns, positive when white is ahead (kings excluded)."""
    diff = 0
    for _, piece in board.pieces():
        if piece.type is PieceType.KING:
            continue
        value = PIECE_VALUES[piece.type]
        diff += value if piece.color is Color.WHITE else -value
    return diff


def play_game(
    white_level: int,
    black_level: int,
    rng: Optional[random.Random] = None,
    max_plies: int = DEFAULT_MAX_PLIES,
    on_move: Optional[Callable[[GameState, Move], None]] = None,
) -> GameResult:
    """Play one game between two AI levels from the initial position.

    Games still running after ``max_plies`` are adjudicated on material.
    """
    rng = rng if rng is not None else random.Random()
    service = SearchService(rng)
    levels = {Color.WHITE: white_level, Color.BLACK: black_level}
    state = GameState.new()

    while state.game_status in (GameStatus.PLAYING, GameStatus.CHECK):
        if len(state.moves) >= max_plies:
            diff = material_diff(state.board)
            if abs(diff) >= ADJUDICATION_MARGIN:
                winner = Color.WHITE if diff > 0 else Color.BLACK
                return GameResult(winner, "material", len(state.moves), list(state.moves))
            return GameResult(None, "max_plies", len(state.moves), list(state.moves))
        color = state.current_player
        move = service.search(state.board, color, state.moves, levels[color]).best_move
        if move is None:
            break
        state = make_move(state, move.from_sq, move.to_sq)
        if on_move is not None:
            on_move(state, move)

    if state.game_status is GameStatus.CHECKMATE:
        return GameResult(
            state.current_player.opponent, "checkmate", len(state.moves), list(state.moves)
        )
    return GameResult(None, state.game_status.value, len(state.moves), list(state.moves))


def play_match(
    level: int,
    opponent_level: int,
    games: int,
    seed: Optional[int] = None,
    max_plies: int = DEFAULT_MAX_PLIES,
) -> MatchResult:
    """Play ``games`` games alternating colours; ``level`` is white in even games."""
    rng = random.Random(seed)
    result = MatchResult(level=level, opponent_level=opponent_level)
    for i in range(games):
        level_color = Color.WHITE if i % 2 == 0 else Color.BLACK
        if level_color is Color.WHITE:
            game = play_game(level, opponent_level, rng, max_plies)
        else:
            game = play_game(opponent_level, level, rng, max_plies)
        if game.winner is None:
            result.draws += 1
        elif game.winner is level_color:
            result.wins += 1
        else:
            result.losses += 1
        logger.info(
            "game %d/%d level %d (%s) vs %d: %s after %d plies (%s)",
            i + 1,
            games,
            level,
            level_color.value,
            opponent_level,
            game.winner.value if game.winner else "draw",
            game.plies,
            game.termination,
        )
    return result
