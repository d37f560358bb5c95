from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from .board import Board
from .move import Color, Move, Position
from .rules import build_move, has_valid_moves, is_in_check


logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game.

    Responsibility: hold the displayed board, side to move, and the full move
    history. ``move_index`` points at the move that produced ``board`` (-1 for
    the initial position); it is ``len(moves) - 1`` unless history is being
    viewed. Every operation returns a new GameState.
    """

    board: Board = field(default_factory=Board.initial)
    current_player: Color = Color.WHITE
    moves: Tuple[Move, ...] = ()
    game_status: GameStatus = GameStatus.PLAYING
    move_index: int = -1

    @classmethod
    def new(cls) -> "GameState":
        return cls()

    @property
    def is_viewing_history(self) -> bool:
        return self.move_index != len(self.moves) - 1

    @property
    def history(self) -> Tuple[Move, ...]:
        """Moves leading to the displayed board."""
        return self.moves[: self.move_index + 1]

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[self.move_index] if self.move_index >= 0 else None

    @property
    def is_over(self) -> bool:
        return self.game_status in (
            GameStatus.CHECKMATE,
            GameStatus.STALEMATE,
            GameStatus.DRAW,
        )


def classify_status(board: Board, color: Color, history: Sequence[Move]) -> GameStatus:
    """Classify the position for ``color`` to move."""
    in_check = is_in_check(board, color)
    can_move = has_valid_moves(board, color, history)
    if in_check:
        return GameStatus.CHECK if can_move else GameStatus.CHECKMATE
    if not can_move:
        return GameStatus.STALEMATE
    return GameStatus.PLAYING


def make_move(state: GameState, from_sq: Position, to_sq: Position) -> GameState:
    """Play ``from_sq`` -> ``to_sq`` and return the resulting state.

    The move is not validated: callers check ``is_valid_move`` first. When
    history is being viewed, moves after ``move_index`` are discarded before
    the new move is appended.

    Returns:
        GameState: The new state, or ``state`` itself when ``from_sq`` is empty
            or holds a piece of the side not to move.
    """
    piece = state.board.piece_at(from_sq)
    if piece is None or piece.color is not state.current_player:
        logger.debug("ignoring move from %s: no piece of the side to move", from_sq)
        return state
    move = build_move(state.board, from_sq, to_sq)
    if move is None:
        return state

    board = state.board.apply(move)
    moves = state.moves[: state.move_index + 1] + (move,)
    next_player = state.current_player.opponent
    status = classify_status(board, next_player, moves)
    if status in (GameStatus.CHECKMATE, GameStatus.STALEMATE):
        logger.debug("game over after %s: %s", move.to_uci(), status.value)

    return GameState(
        board=board,
        current_player=next_player,
        moves=moves,
        game_status=status,
        move_index=len(moves) - 1,
    )


def replay(moves: Sequence[Move], index: int) -> Tuple[Board, Color]:
    """Rebuild the board and side to move after ``moves[0..index]``.

    Args:
        moves (Sequence[Move]): Game history.
        index (int): Last move to replay; -1 yields the initial position.

    Returns:
        Tuple[Board, Color]: Reconstructed board and the side to move on it.
    """
    board = Board.initial()
    player = Color.WHITE
    for move in moves[: index + 1]:
        board = board.apply(move)
        player = player.opponent
    return board, player


def navigate_to_move(state: GameState, index: int) -> GameState:
    """Return the state showing the position after ``moves[index]``.

    The move list is kept whole so the view can move forward again. An index
    outside ``[-1, len(moves) - 1]`` leaves the state unchanged.
    """
    if index < -1 or index >= len(state.moves):
        return state
    board, player = replay(state.moves, index)
    return GameState(
        board=board,
        current_player=player,
        moves=state.moves,
        game_status=classify_status(board, player, state.moves[: index + 1]),
        move_index=index,
    )
