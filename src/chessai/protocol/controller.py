from __future__ import annotations

import logging
import random
from typing import List, Optional

from ..engine.game import GameState, make_move, navigate_to_move
from ..engine.move import Color, Move, Position
from ..engine.rules import legal_destinations
from ..search.service import LEVELS_BY_NUMBER, SearchResult, SearchService


logger = logging.getLogger(__name__)


class GameController:
    """Interactive driver for one human-vs-AI game.

    Notes:
    - Owns the authoritative GameState and replaces it on every change.
    - Rules and search stay pure; this is the only stateful layer.
    - Moving while viewing history branches the game at the viewed move.
    """

    def __init__(
        self,
        ai_level: int = 1,
        player_color: Color = Color.WHITE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.state: GameState = GameState.new()
        self.player_color = player_color
        self.ai_level = 1
        self.set_level(ai_level)
        self.search = SearchService(rng)
        self.selected: Optional[Position] = None
        self.valid_moves: List[Position] = []
        self.last_search: Optional[SearchResult] = None

    # ---- Queries ----
    @property
    def ai_color(self) -> Color:
        return self.player_color.opponent

    @property
    def is_player_turn(self) -> bool:
        return self.state.current_player is self.player_color

    @property
    def is_game_over(self) -> bool:
        return self.state.is_over

    @property
    def is_viewing_history(self) -> bool:
        return self.state.is_viewing_history

    def legal_moves(self) -> List[str]:
        """Legal moves of the side to move on the displayed board, as ``e2e4`` strings."""
        board = self.state.board
        moves: List[str] = []
        for pos, _ in board.pieces(self.state.current_player):
            for to_sq in legal_destinations(board, pos, self.state.history):
                moves.append(pos.to_str() + to_sq.to_str())
        return moves

    # ---- Commands ----
    def reset(self) -> None:
        self.state = GameState.new()
        self._clear_selection()

    def set_level(self, level: int) -> None:
        if level not in LEVELS_BY_NUMBER:
            raise ValueError(f"AI level must be in 1..5, got {level}")
        self.ai_level = level

    def select(self, pos: Position) -> List[Position]:
        """Select the human's piece on ``pos`` and return its legal destinations.

        Anything else (empty square, opponent piece, not the human's turn)
        clears the selection and returns an empty list.
        """
        piece = self.state.board.piece_at(pos)
        if (
            piece is None
            or not self.is_player_turn
            or piece.color is not self.state.current_player
        ):
            self._clear_selection()
            return []
        self.selected = pos
        self.valid_moves = legal_destinations(self.state.board, pos, self.state.history)
        return list(self.valid_moves)

    def click(self, pos: Position) -> bool:
        """Handle a board click; return True if it completed a move.

        First click selects an own piece; a second click on one of its legal
        destinations plays the move, anywhere else re-selects or clears.
        """
        if self.selected is not None and pos in self.valid_moves:
            self.move(self.selected, pos)
            return True
        self.select(pos)
        return False

    def move(self, from_sq: Position, to_sq: Position) -> GameState:
        """Play a human move.

        Raises:
            ValueError: If it is not the human's turn or the move is illegal.
        """
        if not self.is_player_turn:
            raise ValueError("not the player's turn")
        piece = self.state.board.piece_at(from_sq)
        if piece is None or piece.color is not self.player_color:
            raise ValueError("illegal move")
        if to_sq not in legal_destinations(self.state.board, from_sq, self.state.history):
            raise ValueError("illegal move")
        self.state = make_move(self.state, from_sq, to_sq)
        self._clear_selection()
        logger.info(
            "player move %s%s status=%s",
            from_sq,
            to_sq,
            self.state.game_status.value,
        )
        return self.state

    def ai_move(self) -> Optional[Move]:
        """Let the AI play for its side on the displayed board.

        Returns:
            Optional[Move]: The move played, or None if the AI had no legal move.

        Raises:
            ValueError: If it is the human's turn or the game is over.
        """
        if self.is_player_turn:
            raise ValueError("not the AI's turn")
        if self.is_game_over:
            raise ValueError("game is over")
        result = self.search.search(
            self.state.board, self.state.current_player, self.state.history, self.ai_level
        )
        self.last_search = result
        move = result.best_move
        if move is None:
            return None
        self.state = make_move(self.state, move.from_sq, move.to_sq)
        self._clear_selection()
        logger.info(
            "ai move %s level=%d nodes=%d time_ms=%d status=%s",
            move.to_uci(),
            result.level,
            result.nodes,
            result.time_ms,
            self.state.game_status.value,
        )
        return move

    def navigate(self, index: int) -> GameState:
        """Show the position after ``moves[index]`` (-1 for the start).

        Raises:
            ValueError: If ``index`` is outside ``[-1, len(moves) - 1]``.
        """
        if index < -1 or index >= len(self.state.moves):
            raise ValueError(f"move index out of range: {index}")
        self.state = navigate_to_move(self.state, index)
        self._clear_selection()
        return self.state

    def _clear_selection(self) -> None:
        self.selected = None
        self.valid_moves = []
