from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..engine.board import Board
from ..engine.move import Color, Move
from ..engine.rules import get_all_valid_moves, is_in_check
from ..eval import PIECE_VALUES, evaluate_board, evaluate_move


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AILevel:
    level: int
    name: str
    description: str
    depth: int = 0  # minimax plies; 0 for the non-searching levels


AI_LEVELS: Tuple[AILevel, ...] = (
    AILevel(1, "Beginner", "Random moves"),
    AILevel(2, "Novice", "Captures pieces"),
    AILevel(3, "Intermediate", "Basic strategy"),
    AILevel(4, "Advanced", "Deep thinking", depth=2),
    AILevel(5, "Expert", "Master level", depth=3),
)
LEVELS_BY_NUMBER: Dict[int, AILevel] = {lv.level: lv for lv in AI_LEVELS}
MIN_LEVEL = AI_LEVELS[0].level
MAX_LEVEL = AI_LEVELS[-1].level

MATE_SCORE = 10_000
INF = float("inf")


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[float]
    level: int
    depth: int
    nodes: int
    time_ms: int


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    ai_color: Color,
    history: Sequence[Move] = (),
    alpha: float = -INF,
    beta: float = INF,
    on_node: Optional[Callable[[], None]] = None,
) -> float:
    """Alpha-beta minimax scored from ``ai_color``'s fixed point of view.

    Args:
        board (Board): Position to score; never modified.
        depth (int): Remaining plies.
        maximizing (bool): True when ``ai_color`` is to move on ``board``.
        ai_color (Color): Side the scores are relative to.
        history (Sequence[Move]): Moves leading here (en passant needs the
            last one).
        alpha (float): Best score the maximizer is already assured of.
        beta (float): Best score the minimizer is already assured of.
        on_node (Optional[Callable[[], None]]): Invoked once per visited node.

    Returns:
        float: Leaf evaluation at depth 0; ``-MATE_SCORE`` / ``MATE_SCORE``
            when the side to move is checkmated (maximizer / minimizer); 0 on
            stalemate.
    """
    if on_node is not None:
        on_node()
    if depth == 0:
        return evaluate_board(board, ai_color)

    to_move = ai_color if maximizing else ai_color.opponent
    moves = get_all_valid_moves(board, to_move, history)
    if not moves:
        if is_in_check(board, to_move):
            return -MATE_SCORE if maximizing else MATE_SCORE
        return 0.0

    if maximizing:
        best = -INF
        for move in moves:
            score = minimax(
                board.apply(move), depth - 1, False, ai_color, (move,), alpha, beta, on_node
            )
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = INF
    for move in moves:
        score = minimax(
            board.apply(move), depth - 1, True, ai_color, (move,), alpha, beta, on_node
        )
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


class SearchService:
    """Move selection at one of five strength levels.

    Responsibility: pick a move for a side using the rules engine as the only
    source of legal moves. Boards are immutable snapshots, so the live game is
    never touched. Randomness comes from the injected ``rng``.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def search(
        self,
        board: Board,
        color: Color,
        history: Sequence[Move] = (),
        level: int = MIN_LEVEL,
    ) -> SearchResult:
        start = time.perf_counter()
        ai_level = LEVELS_BY_NUMBER.get(level)
        if ai_level is None:
            logger.debug("unknown AI level %r, falling back to %d", level, MIN_LEVEL)
            ai_level = LEVELS_BY_NUMBER[MIN_LEVEL]

        moves = get_all_valid_moves(board, color, history)
        best: Optional[Move] = None
        score: Optional[float] = None
        nodes = len(moves)
        if moves:
            if ai_level.level == 1:
                best = self._random_move(moves)
            elif ai_level.level == 2:
                best, score = self._capturing_move(moves)
                if best is None:
                    best = self._random_move(moves)
            elif ai_level.level == 3:
                best, score = self._heuristic_move(moves, color)
            else:
                best, score, nodes = self._minimax_move(board, color, moves, ai_level.depth)

        time_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "search level=%d color=%s move=%s nodes=%d time_ms=%d",
            ai_level.level,
            color.value,
            best.to_uci() if best else None,
            nodes,
            time_ms,
        )
        return SearchResult(
            best_move=best,
            score=score,
            level=ai_level.level,
            depth=ai_level.depth,
            nodes=nodes,
            time_ms=time_ms,
        )

    def _random_move(self, moves: List[Move]) -> Move:
        return self.rng.choice(moves)

    def _capturing_move(self, moves: List[Move]) -> Tuple[Optional[Move], Optional[float]]:
        best: Optional[Move] = None
        best_value = 0
        for move in moves:
            if move.captured_piece is None:
                continue
            value = PIECE_VALUES[move.captured_piece.type]
            if best is None or value > best_value:
                best = move
                best_value = value
        if best is None:
            return None, None
        return best, float(best_value)

    def _heuristic_move(self, moves: List[Move], color: Color) -> Tuple[Move, float]:
        best = moves[0]
        best_score = -INF
        for move in moves:
            s = evaluate_move(move, color)
            if s > best_score:
                best_score = s
                best = move
        return best, best_score

    def _minimax_move(
        self, board: Board, color: Color, moves: List[Move], depth: int
    ) -> Tuple[Move, float, int]:
        nodes = 0

        def count() -> None:
            nonlocal nodes
            nodes += 1

        best = moves[0]
        best_score = -INF
        for move in moves:
            # Root alpha is the best score so far; ties keep the earlier move.
            s = minimax(
                board.apply(move), depth - 1, False, color, (move,), best_score, INF, count
            )
            if s > best_score:
                best_score = s
                best = move
        return best, best_score, nodes


def get_best_move(
    board: Board,
    color: Color,
    history: Sequence[Move] = (),
    level: int = MIN_LEVEL,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Return the move chosen at ``level``, or None when ``color`` has no legal move."""
    return SearchService(rng).search(board, color, history, level).best_move
