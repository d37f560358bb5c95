from __future__ import annotations

import logging
import random
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ..controller import GameController
from ...config import GameConfig
from ...engine.game import GameStatus
from ...engine.move import Color, Position, parse_uci
from ...search.service import AI_LEVELS, MAX_LEVEL, MIN_LEVEL


logger = logging.getLogger(__name__)


class LevelInfo(BaseModel):
    level: int
    name: str
    description: str


class CreateGameRequest(BaseModel):
    ai_level: Optional[int] = Field(default=None, ge=MIN_LEVEL, le=MAX_LEVEL)
    player_color: Optional[Literal["white", "black"]] = None


class SelectRequest(BaseModel):
    square: str = Field(..., description="Square in algebraic notation, e.g. e2")


class SelectResponse(BaseModel):
    square: str
    destinations: List[str]


class MoveRequest(BaseModel):
    move: str = Field(..., description="Coordinate move string, e.g. e2e4")


class NavigateRequest(BaseModel):
    index: int = Field(..., ge=-1, description="Move index to show; -1 is the start")


class LevelRequest(BaseModel):
    level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL)


class GameStateModel(BaseModel):
    game_id: str
    board: List[str]
    current_player: str
    status: str
    in_check: bool
    move_history: List[str]
    move_index: int
    viewing_history: bool
    last_move: Optional[str]
    legal_moves: List[str]
    ai_level: int
    player_color: str


class AIMoveResponse(BaseModel):
    move: Optional[str]
    score: Optional[float]
    level: int
    depth: int
    nodes: int
    time_ms: int
    state: GameStateModel


def create_app(game_config: Optional[GameConfig] = None, log_level: str = "INFO") -> FastAPI:
    app = FastAPI(title="Chess AI API", version="0.1.0")
    config = game_config if game_config is not None else GameConfig.from_env()

    logging.basicConfig(level=log_level.upper())

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    def new_controller(
        ai_level: Optional[int] = None, player_color: Optional[str] = None
    ) -> GameController:
        rng = random.Random(config.seed) if config.seed is not None else None
        return GameController(
            ai_level=ai_level if ai_level is not None else config.ai_level,
            player_color=Color(player_color or config.player_color),
            rng=rng,
        )

    store = InMemorySessionStore(new_controller)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/levels", response_model=List[LevelInfo])
    async def levels() -> List[LevelInfo]:
        return [
            LevelInfo(level=lv.level, name=lv.name, description=lv.description)
            for lv in AI_LEVELS
        ]

    @app.post("/api/games", response_model=GameStateModel)
    async def create_game(req: Optional[CreateGameRequest] = None) -> GameStateModel:
        req = req or CreateGameRequest()
        game_id = store.create(new_controller(req.ai_level, req.player_color))
        logger.info("game created", extra={"game_id": game_id, "sessions": len(store)})
        return _state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/state", response_model=GameStateModel)
    async def get_state(game_id: str) -> GameStateModel:
        return _state(game_id, _require_game(store, game_id))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        logger.info("game deleted", extra={"game_id": game_id, "sessions": len(store)})
        return {"status": "deleted"}

    @app.post("/api/games/{game_id}/select", response_model=SelectResponse)
    async def select(game_id: str, req: SelectRequest) -> SelectResponse:
        ctl = _require_game(store, game_id)
        pos = _parse_square(req.square)
        destinations = ctl.select(pos)
        return SelectResponse(
            square=pos.to_str(), destinations=[d.to_str() for d in destinations]
        )

    @app.post("/api/games/{game_id}/move", response_model=GameStateModel)
    async def move(game_id: str, req: MoveRequest) -> GameStateModel:
        ctl = _require_game(store, game_id)
        try:
            from_sq, to_sq = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not ctl.is_player_turn:
            raise HTTPException(status_code=409, detail="not the player's turn")
        try:
            ctl.move(from_sq, to_sq)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        return _state(game_id, ctl)

    @app.post("/api/games/{game_id}/ai-move", response_model=AIMoveResponse)
    async def ai_move(game_id: str) -> AIMoveResponse:
        ctl = _require_game(store, game_id)
        if ctl.is_player_turn:
            raise HTTPException(status_code=409, detail="not the AI's turn")
        if ctl.is_game_over:
            raise HTTPException(status_code=409, detail="game is over")
        played = ctl.ai_move()
        res = ctl.last_search
        return AIMoveResponse(
            move=played.to_uci() if played else None,
            score=res.score if res else None,
            level=res.level if res else ctl.ai_level,
            depth=res.depth if res else 0,
            nodes=res.nodes if res else 0,
            time_ms=res.time_ms if res else 0,
            state=_state(game_id, ctl),
        )

    @app.post("/api/games/{game_id}/navigate", response_model=GameStateModel)
    async def navigate(game_id: str, req: NavigateRequest) -> GameStateModel:
        ctl = _require_game(store, game_id)
        try:
            ctl.navigate(req.index)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, ctl)

    @app.post("/api/games/{game_id}/level", response_model=GameStateModel)
    async def set_level(game_id: str, req: LevelRequest) -> GameStateModel:
        ctl = _require_game(store, game_id)
        ctl.set_level(req.level)
        return _state(game_id, ctl)

    @app.post("/api/games/{game_id}/reset", response_model=GameStateModel)
    async def reset(game_id: str) -> GameStateModel:
        ctl = _require_game(store, game_id)
        ctl.reset()
        return _state(game_id, ctl)

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> GameController:
    ctl = store.get(game_id)
    if ctl is None:
        raise HTTPException(status_code=404, detail="game not found")
    return ctl


def _parse_square(square: str) -> Position:
    try:
        return Position.from_str(square)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _state(game_id: str, ctl: GameController) -> GameStateModel:
    state = ctl.state
    last = state.last_move
    return GameStateModel(
        game_id=game_id,
        board=state.board.rows(),
        current_player=state.current_player.value,
        status=state.game_status.value,
        in_check=state.game_status in (GameStatus.CHECK, GameStatus.CHECKMATE),
        move_history=[m.to_uci() for m in state.moves],
        move_index=state.move_index,
        viewing_history=state.is_viewing_history,
        last_move=last.to_uci() if last else None,
        legal_moves=ctl.legal_moves(),
        ai_level=ctl.ai_level,
        player_color=ctl.player_color.value,
    )
