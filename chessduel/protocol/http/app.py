from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    illegal_move_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore, Session
from ...config import Settings
from ...engine.board import PieceKind, Side
from ...engine.game import Game, IllegalMoveError
from ...engine.move import Move, to_notation
from ...engine.snapshot import decode_game, encode_game
from ...engine.state import CastlingRights


logger = logging.getLogger(__name__)

PromotionChoice = Literal["q", "r", "b", "n"]


class CreateGameRequest(BaseModel):
    strength: Optional[int] = Field(default=None, ge=1, le=10)


class MoveRequest(BaseModel):
    from_row: int = Field(..., ge=0, le=7)
    from_col: int = Field(..., ge=0, le=7)
    to_row: int = Field(..., ge=0, le=7)
    to_col: int = Field(..., ge=0, le=7)
    promotion: Optional[PromotionChoice] = Field(
        default=None, description="Promotion piece; omit to be asked via pending_promotion"
    )


class PromoteRequest(BaseModel):
    kind: PromotionChoice


class OpponentRequest(BaseModel):
    strength: Optional[int] = Field(default=None, ge=1, le=10)


class UndoRequest(BaseModel):
    plies: int = Field(default=1, ge=1)


class ResignRequest(BaseModel):
    side: Optional[Literal["w", "b"]] = Field(
        default=None, description="Resigning side; defaults to the side to move"
    )


class SnapshotBody(BaseModel):
    strength: int = Field(..., ge=1, le=10)
    game: Dict[str, Any]


class MoveView(BaseModel):
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    from_square: str
    to_square: str
    en_passant: bool = False
    double_pawn: bool = False
    castle: Optional[str] = None
    promotion: Optional[str] = None


class CastlingView(BaseModel):
    king_side: bool
    queen_side: bool


class GameStateView(BaseModel):
    game_id: str
    board: list[str]
    side_to_move: str
    status: str
    winner: Optional[str]
    white_castle: CastlingView
    black_castle: CastlingView
    en_passant_target: Optional[list[int]]
    last_move: Optional[str]
    move_history: list[str]
    captured: list[str]
    pending_promotion: Optional[MoveView]
    resigned_by: Optional[str]
    strength: int


class LegalMovesResponse(BaseModel):
    square: str
    moves: list[MoveView]


class OpponentResponse(BaseModel):
    best_move: Optional[MoveView]
    notation: Optional[str]
    state: GameStateView


class CreateGameResponse(BaseModel):
    game_id: str
    state: GameStateView


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Chess Duel API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, illegal_move_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(default_strength=settings.default_strength)
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game_id = store.create(Game.new(), strength=req.strength if req else None)
        session = _require_session(store, game_id)
        logger.info("game created", extra={"game_id": game_id, "strength": session.strength})
        with session.lock:
            return CreateGameResponse(game_id=game_id, state=_state_view(game_id, session))

    @app.get("/api/games/{game_id}/state", response_model=GameStateView)
    def get_state(game_id: str) -> GameStateView:
        session = _require_session(store, game_id)
        with session.lock:
            return _state_view(game_id, session)

    @app.get("/api/games/{game_id}/moves", response_model=LegalMovesResponse)
    def get_moves(game_id: str, row: int, col: int) -> LegalMovesResponse:
        if not (0 <= row < 8 and 0 <= col < 8):
            raise HTTPException(status_code=400, detail="square off the board")
        session = _require_session(store, game_id)
        with session.lock:
            moves = session.game.legal_moves(row, col)
        return LegalMovesResponse(
            square=to_notation(row, col), moves=[_move_view(m) for m in moves]
        )

    @app.post("/api/games/{game_id}/move", response_model=GameStateView)
    def make_move(game_id: str, req: MoveRequest) -> GameStateView:
        session = _require_session(store, game_id)
        move = Move(
            req.from_row,
            req.from_col,
            req.to_row,
            req.to_col,
            promotion=PieceKind(req.promotion) if req.promotion else None,
        )
        with session.lock:
            if session.game.is_over():
                raise HTTPException(status_code=409, detail="game is over")
            session.game.play(move)
            return _state_view(game_id, session)

    @app.post("/api/games/{game_id}/promote", response_model=GameStateView)
    def promote(game_id: str, req: PromoteRequest) -> GameStateView:
        session = _require_session(store, game_id)
        with session.lock:
            try:
                session.game.promote(PieceKind(req.kind))
            except ValueError as e:
                raise HTTPException(status_code=409, detail=str(e))
            return _state_view(game_id, session)

    @app.post("/api/games/{game_id}/opponent", response_model=OpponentResponse)
    def opponent(game_id: str, req: Optional[OpponentRequest] = None) -> OpponentResponse:
        # Sync handler: FastAPI runs it in its threadpool, off the event loop
        session = _require_session(store, game_id)
        with session.lock:
            strength = req.strength if req and req.strength else session.strength
            record = session.game.play_opponent(strength)
            return OpponentResponse(
                best_move=_move_view(record.move) if record else None,
                notation=record.notation() if record else None,
                state=_state_view(game_id, session),
            )

    @app.post("/api/games/{game_id}/resign", response_model=GameStateView)
    def resign(game_id: str, req: Optional[ResignRequest] = None) -> GameStateView:
        session = _require_session(store, game_id)
        with session.lock:
            try:
                session.game.resign(Side(req.side) if req and req.side else None)
            except ValueError as e:
                raise HTTPException(status_code=409, detail=str(e))
            logger.info("game resigned", extra={"game_id": game_id})
            return _state_view(game_id, session)

    @app.post("/api/games/{game_id}/undo", response_model=GameStateView)
    def undo(game_id: str, req: Optional[UndoRequest] = None) -> GameStateView:
        session = _require_session(store, game_id)
        with session.lock:
            try:
                session.game.undo(req.plies if req else 1)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return _state_view(game_id, session)

    @app.get("/api/games/{game_id}/snapshot", response_model=SnapshotBody)
    def get_snapshot(game_id: str) -> SnapshotBody:
        session = _require_session(store, game_id)
        with session.lock:
            return SnapshotBody(strength=session.strength, game=encode_game(session.game))

    @app.put("/api/games/{game_id}/snapshot", response_model=GameStateView)
    def put_snapshot(game_id: str, body: SnapshotBody) -> GameStateView:
        session = _require_session(store, game_id)
        try:
            game = decode_game(body.game)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid snapshot: {e}")
        with session.lock:
            session.game = game
            session.strength = body.strength
            return _state_view(game_id, session)

    @app.delete("/api/games/{game_id}")
    def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> Session:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _move_view(move: Move) -> MoveView:
    return MoveView(
        from_row=move.from_row,
        from_col=move.from_col,
        to_row=move.to_row,
        to_col=move.to_col,
        from_square=to_notation(move.from_row, move.from_col),
        to_square=to_notation(move.to_row, move.to_col),
        en_passant=move.en_passant,
        double_pawn=move.double_pawn,
        castle=move.castle,
        promotion=move.promotion.value if move.promotion else None,
    )


def _castling_view(rights: CastlingRights) -> CastlingView:
    return CastlingView(king_side=rights.king_side, queen_side=rights.queen_side)


def _state_view(game_id: str, session: Session) -> GameStateView:
    game = session.game
    st = game.status()
    ep = game.state.en_passant_target
    last = game.last_move()
    winner = game.winner()
    return GameStateView(
        game_id=game_id,
        board=game.board.diagram().splitlines(),
        side_to_move=game.side_to_move.value,
        status=st.phase.value,
        winner=winner.value if winner else None,
        white_castle=_castling_view(game.state.white_castle),
        black_castle=_castling_view(game.state.black_castle),
        en_passant_target=list(ep) if ep is not None else None,
        last_move=last.notation() if last else None,
        move_history=[r.notation() for r in game.history],
        captured=[p.symbol for p in game.captured],
        pending_promotion=_move_view(game.pending_promotion) if game.pending_promotion else None,
        resigned_by=game.resigned_by.value if game.resigned_by else None,
        strength=session.strength,
    )
