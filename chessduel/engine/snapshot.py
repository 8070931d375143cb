"""Plain-data encoding of a game for an external persistence layer.

Everything is dicts, lists, strings, ints, bools and ``None`` so the result
can go straight through ``json``. Decoding validates shape and board
invariants and raises ``ValueError`` on malformed input.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .attacks import is_king_in_check
from .board import Board, Piece, PieceKind, Side, home_row
from .game import Game, MoveRecord
from .move import CASTLE_SIDES, Move
from .movegen import legal_moves
from .state import CastlingRights, GameState


SNAPSHOT_VERSION = 1


def encode_move(move: Move) -> Dict[str, Any]:
    return {
        "from_row": move.from_row,
        "from_col": move.from_col,
        "to_row": move.to_row,
        "to_col": move.to_col,
        "en_passant": move.en_passant,
        "double_pawn": move.double_pawn,
        "castle": move.castle,
        "promotion": move.promotion.value if move.promotion else None,
    }


def decode_move(data: Dict[str, Any]) -> Move:
    try:
        coords = [int(data[k]) for k in ("from_row", "from_col", "to_row", "to_col")]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError("invalid move coordinates") from e
    if any(not 0 <= v < 8 for v in coords):
        raise ValueError("move coordinates out of range")
    castle = data.get("castle")
    if castle is not None and castle not in CASTLE_SIDES:
        raise ValueError(f"invalid castle tag: {castle!r}")
    return Move(
        *coords,
        en_passant=bool(data.get("en_passant", False)),
        double_pawn=bool(data.get("double_pawn", False)),
        castle=castle,
        promotion=_decode_kind(data.get("promotion")),
    )


def encode_state(state: GameState) -> Dict[str, Any]:
    ep = state.en_passant_target
    return {
        "white_castle": _encode_rights(state.white_castle),
        "black_castle": _encode_rights(state.black_castle),
        "en_passant_target": list(ep) if ep is not None else None,
    }


def decode_state(data: Dict[str, Any]) -> GameState:
    ep_raw = data.get("en_passant_target")
    ep = None
    if ep_raw is not None:
        try:
            row, col = (int(v) for v in ep_raw)
        except (TypeError, ValueError) as e:
            raise ValueError("invalid en passant target") from e
        # Target square lies on the row a double-advancing pawn skipped
        if row not in (2, 5) or not 0 <= col < 8:
            raise ValueError("invalid en passant target")
        ep = (row, col)
    return GameState(
        white_castle=_decode_rights(data.get("white_castle")),
        black_castle=_decode_rights(data.get("black_castle")),
        en_passant_target=ep,
    )


def encode_game(game: Game) -> Dict[str, Any]:
    """Serialize the full game tuple into plain data."""
    return {
        "version": SNAPSHOT_VERSION,
        "board": game.board.diagram().splitlines(),
        "state": encode_state(game.state),
        "side_to_move": game.side_to_move.value,
        "history": [_encode_record(r) for r in game.history],
        "captured": [p.symbol for p in game.captured],
        "pending_promotion": (
            encode_move(game.pending_promotion) if game.pending_promotion else None
        ),
        "resigned_by": game.resigned_by.value if game.resigned_by else None,
    }


def decode_game(data: Dict[str, Any]) -> Game:
    """Rebuild a game from :func:`encode_game` output.

    Undo snapshots are not part of the persisted tuple; a restored game starts
    with an empty undo stack.

    Raises:
        ValueError: If the data is malformed, the board does not hold exactly
            one king per side, the side not to move is in check, or the
            pending promotion is not a legal pawn move to the far rank.
    """
    if not isinstance(data, dict):
        raise ValueError("snapshot must be an object")
    if data.get("version", SNAPSHOT_VERSION) != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {data.get('version')!r}")
    rows = data.get("board")
    if not isinstance(rows, list):
        raise ValueError("snapshot board must be a list of rows")
    board = Board.from_diagram("\n".join(str(r) for r in rows))
    for side in Side:
        kings = sum(1 for _, _, p in board.pieces(side) if p.kind is PieceKind.KING)
        if kings != 1:
            raise ValueError(f"board must have exactly one {side.name.lower()} king")
    try:
        side_to_move = Side(data.get("side_to_move", Side.WHITE.value))
    except ValueError as e:
        raise ValueError("side to move must be 'w' or 'b'") from e
    state_raw = data.get("state") or {}
    if not isinstance(state_raw, dict):
        raise ValueError("snapshot state must be an object")
    state = decode_state(state_raw)
    history = [_decode_record(r) for r in data.get("history") or []]
    captured = [Piece.from_symbol(str(s)) for s in data.get("captured") or []]
    if is_king_in_check(board, side_to_move.opponent):
        raise ValueError("side not to move is in check")
    pending_raw = data.get("pending_promotion")
    pending = _decode_pending(board, state, side_to_move, pending_raw) if pending_raw else None
    resigned_raw = data.get("resigned_by")
    try:
        resigned_by = Side(resigned_raw) if resigned_raw is not None else None
    except ValueError as e:
        raise ValueError("resigned_by must be 'w', 'b' or null") from e
    return Game(
        board=board,
        state=state,
        side_to_move=side_to_move,
        history=history,
        captured=captured,
        pending_promotion=pending,
        resigned_by=resigned_by,
    )


def _encode_rights(rights: CastlingRights) -> Dict[str, bool]:
    return {"king_side": rights.king_side, "queen_side": rights.queen_side}


def _decode_rights(data: Optional[Dict[str, Any]]) -> CastlingRights:
    if data is None:
        return CastlingRights()
    if not isinstance(data, dict):
        raise ValueError("castling rights must be an object")
    return CastlingRights(
        king_side=bool(data.get("king_side", False)),
        queen_side=bool(data.get("queen_side", False)),
    )


def _decode_kind(value: Optional[str]) -> Optional[PieceKind]:
    if value is None:
        return None
    try:
        return PieceKind(str(value).lower())
    except ValueError as e:
        raise ValueError(f"invalid piece kind: {value!r}") from e


def _encode_record(record: MoveRecord) -> Dict[str, Any]:
    return {
        "move": encode_move(record.move),
        "piece": record.piece.symbol,
        "captured": record.captured.value if record.captured else None,
        "check": record.check,
        "checkmate": record.checkmate,
        "notation": record.notation(),
    }


def _decode_record(data: Dict[str, Any]) -> MoveRecord:
    try:
        piece = Piece.from_symbol(str(data["piece"]))
        move = decode_move(data["move"])
    except (KeyError, TypeError) as e:
        raise ValueError("invalid history entry") from e
    return MoveRecord(
        move=move,
        piece=piece,
        captured=_decode_kind(data.get("captured")),
        check=bool(data.get("check", False)),
        checkmate=bool(data.get("checkmate", False)),
    )


def _decode_pending(
    board: Board, state: GameState, side_to_move: Side, data: Dict[str, Any]
) -> Move:
    requested = decode_move(data)
    pawn = board[requested.from_row, requested.from_col]
    if (
        pawn is None
        or pawn.kind is not PieceKind.PAWN
        or pawn.side is not side_to_move
        or requested.to_row != home_row(side_to_move.opponent)
    ):
        raise ValueError("pending promotion must move a pawn of the side to move to the far rank")
    # Tags come from the generated move, not from the stored data
    for m in legal_moves(board, requested.from_row, requested.from_col, state):
        if m.same_squares(requested):
            return m
    raise ValueError("pending promotion is not a legal move")
