from __future__ import annotations

from typing import NamedTuple, Optional

from .board import Board, Piece, PieceKind, Side, home_row
from .move import KINGSIDE, Move
from .state import GameState


class Applied(NamedTuple):
    board: Board
    state: GameState
    captured: Optional[Piece]


def apply_move(board: Board, state: GameState, move: Move) -> Applied:
    """Return the position reached by playing ``move``; inputs are left untouched.

    Args:
        board (Board): Position before the move.
        state (GameState): Castling rights and en-passant target before the move.
        move (Move): A move produced by the move generator for this position.

    Returns:
        Applied: ``(board, state, captured)`` where ``captured`` is the removed
            enemy piece, if any.

    Notes:
        Supports normal moves, captures, castling, en passant and promotion.
        A pawn reaching the far rank without a promotion choice becomes a
        queen. Moves are not re-validated; pass only generated moves.
    """
    piece = board[move.from_row, move.from_col]
    if piece is None:
        raise ValueError(f"no piece to move on {move.from_row},{move.from_col}")
    new_board = board.clone()
    captured: Optional[Piece] = None

    if move.castle is not None:
        new_board._set(move.to_row, move.to_col, piece)
        new_board._set(move.from_row, move.from_col, None)
        if move.castle == KINGSIDE:
            rook_from, rook_to = 7, move.to_col - 1
        else:
            rook_from, rook_to = 0, move.to_col + 1
        new_board._set(move.to_row, rook_to, new_board[move.to_row, rook_from])
        new_board._set(move.to_row, rook_from, None)
    elif move.en_passant:
        new_board._set(move.to_row, move.to_col, piece)
        new_board._set(move.from_row, move.from_col, None)
        captured = new_board[move.from_row, move.to_col]
        new_board._set(move.from_row, move.to_col, None)
    else:
        captured = new_board[move.to_row, move.to_col]
        new_board._set(move.to_row, move.to_col, piece)
        new_board._set(move.from_row, move.from_col, None)

    if piece.kind is PieceKind.PAWN and move.to_row == home_row(piece.side.opponent):
        promoted = Piece(move.promotion or PieceKind.QUEEN, piece.side)
        new_board._set(move.to_row, move.to_col, promoted)

    new_state = _next_state(state, piece, move, captured)
    return Applied(new_board, new_state, captured)


def _next_state(
    state: GameState, piece: Piece, move: Move, captured: Optional[Piece]
) -> GameState:
    """Derive castling rights and en-passant target from the pre-move piece."""
    side = piece.side
    rights = state.castling(side)
    if piece.kind is PieceKind.KING:
        rights = rights.revoke(king_side=True, queen_side=True)
    elif piece.kind is PieceKind.ROOK and move.from_row == home_row(side):
        rights = rights.revoke(king_side=move.from_col == 7, queen_side=move.from_col == 0)
    new_state = state.with_castling(side, rights)

    # Rook captured on its home square
    if captured is not None and captured.kind is PieceKind.ROOK:
        opp: Side = captured.side
        if move.to_row == home_row(opp) and move.to_col in (0, 7):
            opp_rights = new_state.castling(opp).revoke(
                king_side=move.to_col == 7, queen_side=move.to_col == 0
            )
            new_state = new_state.with_castling(opp, opp_rights)

    ep = None
    if piece.kind is PieceKind.PAWN and abs(move.to_row - move.from_row) == 2:
        ep = ((move.from_row + move.to_row) // 2, move.from_col)
    return GameState(new_state.white_castle, new_state.black_castle, ep)
