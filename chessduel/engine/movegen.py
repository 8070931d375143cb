from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from .attacks import (
    DIAGONAL_DIRS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    ORTHOGONAL_DIRS,
    is_king_in_check,
    is_square_attacked,
)
from .board import Board, Piece, PieceKind, Side, forward, home_row, on_board
from .move import KINGSIDE, QUEENSIDE, Move
from .state import GameState


Generator = Callable[[Board, int, int, Piece, GameState], List[Move]]


def _pawn_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    moves: List[Move] = []
    step = forward(piece.side)
    start_row = 6 if piece.side is Side.WHITE else 1

    # Single push, then double push from the starting rank
    r = row + step
    if on_board(r, col) and board[r, col] is None:
        moves.append(Move(row, col, r, col))
        r2 = row + 2 * step
        if row == start_row and board[r2, col] is None:
            moves.append(Move(row, col, r2, col, double_pawn=True))

    # Diagonal captures and en passant
    ep = state.en_passant_target
    for c in (col - 1, col + 1):
        if not on_board(r, c):
            continue
        target = board[r, c]
        if target is not None:
            if target.side is not piece.side:
                moves.append(Move(row, col, r, c))
        elif ep is not None and ep == (r, c):
            victim = board[row, c]
            if (
                victim is not None
                and victim.side is not piece.side
                and victim.kind is PieceKind.PAWN
            ):
                moves.append(Move(row, col, r, c, en_passant=True))
    return moves


def _knight_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in KNIGHT_OFFSETS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            target = board[r, c]
            if target is None or target.side is not piece.side:
                moves.append(Move(row, col, r, c))
    return moves


def _ray_moves(
    board: Board, row: int, col: int, piece: Piece, dirs: Tuple[Tuple[int, int], ...]
) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in dirs:
        r, c = row + dr, col + dc
        while on_board(r, c):
            target = board[r, c]
            if target is None:
                moves.append(Move(row, col, r, c))
            else:
                if target.side is not piece.side:
                    moves.append(Move(row, col, r, c))
                break
            r += dr
            c += dc
    return moves


def _bishop_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    return _ray_moves(board, row, col, piece, DIAGONAL_DIRS)


def _rook_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    return _ray_moves(board, row, col, piece, ORTHOGONAL_DIRS)


def _queen_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    return _ray_moves(board, row, col, piece, ORTHOGONAL_DIRS + DIAGONAL_DIRS)


def _king_moves(board: Board, row: int, col: int, piece: Piece, state: GameState) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in KING_OFFSETS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            target = board[r, c]
            if target is None or target.side is not piece.side:
                moves.append(Move(row, col, r, c))
    moves.extend(_castling_moves(board, row, col, piece, state))
    return moves


# (castle tag, rook column, squares that must be empty, squares the king crosses)
_CASTLE_PATHS = (
    (KINGSIDE, 7, (5, 6), (5, 6)),
    (QUEENSIDE, 0, (1, 2, 3), (3, 2)),
)


def _castling_moves(
    board: Board, row: int, col: int, piece: Piece, state: GameState
) -> List[Move]:
    side = piece.side
    rights = state.castling(side)
    if not (rights.king_side or rights.queen_side):
        return []
    if (row, col) != (home_row(side), 4):
        return []
    if is_square_attacked(board, row, col, side):
        return []
    moves: List[Move] = []
    for tag, rook_col, between, crossed in _CASTLE_PATHS:
        held = rights.king_side if tag == KINGSIDE else rights.queen_side
        if not held:
            continue
        rook = board[row, rook_col]
        if rook is None or rook.side is not side or rook.kind is not PieceKind.ROOK:
            continue
        if any(board[row, c] is not None for c in between):
            continue
        if any(is_square_attacked(board, row, c, side) for c in crossed):
            continue
        moves.append(Move(row, col, row, crossed[-1], castle=tag))
    return moves


_GENERATORS: Dict[PieceKind, Generator] = {
    PieceKind.PAWN: _pawn_moves,
    PieceKind.KNIGHT: _knight_moves,
    PieceKind.BISHOP: _bishop_moves,
    PieceKind.ROOK: _rook_moves,
    PieceKind.QUEEN: _queen_moves,
    PieceKind.KING: _king_moves,
}


def pseudo_moves(board: Board, row: int, col: int, state: GameState) -> List[Move]:
    """Return moves obeying the piece's movement pattern and occupancy rules.

    Returns an empty list for an empty square. Moves may still leave the
    mover's own king in check.
    """
    piece = board[row, col]
    if piece is None:
        return []
    return _GENERATORS[piece.kind](board, row, col, piece, state)


def leaves_king_safe(board: Board, move: Move, side: Side) -> bool:
    """Simulate ``move`` on a copy and report whether ``side``'s king is safe.

    Only relocates the piece (and removes an en-passant victim); castling rook
    placement and promotion do not affect the mover's king safety.
    """
    sim = board.clone()
    sim._set(move.to_row, move.to_col, sim[move.from_row, move.from_col])
    sim._set(move.from_row, move.from_col, None)
    if move.en_passant:
        sim._set(move.from_row, move.to_col, None)
    return not is_king_in_check(sim, side)


def legal_moves(board: Board, row: int, col: int, state: GameState) -> List[Move]:
    """Return the legal moves of the piece on ``(row, col)``.

    Args:
        board (Board): Position to inspect.
        row (int): Origin row.
        col (int): Origin column.
        state (GameState): Castling rights and en-passant target.

    Returns:
        List[Move]: Pseudo-legal moves that do not leave the mover's king in
            check, in generation order. Empty for an empty square.
    """
    piece = board[row, col]
    if piece is None:
        return []
    return [
        m for m in pseudo_moves(board, row, col, state) if leaves_king_safe(board, m, piece.side)
    ]


def all_moves(board: Board, side: Side, state: GameState) -> List[Move]:
    """Return every legal move of ``side`` in row-major origin order."""
    moves: List[Move] = []
    for row, col, _piece in board.pieces(side):
        moves.extend(legal_moves(board, row, col, state))
    return moves


def has_legal_move(board: Board, side: Side, state: GameState) -> bool:
    """Return True as soon as one legal move of ``side`` is found."""
    for row, col, _piece in board.pieces(side):
        if legal_moves(board, row, col, state):
            return True
    return False
