from __future__ import annotations

from .board import Board, PieceKind, Side, Square, on_board


KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
ORTHOGONAL_DIRS = ((0, 1), (0, -1), (1, 0), (-1, 0))
DIAGONAL_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


class MissingKingError(RuntimeError):
    """Raised when a side has no king on the board (broken board invariant)."""


def is_square_attacked(board: Board, row: int, col: int, defending_side: Side) -> bool:
    """Return True if any piece of the opponent of ``defending_side`` attacks the square.

    Covers: pawns, knights, king, and slider rays for bishops/rooks/queens.
    Reads raw board contents only; never consults move generation.
    """
    attacker = defending_side.opponent

    # Pawn attacks: an attacking pawn sits one row behind the square from its
    # own point of view, i.e. one row toward the defender's forward direction.
    pr = row - 1 if defending_side is Side.WHITE else row + 1
    for pc in (col - 1, col + 1):
        if on_board(pr, pc):
            p = board[pr, pc]
            if p is not None and p.side is attacker and p.kind is PieceKind.PAWN:
                return True

    # Knight attacks
    for dr, dc in KNIGHT_OFFSETS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            p = board[r, c]
            if p is not None and p.side is attacker and p.kind is PieceKind.KNIGHT:
                return True

    # King attacks
    for dr, dc in KING_OFFSETS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            p = board[r, c]
            if p is not None and p.side is attacker and p.kind is PieceKind.KING:
                return True

    # Rook-like directions
    for dr, dc in ORTHOGONAL_DIRS:
        r, c = row + dr, col + dc
        while on_board(r, c):
            p = board[r, c]
            if p is not None:
                if p.side is attacker and p.kind in (PieceKind.ROOK, PieceKind.QUEEN):
                    return True
                break
            r += dr
            c += dc

    # Bishop-like directions
    for dr, dc in DIAGONAL_DIRS:
        r, c = row + dr, col + dc
        while on_board(r, c):
            p = board[r, c]
            if p is not None:
                if p.side is attacker and p.kind in (PieceKind.BISHOP, PieceKind.QUEEN):
                    return True
                break
            r += dr
            c += dc

    return False


def find_king(board: Board, side: Side) -> Square:
    """Locate ``side``'s king.

    Raises:
        MissingKingError: If the side has no king on the board.
    """
    for row, col, p in board.pieces(side):
        if p.kind is PieceKind.KING:
            return row, col
    raise MissingKingError(f"no king for side {side.value!r} on the board")


def is_king_in_check(board: Board, side: Side) -> bool:
    row, col = find_king(board, side)
    return is_square_attacked(board, row, col, side)
