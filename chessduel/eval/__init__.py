"""Evaluation heuristics and related utilities.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Dict, Final, Tuple

from chessduel.engine.board import Board, PieceKind, Side


# Material values in centipawns. The king weight is nominal: legal play never
# captures a king, it only biases the search away from exposing it.
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 20000

MATERIAL: Final[Dict[PieceKind, int]] = {
    PieceKind.PAWN: P_VAL,
    PieceKind.KNIGHT: N_VAL,
    PieceKind.BISHOP: B_VAL,
    PieceKind.ROOK: R_VAL,
    PieceKind.QUEEN: Q_VAL,
    PieceKind.KING: K_VAL,
}

# Piece-square tables, written from White's seat: index 0 is a8, index 63 is h1.
# Black reads them mirrored vertically.
PAWN_TABLE: Final[Tuple[int, ...]] = (
    0, 0, 0, 0, 0, 0, 0, 0,
    50, 50, 50, 50, 50, 50, 50, 50,
    10, 10, 20, 30, 30, 20, 10, 10,
    5, 5, 10, 25, 25, 10, 5, 5,
    0, 0, 0, 20, 20, 0, 0, 0,
    5, -5, -10, 0, 0, -10, -5, 5,
    5, 10, 10, -20, -20, 10, 10, 5,
    0, 0, 0, 0, 0, 0, 0, 0,
)  # fmt: skip

KNIGHT_TABLE: Final[Tuple[int, ...]] = (
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20, 0, 0, 0, 0, -20, -40,
    -30, 0, 10, 15, 15, 10, 0, -30,
    -30, 5, 15, 20, 20, 15, 5, -30,
    -30, 0, 15, 20, 20, 15, 0, -30,
    -30, 5, 10, 15, 15, 10, 5, -30,
    -40, -20, 0, 5, 5, 0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
)  # fmt: skip

BISHOP_TABLE: Final[Tuple[int, ...]] = (
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, 0, 5, 10, 10, 5, 0, -10,
    -10, 5, 5, 10, 10, 5, 5, -10,
    -10, 0, 10, 10, 10, 10, 0, -10,
    -10, 10, 10, 10, 10, 10, 10, -10,
    -10, 5, 0, 0, 0, 0, 5, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
)  # fmt: skip

ROOK_TABLE: Final[Tuple[int, ...]] = (
    0, 0, 0, 0, 0, 0, 0, 0,
    5, 10, 10, 10, 10, 10, 10, 5,
    -5, 0, 0, 0, 0, 0, 0, -5,
    -5, 0, 0, 0, 0, 0, 0, -5,
    -5, 0, 0, 0, 0, 0, 0, -5,
    -5, 0, 0, 0, 0, 0, 0, -5,
    -5, 0, 0, 0, 0, 0, 0, -5,
    0, 0, 0, 5, 5, 0, 0, 0,
)  # fmt: skip

QUEEN_TABLE: Final[Tuple[int, ...]] = (
    -20, -10, -10, -5, -5, -10, -10, -20,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, 0, 5, 5, 5, 5, 0, -10,
    -5, 0, 5, 5, 5, 5, 0, -5,
    0, 0, 5, 5, 5, 5, 0, -5,
    -10, 5, 5, 5, 5, 5, 0, -10,
    -10, 0, 5, 0, 0, 0, 0, -10,
    -20, -10, -10, -5, -5, -10, -10, -20,
)  # fmt: skip

KING_TABLE: Final[Tuple[int, ...]] = (
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -10, -20, -20, -20, -20, -20, -20, -10,
    20, 20, 0, 0, 0, 0, 20, 20,
    20, 30, 10, 0, 0, 10, 30, 20,
)  # fmt: skip

PSQT: Final[Dict[PieceKind, Tuple[int, ...]]] = {
    PieceKind.PAWN: PAWN_TABLE,
    PieceKind.KNIGHT: KNIGHT_TABLE,
    PieceKind.BISHOP: BISHOP_TABLE,
    PieceKind.ROOK: ROOK_TABLE,
    PieceKind.QUEEN: QUEEN_TABLE,
    PieceKind.KING: KING_TABLE,
}


def _table_index(row: int, col: int, side: Side) -> int:
    # Flip vertically (rank mirror) for Black
    return row * 8 + col if side is Side.WHITE else (7 - row) * 8 + col


def positional_bonus(kind: PieceKind, row: int, col: int, side: Side) -> int:
    return PSQT[kind][_table_index(row, col, side)]


def evaluate(board: Board, perspective: Side) -> int:
    """Return a static evaluation of ``board`` in centipawns.

    Args:
        board (Board): Position to score.
        perspective (Side): Side whose pieces count positively.

    Returns:
        int: Material plus piece-square bonuses of ``perspective`` minus the
            opponent's. ``evaluate(b, Side.WHITE) == -evaluate(b, Side.BLACK)``.
    """
    score = 0
    for row, col, p in board.pieces():
        value = MATERIAL[p.kind] + positional_bonus(p.kind, row, col, p.side)
        if p.side is perspective:
            score += value
        else:
            score -= value
    return score
