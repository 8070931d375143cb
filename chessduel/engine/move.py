from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .board import PieceKind


KINGSIDE = "kingside"
QUEENSIDE = "queenside"
CASTLE_SIDES = (KINGSIDE, QUEENSIDE)


@dataclass(frozen=True)
class Move:
    """Description of a move; applying it is the move applier's job.

    Attributes:
        from_row (int): Origin row.
        from_col (int): Origin column.
        to_row (int): Destination row.
        to_col (int): Destination column.
        en_passant (bool): Pawn capture onto the en-passant target.
        double_pawn (bool): Two-square pawn advance from the starting rank.
        castle (Optional[str]): ``"kingside"`` or ``"queenside"`` for castling.
        promotion (Optional[PieceKind]): Promotion choice, if one was made.
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    en_passant: bool = False
    double_pawn: bool = False
    castle: Optional[str] = None
    promotion: Optional[PieceKind] = None

    def with_promotion(self, kind: PieceKind) -> "Move":
        return replace(self, promotion=kind)

    def same_squares(self, other: "Move") -> bool:
        return (
            self.from_row == other.from_row
            and self.from_col == other.from_col
            and self.to_row == other.to_row
            and self.to_col == other.to_col
        )

    def __str__(self) -> str:
        promo = self.promotion.value if self.promotion else ""
        origin = to_notation(self.from_row, self.from_col)
        return origin + to_notation(self.to_row, self.to_col) + promo


def to_notation(row: int, col: int) -> str:
    """Convert board coordinates into a file letter and rank number.

    Args:
        row (int): Row 0..7, row 0 being Black's back rank.
        col (int): Column 0..7, column 0 being the a-file.

    Returns:
        str: Square name such as ``"a8"`` for ``(0, 0)``.

    Raises:
        ValueError: If the coordinates are off the board.
    """
    if not (0 <= row < 8 and 0 <= col < 8):
        raise ValueError(f"invalid square: ({row}, {col})")
    return chr(ord("a") + col) + str(8 - row)
