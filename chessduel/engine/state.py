from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .board import Side, Square


@dataclass(frozen=True)
class CastlingRights:
    king_side: bool = True
    queen_side: bool = True

    def revoke(self, *, king_side: bool = False, queen_side: bool = False) -> "CastlingRights":
        """Return rights with the named flags cleared; cleared flags stay cleared."""
        return CastlingRights(
            king_side=self.king_side and not king_side,
            queen_side=self.queen_side and not queen_side,
        )


NO_CASTLING = CastlingRights(king_side=False, queen_side=False)


@dataclass(frozen=True)
class GameState:
    """Auxiliary position state not stored on the board.

    Attributes:
        white_castle (CastlingRights): White's remaining castling rights.
        black_castle (CastlingRights): Black's remaining castling rights.
        en_passant_target (Optional[Square]): Square skipped by the last
            two-square pawn advance; valid for the next move only.
    """

    white_castle: CastlingRights = CastlingRights()
    black_castle: CastlingRights = CastlingRights()
    en_passant_target: Optional[Square] = None

    @classmethod
    def initial(cls) -> "GameState":
        return cls()

    def castling(self, side: Side) -> CastlingRights:
        return self.white_castle if side is Side.WHITE else self.black_castle

    def with_castling(self, side: Side, rights: CastlingRights) -> "GameState":
        if side is Side.WHITE:
            return replace(self, white_castle=rights)
        return replace(self, black_castle=rights)


class Phase(str, Enum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class GameStatus:
    phase: Phase
    winner: Optional[Side] = None

    @property
    def is_over(self) -> bool:
        return self.phase in (Phase.CHECKMATE, Phase.STALEMATE)
