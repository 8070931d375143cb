from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from chessduel.search.service import SearchService

from .apply import apply_move
from .board import PROMOTION_KINDS, Board, Piece, PieceKind, Side, home_row
from .move import KINGSIDE, Move, to_notation
from .movegen import all_moves, legal_moves
from .state import GameState, GameStatus, Phase
from .status import status


logger = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    """Raised when a requested move is not in the legal move set."""


@dataclass(frozen=True)
class MoveRecord:
    """A played move with what the history display needs to render it."""

    move: Move
    piece: Piece
    captured: Optional[PieceKind] = None
    check: bool = False
    checkmate: bool = False

    def notation(self) -> str:
        """Render the move like ``Ng1-f3``, ``e5xd6``, ``e7-e8=Q+`` or ``O-O#``."""
        m = self.move
        if m.castle is not None:
            text = "O-O" if m.castle == KINGSIDE else "O-O-O"
        else:
            letter = "" if self.piece.kind is PieceKind.PAWN else self.piece.kind.value.upper()
            sep = "x" if self.captured is not None else "-"
            text = (
                f"{letter}{to_notation(m.from_row, m.from_col)}"
                f"{sep}{to_notation(m.to_row, m.to_col)}"
            )
            if m.promotion is not None:
                text += "=" + m.promotion.value.upper()
        if self.checkmate:
            text += "#"
        elif self.check:
            text += "+"
        return text


class _Undo(NamedTuple):
    board: Board
    state: GameState
    side_to_move: Side
    history_len: int
    captured_len: int


@dataclass
class Game:
    """Game wrapper owning the canonical position and its history.

    Responsibility: hold (board, state, side to move), validate requests
    against the legal move set, apply moves, track history, captures and
    undo snapshots. Core functions are only ever called with this state.
    """

    board: Board
    state: GameState = field(default_factory=GameState.initial)
    side_to_move: Side = Side.WHITE
    history: List[MoveRecord] = field(default_factory=list)
    captured: List[Piece] = field(default_factory=list)
    pending_promotion: Optional[Move] = None
    resigned_by: Optional[Side] = None
    _undo: List[_Undo] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.startpos())

    # --- Queries ---
    def legal_moves(self, row: int, col: int) -> List[Move]:
        piece = self.board[row, col]
        if piece is None or piece.side is not self.side_to_move:
            return []
        return legal_moves(self.board, row, col, self.state)

    def all_moves(self) -> List[Move]:
        return all_moves(self.board, self.side_to_move, self.state)

    def status(self) -> GameStatus:
        return status(self.board, self.side_to_move, self.state)

    def last_move(self) -> Optional[MoveRecord]:
        return self.history[-1] if self.history else None

    def is_over(self) -> bool:
        """True after checkmate, stalemate or a resignation."""
        return self.resigned_by is not None or self.status().is_over

    def winner(self) -> Optional[Side]:
        if self.resigned_by is not None:
            return self.resigned_by.opponent
        return self.status().winner

    def can_undo(self, plies: int = 1) -> bool:
        return len(self._undo) >= plies

    # --- Mutations ---
    def play(self, move: Move) -> Optional[MoveRecord]:
        """Play a requested move for the side to move.

        Args:
            move (Move): Requested origin/destination and optional promotion
                kind. Tags are taken from the matching generated move.

        Returns:
            Optional[MoveRecord]: The record of the played move, or ``None``
                when a pawn reached the far rank without a promotion choice.
                In that case the move waits in ``pending_promotion`` until
                :meth:`promote` is called and the position is unchanged.

        Raises:
            IllegalMoveError: If the move is not legal, the promotion kind is
                invalid, or a promotion is already pending.
        """
        if self.resigned_by is not None:
            raise IllegalMoveError("game was resigned")
        if self.pending_promotion is not None:
            raise IllegalMoveError("promotion pending")
        matched = next(
            (m for m in self.legal_moves(move.from_row, move.from_col) if m.same_squares(move)),
            None,
        )
        if matched is None:
            raise IllegalMoveError("illegal move")
        if self._is_promotion(matched):
            if move.promotion is None:
                self.pending_promotion = matched
                logger.debug("promotion pending for %s", matched)
                return None
            if move.promotion not in PROMOTION_KINDS:
                raise IllegalMoveError(f"invalid promotion piece: {move.promotion.value!r}")
            matched = matched.with_promotion(move.promotion)
        return self._commit(matched)

    def cancel_promotion(self) -> None:
        """Drop a suspended promotion; the pawn stays where it was."""
        self.pending_promotion = None

    def promote(self, kind: PieceKind) -> MoveRecord:
        """Finish a suspended promotion with the chosen piece kind."""
        if self.resigned_by is not None:
            raise ValueError("game was resigned")
        if self.pending_promotion is None:
            raise ValueError("no promotion pending")
        if kind not in PROMOTION_KINDS:
            raise ValueError(f"invalid promotion piece: {kind.value!r}")
        move = self.pending_promotion.with_promotion(kind)
        self.pending_promotion = None
        return self._commit(move)

    def play_opponent(
        self, strength: int, rng: Optional[random.Random] = None
    ) -> Optional[MoveRecord]:
        """Let the engine move for the side to move; ``None`` if it cannot move."""
        if self.resigned_by is not None:
            return None
        if self.pending_promotion is not None:
            raise IllegalMoveError("promotion pending")
        res = SearchService().search(self.board, self.side_to_move, self.state, strength, rng=rng)
        if res.best_move is None:
            return None
        return self._commit(res.best_move)

    def resign(self, side: Optional[Side] = None) -> None:
        """Concede the game for ``side`` (default: the side to move).

        Resignation is kept apart from the derived position status; it ends
        the game without touching the board, and undo does not revoke it.

        Raises:
            ValueError: If the game is already over.
        """
        if self.is_over():
            raise ValueError("game is over")
        self.resigned_by = side if side is not None else self.side_to_move
        self.pending_promotion = None
        logger.debug("%s resigned after %d moves", self.resigned_by.value, len(self.history))

    def undo(self, plies: int = 1) -> None:
        """Restore the position from before the last ``plies`` moves.

        Raises:
            ValueError: If ``plies`` < 1, fewer moves were played, or the
                game was resigned.
        """
        if self.resigned_by is not None:
            raise ValueError("game was resigned")
        if plies < 1:
            raise ValueError("plies must be >= 1")
        if len(self._undo) < plies:
            raise ValueError("no moves to undo")
        self.pending_promotion = None
        snap = self._undo[-plies]
        del self._undo[-plies:]
        self.board = snap.board
        self.state = snap.state
        self.side_to_move = snap.side_to_move
        del self.history[snap.history_len :]
        del self.captured[snap.captured_len :]
        logger.debug("undo %d plies, %d moves left", plies, len(self.history))

    def _is_promotion(self, move: Move) -> bool:
        piece = self.board[move.from_row, move.from_col]
        return (
            piece is not None
            and piece.kind is PieceKind.PAWN
            and move.to_row == home_row(piece.side.opponent)
        )

    def _commit(self, move: Move) -> MoveRecord:
        piece = self.board[move.from_row, move.from_col]
        assert piece is not None
        self._undo.append(
            _Undo(self.board, self.state, self.side_to_move, len(self.history), len(self.captured))
        )
        applied = apply_move(self.board, self.state, move)
        self.board = applied.board
        self.state = applied.state
        self.side_to_move = self.side_to_move.opponent
        if applied.captured is not None:
            self.captured.append(applied.captured)
        after = self.status()
        record = MoveRecord(
            move=move,
            piece=piece,
            captured=applied.captured.kind if applied.captured is not None else None,
            check=after.phase is Phase.CHECK,
            checkmate=after.phase is Phase.CHECKMATE,
        )
        self.history.append(record)
        return record
