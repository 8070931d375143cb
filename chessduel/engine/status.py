from __future__ import annotations

from .attacks import is_king_in_check
from .board import Board, Side
from .movegen import has_legal_move
from .state import GameState, GameStatus, Phase


def status(board: Board, side_to_move: Side, state: GameState) -> GameStatus:
    """Derive the game phase for ``side_to_move``.

    Pure and recomputed after every move: a move anywhere on the board can
    change check status (discovered checks, pins resolved by capture).

    Returns:
        GameStatus: ``checkmate`` (winner = opponent) or ``stalemate`` when no
            legal move exists, otherwise ``check`` or ``playing``.
    """
    in_check = is_king_in_check(board, side_to_move)
    if not has_legal_move(board, side_to_move, state):
        if in_check:
            return GameStatus(Phase.CHECKMATE, winner=side_to_move.opponent)
        return GameStatus(Phase.STALEMATE)
    if in_check:
        return GameStatus(Phase.CHECK)
    return GameStatus(Phase.PLAYING)
