from __future__ import annotations

from .apply import apply_move
from .board import Board, Side
from .movegen import all_moves
from .state import GameState


def perft(board: Board, side: Side, state: GameState, depth: int) -> int:
    """Compute perft node count for the position at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Note: the generator emits a single move per promotion square, so counts
    for positions with promotions in range differ from published tables.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = all_moves(board, side, state)
    if depth == 1:
        return len(moves)

    nodes = 0
    for m in moves:
        child = apply_move(board, state, m)
        nodes += perft(child.board, side.opponent, child.state, depth - 1)
    return nodes
