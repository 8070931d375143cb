from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import List, Optional

from chessduel.engine.apply import apply_move
from chessduel.engine.attacks import is_king_in_check
from chessduel.engine.board import Board, PieceKind, Side, home_row
from chessduel.engine.move import Move
from chessduel.engine.movegen import all_moves
from chessduel.engine.state import GameState
from chessduel.eval import MATERIAL, evaluate


logger = logging.getLogger(__name__)

MIN_STRENGTH = 1
MAX_STRENGTH = 10
MAX_DEPTH = 4
NOISE_PER_LEVEL = 50  # centipawns of noise amplitude per level below MAX_STRENGTH
RANDOM_MOVE_MAX_STRENGTH = 2
RANDOM_MOVE_PROBABILITY = 0.5

INF = 10_000_000
MATE_SCORE = 100_000  # outweighs any material balance


def clamp_strength(strength: int) -> int:
    return max(MIN_STRENGTH, min(MAX_STRENGTH, int(strength)))


def depth_for_strength(strength: int) -> int:
    """Search depth in plies: ``ceil(strength / 2)`` capped at ``MAX_DEPTH``."""
    return min(math.ceil(clamp_strength(strength) / 2), MAX_DEPTH)


def noise_for_strength(strength: int) -> int:
    """Total width of the uniform score perturbation; zero at full strength."""
    return max(0, MAX_STRENGTH - clamp_strength(strength)) * NOISE_PER_LEVEL


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[float]
    depth: int
    nodes: int
    time_ms: int
    random_pick: bool = False


def _with_default_promotion(board: Board, move: Move) -> Move:
    piece = board[move.from_row, move.from_col]
    if (
        piece is not None
        and piece.kind is PieceKind.PAWN
        and move.promotion is None
        and move.to_row == home_row(piece.side.opponent)
    ):
        return move.with_promotion(PieceKind.QUEEN)
    return move


class SearchService:
    """Fixed-depth minimax with alpha-beta pruning.

    The service keeps no state between calls; every call works on copies of
    the position it is given.
    """

    def search(
        self,
        board: Board,
        side: Side,
        state: GameState,
        strength: int,
        *,
        rng: Optional[random.Random] = None,
        depth: Optional[int] = None,
    ) -> SearchResult:
        """Pick a move for ``side``.

        Args:
            board (Board): Position to search; never mutated.
            side (Side): Side to move, the maximizing side.
            state (GameState): Castling rights and en-passant target.
            strength (int): Difficulty 1..10 (clamped). Controls depth, score
                noise and the chance of a purely random move.
            rng (Optional[random.Random]): Source of randomness; pass a seeded
                instance for reproducible play.
            depth (Optional[int]): Override the depth derived from strength.

        Returns:
            SearchResult: Best move (``None`` when ``side`` has no legal
                move), its perturbed score and search statistics.
        """
        rng = rng if rng is not None else random.Random()
        strength = clamp_strength(strength)
        max_depth = depth if depth is not None else depth_for_strength(strength)
        if max_depth < 1:
            raise ValueError("depth must be >= 1")
        amplitude = noise_for_strength(strength)
        opponent = side.opponent
        nodes = 0
        start = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start) * 1000)

        root_moves = all_moves(board, side, state)
        if not root_moves:
            return SearchResult(None, None, max_depth, 0, elapsed_ms())

        if strength <= RANDOM_MOVE_MAX_STRENGTH and rng.random() < RANDOM_MOVE_PROBABILITY:
            pick = _with_default_promotion(board, rng.choice(root_moves))
            logger.debug("random move %s at strength %d", pick, strength)
            return SearchResult(pick, None, 0, 0, elapsed_ms(), random_pick=True)

        def order(b: Board, moves: List[Move]) -> List[Move]:
            # Captures first, most valuable victim first; stable otherwise
            def victim_value(m: Move) -> int:
                if m.en_passant:
                    return MATERIAL[PieceKind.PAWN]
                victim = b[m.to_row, m.to_col]
                return MATERIAL[victim.kind] if victim is not None else 0

            return sorted(moves, key=victim_value, reverse=True)

        def minimax(
            b: Board, st: GameState, d: int, alpha: float, beta: float, maximizing: bool
        ) -> float:
            nonlocal nodes
            nodes += 1
            if d == 0:
                return evaluate(b, side)
            to_move = side if maximizing else opponent
            moves = all_moves(b, to_move, st)
            if not moves:
                if is_king_in_check(b, to_move):
                    # Deeper remaining depth means a quicker mate
                    return -(MATE_SCORE + d) if maximizing else MATE_SCORE + d
                return 0
            if maximizing:
                best = -INF
                for m in order(b, moves):
                    child = apply_move(b, st, m)
                    val = minimax(child.board, child.state, d - 1, alpha, beta, False)
                    if val > best:
                        best = val
                    if best > alpha:
                        alpha = best
                    if best >= beta:
                        break
                return best
            best = INF
            for m in order(b, moves):
                child = apply_move(b, st, m)
                val = minimax(child.board, child.state, d - 1, alpha, beta, True)
                if val < best:
                    best = val
                if best < beta:
                    beta = best
                if best <= alpha:
                    break
            return best

        best_move: Optional[Move] = None
        best_score = -math.inf
        for m in root_moves:
            m = _with_default_promotion(board, m)
            child = apply_move(board, state, m)
            # Without noise the best score so far is a sound lower bound for
            # the remaining root moves; with noise every move needs an exact score.
            alpha = best_score if amplitude == 0 and best_move is not None else -INF
            score = minimax(child.board, child.state, max_depth - 1, alpha, INF, False)
            if amplitude:
                score += rng.uniform(-amplitude / 2, amplitude / 2)
            if score > best_score:
                best_score = score
                best_move = m

        result = SearchResult(best_move, best_score, max_depth, nodes, elapsed_ms())
        logger.debug(
            "search side=%s strength=%d depth=%d nodes=%d time_ms=%d best=%s score=%s",
            side.value,
            strength,
            max_depth,
            nodes,
            result.time_ms,
            best_move,
            best_score,
        )
        return result


def best_move(
    board: Board,
    side: Side,
    state: GameState,
    strength: int,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Return the opponent's chosen move, or ``None`` when ``side`` cannot move."""
    return SearchService().search(board, side, state, strength, rng=rng).best_move
