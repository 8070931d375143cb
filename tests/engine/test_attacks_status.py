from __future__ import annotations

import pytest

from chessduel.engine.apply import apply_move
from chessduel.engine.attacks import MissingKingError, is_king_in_check, is_square_attacked
from chessduel.engine.board import Board, Side
from chessduel.engine.move import to_notation
from chessduel.engine.movegen import all_moves
from chessduel.engine.state import NO_CASTLING, GameState, Phase
from chessduel.engine.status import status


KIWIPETE = """
r...k..r
p.ppqpb.
bn..pnp.
...PN...
.p..P...
..N..Q.p
PPPBBPPP
R...K..R
"""


def test_pawn_attacks_point_forward() -> None:
    b = Board.from_diagram(
        """
        ........
        ........
        ........
        ...p....
        ........
        ........
        ....P...
        ........
        """
    )
    # Black pawn on d5 hits c4 and e4
    assert is_square_attacked(b, 4, 2, Side.WHITE)
    assert is_square_attacked(b, 4, 4, Side.WHITE)
    assert not is_square_attacked(b, 2, 2, Side.WHITE)
    # White pawn on e2 hits d3 and f3
    assert is_square_attacked(b, 5, 3, Side.BLACK)
    assert is_square_attacked(b, 5, 5, Side.BLACK)
    assert not is_square_attacked(b, 5, 4, Side.BLACK)


def test_slider_attacks_are_blocked() -> None:
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ........
        r..N....
        ........
        ........
        ....K..b
        """
    )
    assert is_square_attacked(b, 4, 2, Side.WHITE)
    assert not is_square_attacked(b, 4, 5, Side.WHITE)
    assert is_square_attacked(b, 6, 6, Side.WHITE)
    assert not is_square_attacked(b, 4, 2, Side.BLACK)


def test_missing_king_raises() -> None:
    b = Board.from_diagram("\n".join(["........"] * 7 + ["....K..."]))
    assert is_king_in_check(b, Side.WHITE) is False
    with pytest.raises(MissingKingError):
        is_king_in_check(b, Side.BLACK)


def test_legal_moves_never_leave_king_in_check() -> None:
    b = Board.from_diagram(KIWIPETE)
    st = GameState.initial()
    for side in Side:
        for m in all_moves(b, side, st):
            child = apply_move(b, st, m)
            assert not is_king_in_check(child.board, side), str(m)


def test_status_playing_and_check() -> None:
    st = GameState.initial()
    assert status(Board.startpos(), Side.WHITE, st).phase is Phase.PLAYING
    b = Board.from_diagram(
        """
        k...r...
        ........
        ........
        ........
        ........
        ........
        ........
        ....K...
        """
    )
    s = status(b, Side.WHITE, st)
    assert s.phase is Phase.CHECK
    assert s.winner is None
    assert not s.is_over


def test_back_rank_checkmate() -> None:
    b = Board.from_diagram(
        """
        R.....k.
        .....ppp
        ........
        ........
        ........
        ........
        ........
        ......K.
        """
    )
    s = status(b, Side.BLACK, GameState(NO_CASTLING, NO_CASTLING))
    assert s.phase is Phase.CHECKMATE
    assert s.winner is Side.WHITE
    assert s.is_over


def test_stalemate_has_no_winner() -> None:
    b = Board.from_diagram(
        """
        k.......
        ..Q.....
        .K......
        ........
        ........
        ........
        ........
        ........
        """
    )
    s = status(b, Side.BLACK, GameState(NO_CASTLING, NO_CASTLING))
    assert s.phase is Phase.STALEMATE
    assert s.winner is None
    assert s.is_over


def test_to_notation_corners_and_range() -> None:
    assert to_notation(0, 0) == "a8"
    assert to_notation(7, 7) == "h1"
    assert to_notation(7, 4) == "e1"
    assert to_notation(4, 3) == "d4"
    with pytest.raises(ValueError):
        to_notation(8, 0)
    with pytest.raises(ValueError):
        to_notation(0, -1)
