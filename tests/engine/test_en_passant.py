from __future__ import annotations

from chessduel.engine.apply import apply_move
from chessduel.engine.board import Board, Piece, PieceKind, Side
from chessduel.engine.movegen import legal_moves
from chessduel.engine.state import GameState


def _after_black_double_push() -> tuple[Board, GameState]:
    b = Board.from_diagram(
        """
        ....k...
        ....p...
        ........
        ...P....
        ........
        ........
        ........
        ....K...
        """
    )
    push = next(m for m in legal_moves(b, 1, 4, GameState.initial()) if m.double_pawn)
    res = apply_move(b, GameState.initial(), push)
    return res.board, res.state


def test_double_push_sets_target_square() -> None:
    _, st = _after_black_double_push()
    assert st.en_passant_target == (2, 4)


def test_en_passant_generated_and_applied() -> None:
    b, st = _after_black_double_push()
    ep = [m for m in legal_moves(b, 3, 3, st) if m.en_passant]
    assert len(ep) == 1
    assert (ep[0].to_row, ep[0].to_col) == (2, 4)

    res = apply_move(b, st, ep[0])
    assert res.board[2, 4] == Piece(PieceKind.PAWN, Side.WHITE)
    assert res.board[3, 4] is None
    assert res.board[3, 3] is None
    assert res.captured == Piece(PieceKind.PAWN, Side.BLACK)
    assert res.state.en_passant_target is None


def test_en_passant_expires_after_one_move() -> None:
    b, st = _after_black_double_push()
    king_step = next(m for m in legal_moves(b, 7, 4, st) if m.to_col == 3)
    res = apply_move(b, st, king_step)
    assert res.state.en_passant_target is None
    reply = next(m for m in legal_moves(res.board, 0, 4, res.state) if m.to_col == 3)
    res2 = apply_move(res.board, res.state, reply)
    assert not any(m.en_passant for m in legal_moves(res2.board, 3, 3, res2.state))


def test_en_passant_that_exposes_king_is_illegal() -> None:
    # Removing both pawns from the fifth rank opens the rook's line to the king
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        K..Pp..r
        ........
        ........
        ........
        ........
        """
    )
    st = GameState(en_passant_target=(2, 4))
    assert not any(m.en_passant for m in legal_moves(b, 3, 3, st))
    assert any(m.to_row == 2 and m.to_col == 3 for m in legal_moves(b, 3, 3, st))


def test_target_without_enemy_pawn_is_ignored() -> None:
    b = Board.from_diagram(
        """
        ....k...
        ........
        ........
        ...Pn...
        ........
        ........
        ........
        ....K...
        """
    )
    st = GameState(en_passant_target=(2, 4))
    assert not any(m.en_passant for m in legal_moves(b, 3, 3, st))
