from __future__ import annotations

import random

import pytest

from chessduel.engine.board import Board, Piece, PieceKind, Side
from chessduel.engine.game import Game, IllegalMoveError
from chessduel.engine.move import Move
from chessduel.engine.state import NO_CASTLING, GameState, Phase


PROMOTION_READY = """
....k...
P.......
........
........
........
........
........
....K...
"""


def _promotion_game() -> Game:
    return Game(
        board=Board.from_diagram(PROMOTION_READY),
        state=GameState(NO_CASTLING, NO_CASTLING),
    )


def test_new_game_starts_with_white() -> None:
    g = Game.new()
    assert g.board == Board.startpos()
    assert g.side_to_move is Side.WHITE
    assert g.status().phase is Phase.PLAYING
    assert g.last_move() is None
    assert not g.can_undo()


def test_legal_moves_only_for_side_to_move() -> None:
    g = Game.new()
    assert g.legal_moves(1, 4) == []
    assert len(g.legal_moves(6, 4)) == 2
    assert len(g.all_moves()) == 20


def test_play_records_and_switches_side() -> None:
    g = Game.new()
    rec = g.play(Move(6, 4, 4, 4))
    assert rec is not None
    assert rec.move.double_pawn
    assert rec.notation() == "e2-e4"
    assert g.side_to_move is Side.BLACK
    assert g.state.en_passant_target == (5, 4)

    rec = g.play(Move(0, 6, 2, 5))
    assert rec is not None and rec.notation() == "Ng8-f6"


def test_illegal_move_leaves_game_unchanged() -> None:
    g = Game.new()
    with pytest.raises(IllegalMoveError):
        g.play(Move(6, 4, 3, 4))
    with pytest.raises(IllegalMoveError):
        g.play(Move(1, 4, 3, 4))
    assert g.board == Board.startpos()
    assert g.history == []


def test_capture_notation_and_captured_list() -> None:
    g = Game.new()
    g.play(Move(6, 4, 4, 4))
    g.play(Move(1, 3, 3, 3))
    rec = g.play(Move(4, 4, 3, 3))
    assert rec is not None
    assert rec.notation() == "e4xd5"
    assert g.captured == [Piece(PieceKind.PAWN, Side.BLACK)]


def test_fools_mate_ends_the_game() -> None:
    g = Game.new()
    g.play(Move(6, 5, 5, 5))
    g.play(Move(1, 4, 3, 4))
    g.play(Move(6, 6, 4, 6))
    rec = g.play(Move(0, 3, 4, 7))
    assert rec is not None
    assert rec.checkmate
    assert rec.notation() == "Qd8-h4#"
    st = g.status()
    assert st.phase is Phase.CHECKMATE
    assert st.winner is Side.BLACK
    assert g.all_moves() == []


def test_castling_notation() -> None:
    g = Game(
        board=Board.from_diagram(
            """
            r...k..r
            ........
            ........
            ........
            ........
            ........
            ........
            R...K..R
            """
        )
    )
    rec = g.play(Move(7, 4, 7, 6))
    assert rec is not None
    assert rec.move.castle is not None
    assert rec.notation() == "O-O"
    rec = g.play(Move(0, 4, 0, 2))
    assert rec is not None and rec.notation() == "O-O-O"


def test_promotion_without_choice_is_suspended() -> None:
    g = _promotion_game()
    assert g.play(Move(1, 0, 0, 0)) is None
    assert g.pending_promotion is not None
    assert g.board == Board.from_diagram(PROMOTION_READY)
    assert g.side_to_move is Side.WHITE

    with pytest.raises(IllegalMoveError):
        g.play(Move(7, 4, 7, 3))

    rec = g.promote(PieceKind.KNIGHT)
    assert rec.notation() == "a7-a8=N"
    assert g.board[0, 0] == Piece(PieceKind.KNIGHT, Side.WHITE)
    assert g.pending_promotion is None
    assert g.side_to_move is Side.BLACK


def test_promotion_with_choice_and_check_suffix() -> None:
    g = _promotion_game()
    rec = g.play(Move(1, 0, 0, 0, promotion=PieceKind.QUEEN))
    assert rec is not None
    assert rec.notation() == "a7-a8=Q+"
    assert g.status().phase is Phase.CHECK


def test_invalid_promotion_choices() -> None:
    g = _promotion_game()
    with pytest.raises(IllegalMoveError):
        g.play(Move(1, 0, 0, 0, promotion=PieceKind.KING))
    with pytest.raises(ValueError):
        g.promote(PieceKind.QUEEN)
    g.play(Move(1, 0, 0, 0))
    with pytest.raises(ValueError):
        g.promote(PieceKind.PAWN)
    g.cancel_promotion()
    assert g.pending_promotion is None
    assert g.board[1, 0] == Piece(PieceKind.PAWN, Side.WHITE)


def test_undo_restores_previous_positions() -> None:
    g = Game.new()
    g.play(Move(6, 4, 4, 4))
    g.play(Move(1, 3, 3, 3))
    g.play(Move(4, 4, 3, 3))
    assert g.can_undo(3)

    g.undo()
    assert g.side_to_move is Side.WHITE
    assert g.captured == []
    assert len(g.history) == 2

    g.undo(2)
    assert g.board == Board.startpos()
    assert g.state == GameState.initial()
    assert g.history == []


def test_undo_errors() -> None:
    g = Game.new()
    with pytest.raises(ValueError):
        g.undo()
    g.play(Move(6, 4, 4, 4))
    with pytest.raises(ValueError):
        g.undo(0)
    with pytest.raises(ValueError):
        g.undo(2)
    assert len(g.history) == 1


def test_play_opponent_moves_for_side_to_move() -> None:
    g = Game.new()
    g.play(Move(6, 4, 4, 4))
    rec = g.play_opponent(3, rng=random.Random(1))
    assert rec is not None
    assert rec.piece.side is Side.BLACK
    assert g.side_to_move is Side.WHITE
    assert len(g.history) == 2


def test_play_opponent_returns_none_when_game_over() -> None:
    g = Game(
        board=Board.from_diagram(
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
        ),
        state=GameState(NO_CASTLING, NO_CASTLING),
        side_to_move=Side.BLACK,
    )
    assert g.play_opponent(10) is None
    assert g.history == []


def test_resign_ends_game_without_touching_position() -> None:
    g = Game.new()
    g.play(Move(6, 4, 4, 4))
    g.resign()
    assert g.resigned_by is Side.BLACK
    assert g.winner() is Side.WHITE
    assert g.is_over()
    # The derived position status is unaffected
    assert g.status().phase is Phase.PLAYING
    with pytest.raises(IllegalMoveError):
        g.play(Move(1, 4, 3, 4))
    with pytest.raises(ValueError):
        g.undo()
    with pytest.raises(ValueError):
        g.resign(Side.WHITE)
    assert g.play_opponent(3) is None
    assert len(g.history) == 1


def test_resign_for_named_side_and_after_mate() -> None:
    g = Game.new()
    g.resign(Side.WHITE)
    assert g.winner() is Side.BLACK

    mated = Game.new()
    for m in (Move(6, 5, 5, 5), Move(1, 4, 3, 4), Move(6, 6, 4, 6), Move(0, 3, 4, 7)):
        mated.play(m)
    with pytest.raises(ValueError):
        mated.resign()
    assert mated.winner() is Side.BLACK
