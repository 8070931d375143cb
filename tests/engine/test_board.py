from __future__ import annotations

import pytest

from chessduel.engine.apply import apply_move
from chessduel.engine.board import Board, Piece, PieceKind, Side, clone
from chessduel.engine.move import Move
from chessduel.engine.state import GameState


def test_startpos_layout() -> None:
    b = Board.startpos()
    assert b[0, 4] == Piece(PieceKind.KING, Side.BLACK)
    assert b[7, 3] == Piece(PieceKind.QUEEN, Side.WHITE)
    assert all(b[6, c] == Piece(PieceKind.PAWN, Side.WHITE) for c in range(8))
    assert all(b[r, c] is None for r in range(2, 6) for c in range(8))
    assert b.diagram().splitlines()[0] == "rnbqkbnr"
    assert b.diagram().splitlines()[7] == "RNBQKBNR"


def test_diagram_parses_back() -> None:
    b = Board.startpos()
    assert Board.from_diagram(b.diagram()) == b


def test_clone_is_independent() -> None:
    b = Board.startpos()
    c = b.clone()
    assert c == b and c is not b
    assert clone(b) == b
    moved = apply_move(c, GameState.initial(), Move(6, 4, 4, 4)).board
    assert b == Board.startpos()
    assert moved != b


def test_board_has_no_public_setter() -> None:
    b = Board.startpos()
    with pytest.raises(TypeError):
        b[4, 4] = Piece(PieceKind.QUEEN, Side.WHITE)  # type: ignore[index]
    assert b[4, 4] is None


def test_pieces_filters_by_side() -> None:
    b = Board.startpos()
    assert len(list(b.pieces())) == 32
    white = list(b.pieces(Side.WHITE))
    assert len(white) == 16
    assert white[0][:2] == (6, 0)


@pytest.mark.parametrize(
    "diagram",
    [
        "........\n" * 7,
        "........\n" * 7 + ".......\n",
        "........\n" * 7 + "...x....\n",
    ],
)
def test_bad_diagrams_rejected(diagram: str) -> None:
    with pytest.raises(ValueError):
        Board.from_diagram(diagram)
