from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Side(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE


class PieceKind(str, Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


PROMOTION_KINDS = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)

BACK_RANK_ORDER = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


def home_row(side: Side) -> int:
    """Back rank row for ``side``; Black sits at the top (row 0)."""
    return 7 if side is Side.WHITE else 0


def forward(side: Side) -> int:
    """Row delta of a pawn advance for ``side``."""
    return -1 if side is Side.WHITE else 1


def on_board(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


@dataclass(frozen=True)
class Piece:
    """Immutable (kind, side) pair occupying a square."""

    kind: PieceKind
    side: Side

    @property
    def symbol(self) -> str:
        ch = self.kind.value
        return ch.upper() if self.side is Side.WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        try:
            kind = PieceKind(ch.lower())
        except ValueError as e:
            raise ValueError(f"invalid piece symbol: {ch!r}") from e
        return cls(kind, Side.WHITE if ch.isupper() else Side.BLACK)


Square = Tuple[int, int]


class Board:
    """8x8 grid of optional pieces addressed by ``(row, col)``.

    Notes:
    - Row 0 is Black's back rank, row 7 is White's; col 0 is the a-file.
    - Pieces are immutable, so ``clone`` copying the grid rows yields a fully
      independent board.
    - Only the move applier writes to a board; everything else reads.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Optional[List[List[Optional[Piece]]]] = None) -> None:
        if grid is None:
            grid = [[None] * 8 for _ in range(8)]
        if len(grid) != 8 or any(len(r) != 8 for r in grid):
            raise ValueError("board must be 8x8")
        self._grid = grid

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board set up in the standard starting position.

        Returns:
            Board: Board with Black on rows 0-1 and White on rows 6-7.
        """
        board = cls()
        for col, kind in enumerate(BACK_RANK_ORDER):
            board._grid[0][col] = Piece(kind, Side.BLACK)
            board._grid[1][col] = Piece(PieceKind.PAWN, Side.BLACK)
            board._grid[6][col] = Piece(PieceKind.PAWN, Side.WHITE)
            board._grid[7][col] = Piece(kind, Side.WHITE)
        return board

    @classmethod
    def from_diagram(cls, diagram: str) -> "Board":
        """Build a board from the ASCII display format.

        Args:
            diagram (str): Eight non-empty lines of eight characters each,
                top line is row 0. ``.`` marks an empty square, uppercase
                letters are White pieces, lowercase letters Black ones.
                Whitespace inside a line is ignored.

        Returns:
            Board: The described position.

        Raises:
            ValueError: If the diagram does not describe exactly 8x8 squares
                or contains an unknown piece letter.
        """
        lines = [ln.replace(" ", "") for ln in diagram.strip().splitlines() if ln.strip()]
        if len(lines) != 8:
            raise ValueError("diagram must have 8 rows")
        board = cls()
        for row, line in enumerate(lines):
            if len(line) != 8:
                raise ValueError(f"diagram row {row} must have 8 squares")
            for col, ch in enumerate(line):
                if ch != ".":
                    board._grid[row][col] = Piece.from_symbol(ch)
        return board

    def diagram(self) -> str:
        """Render the board in the ASCII display format."""
        return "\n".join(
            "".join(p.symbol if p is not None else "." for p in row) for row in self._grid
        )

    def clone(self) -> "Board":
        return Board([list(row) for row in self._grid])

    def __getitem__(self, square: Square) -> Optional[Piece]:
        row, col = square
        return self._grid[row][col]

    def _set(self, row: int, col: int, piece: Optional[Piece]) -> None:
        # Writes are reserved for the move applier and the king-safety simulation
        self._grid[row][col] = piece

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        return f"Board(\n{self.diagram()}\n)"

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[int, int, Piece]]:
        """Yield ``(row, col, piece)`` in row-major order, optionally for one side."""
        for row in range(8):
            for col in range(8):
                p = self._grid[row][col]
                if p is not None and (side is None or p.side is side):
                    yield row, col, p


def clone(board: Board) -> Board:
    return board.clone()
