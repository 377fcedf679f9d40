from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .types import BOARD_SIZE, Piece, PieceKind, Player, Square, in_bounds

Grid = List[List[Optional[Piece]]]  # indexed [file][rank]

ALL_DIRS: List[Tuple[int, int]] = [
    (0, 1), (0, -1), (1, 0), (-1, 0),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
]

_KIND_CODE = {kind: i + 1 for i, kind in enumerate(PieceKind)}

# Back rank (rank 1 for White, rank 6 for Black), files a..f
_BACK_RANK = [
    PieceKind.BLADE, PieceKind.WARDEN, PieceKind.CAPTAIN,
    PieceKind.ROOK, PieceKind.WARDEN, PieceKind.BLADE,
]
# Second rank: file -> kind
_SECOND_RANK = {1: PieceKind.SKIRMISHER, 3: PieceKind.KNIGHT, 5: PieceKind.SKIRMISHER}


def _empty_grid() -> Grid:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


class Board:
    """6x6 grid of optional pieces. Each square holds at most one piece."""

    __slots__ = ("_grid",)

    def __init__(self, grid: Optional[Grid] = None) -> None:
        self._grid: Grid = grid if grid is not None else _empty_grid()

    @classmethod
    def default(cls) -> "Board":
        """Starting formation: nine pieces per side on the two home ranks."""
        board = cls()
        for player, back, second in ((Player.WHITE, 0, 1), (Player.BLACK, 5, 4)):
            for file, kind in enumerate(_BACK_RANK):
                board._grid[file][back] = Piece(player, kind)
            for file, kind in _SECOND_RANK.items():
                board._grid[file][second] = Piece(player, kind)
        return board

    def get(self, square: Square) -> Optional[Piece]:
        return self._grid[square.file][square.rank]

    def put(self, square: Square, piece: Optional[Piece]) -> None:
        self._grid[square.file][square.rank] = piece

    def take(self, square: Square) -> Optional[Piece]:
        """Remove and return the piece on a square."""
        piece = self._grid[square.file][square.rank]
        self._grid[square.file][square.rank] = None
        return piece

    def occupied(self) -> Iterator[Tuple[Square, Piece]]:
        """All (square, piece) pairs, file-major then rank order."""
        for file in range(BOARD_SIZE):
            column = self._grid[file]
            for rank in range(BOARD_SIZE):
                piece = column[rank]
                if piece is not None:
                    yield Square(file, rank), piece

    def pieces(self, player: Player) -> List[Tuple[Square, Piece]]:
        return [(sq, p) for sq, p in self.occupied() if p.owner is player]

    def count(self, player: Player) -> int:
        n = 0
        for column in self._grid:
            for piece in column:
                if piece is not None and piece.owner is player:
                    n += 1
        return n

    def friendly_neighbors(self, square: Square, player: Player) -> int:
        n = 0
        for df, dr in ALL_DIRS:
            f, r = square.file + df, square.rank + dr
            if not in_bounds(f, r):
                continue
            near = self._grid[f][r]
            if near is not None and near.owner is player:
                n += 1
        return n

    def is_isolated(self, square: Square, player: Player) -> bool:
        """True when no friendly piece sits on any of the 8 adjacent squares."""
        for df, dr in ALL_DIRS:
            f, r = square.file + df, square.rank + dr
            if not in_bounds(f, r):
                continue
            near = self._grid[f][r]
            if near is not None and near.owner is player:
                return False
        return True

    def copy(self) -> "Board":
        # Pieces are frozen, so copying the columns is enough for independence
        return Board([list(column) for column in self._grid])

    def to_array(self) -> np.ndarray:
        """int8 encoding: 0 empty, kind code (+8 if endangered), negated for Black."""
        arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for sq, piece in self.occupied():
            code = _KIND_CODE[piece.kind] + (8 if piece.endangered else 0)
            arr[sq.file, sq.rank] = code if piece.owner is Player.WHITE else -code
        return arr

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows = []
        for rank in reversed(range(BOARD_SIZE)):
            cells = []
            for file in range(BOARD_SIZE):
                piece = self._grid[file][rank]
                if piece is None:
                    cells.append(".")
                else:
                    letter = piece.kind.letter
                    cells.append(letter if piece.owner is Player.WHITE else letter.lower())
            rows.append("".join(cells))
        return "Board(" + "/".join(rows) + ")"
