"""
Type definitions for the Tethari engine.

This module provides:
- Enums for players and piece kinds
- Frozen dataclasses for squares, pieces, moves and move records
- Type aliases and constants shared by the rules engine and the search
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidSquareError

BOARD_SIZE: int = 6
FILES: str = "abcdef"

DRAW: str = "draw"


class Player(str, Enum):
    """The two sides. White moves up the board (towards rank 6)."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Player":
        return Player.BLACK if self is Player.WHITE else Player.WHITE

    @property
    def forward(self) -> int:
        return 1 if self is Player.WHITE else -1


class PieceKind(str, Enum):
    """Piece kinds keyed by their notation letter."""

    CAPTAIN = "C"
    WARDEN = "W"
    BLADE = "B"
    KNIGHT = "N"
    ROOK = "R"
    SKIRMISHER = "S"
    BREAKER = "X"

    @property
    def letter(self) -> str:
        return self.value


# Material values used by the evaluator and by capture ordering
MATERIAL: Dict[PieceKind, int] = {
    PieceKind.SKIRMISHER: 150,
    PieceKind.BLADE: 280,
    PieceKind.WARDEN: 320,
    PieceKind.CAPTAIN: 380,
    PieceKind.KNIGHT: 450,
    PieceKind.ROOK: 500,
    PieceKind.BREAKER: 750,
}

Winner = Union[Player, str]  # Player or DRAW
Delta = Tuple[int, int]  # (dfile, drank)

_SQUARE_RE = re.compile(r"^[a-f][1-6]$", re.IGNORECASE)


def in_bounds(file: int, rank: int) -> bool:
    return 0 <= file < BOARD_SIZE and 0 <= rank < BOARD_SIZE


@dataclass(frozen=True, order=True)
class Square:
    """A board coordinate: file 0..5 (a-f), rank 0..5 (1-6)."""

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not in_bounds(self.file, self.rank):
            raise InvalidSquareError(f"Square out of bounds: ({self.file}, {self.rank})")

    @property
    def name(self) -> str:
        return FILES[self.file] + str(self.rank + 1)

    def offset(self, dfile: int, drank: int) -> Optional["Square"]:
        """Square shifted by the delta, or None when it leaves the board."""
        f, r = self.file + dfile, self.rank + drank
        if not in_bounds(f, r):
            return None
        return Square(f, r)

    def __str__(self) -> str:
        return self.name


def parse_square(text: str) -> Square:
    """Parse 'a1'..'f6' (case-insensitive) into a Square."""
    if not isinstance(text, str) or not _SQUARE_RE.match(text.strip()):
        raise InvalidSquareError(f"Malformed square: {text!r}")
    s = text.strip().lower()
    return Square(FILES.index(s[0]), int(s[1]) - 1)


def to_square(value: Union[Square, str, Tuple[int, int]]) -> Square:
    """Coerce text, (file, rank) tuples or Squares into a Square."""
    if isinstance(value, Square):
        return value
    if isinstance(value, str):
        return parse_square(value)
    try:
        file, rank = value
        file, rank = int(file), int(rank)
    except (TypeError, ValueError):
        raise InvalidSquareError(f"Cannot interpret {value!r} as a square") from None
    return Square(file, rank)


@dataclass(frozen=True)
class Piece:
    """A piece on the board. Pieces have no identity beyond their square."""

    owner: Player
    kind: PieceKind
    endangered: bool = False

    def with_endangered(self, flag: bool) -> "Piece":
        if self.endangered == flag:
            return self
        return Piece(self.owner, self.kind, flag)


@dataclass(frozen=True)
class Move:
    """A (from, to) pair."""

    origin: Square
    target: Square

    def __str__(self) -> str:
        return f"{self.origin.name}-{self.target.name}"


@dataclass(frozen=True)
class MoveRecord:
    """Observable facts about an executed move."""

    move: Move
    player: Player
    kind: PieceKind
    captured: bool = False
    captured_kind: Optional[PieceKind] = None
    promoted: bool = False
    deaths: Tuple[Square, ...] = ()
    endangered: Tuple[Square, ...] = ()

    @property
    def notation(self) -> str:
        """<Kind><from><-|x><to>[=X][ †sq]*[ !sq]*"""
        text = self.kind.letter + self.move.origin.name
        text += ("x" if self.captured else "-") + self.move.target.name
        if self.promoted:
            text += "=" + PieceKind.BREAKER.letter
        for sq in self.deaths:
            text += " †" + sq.name
        for sq in self.endangered:
            text += " !" + sq.name
        return text


@dataclass
class MoveLogEntry:
    """One numbered row of the move log."""

    number: int
    white: str = ""
    black: str = ""


@dataclass
class SearchStats:
    """Statistics from the last root search."""

    nodes: int = 0
    elapsed: float = 0.0
    best_score: Optional[int] = None
    tied_moves: List[Move] = field(default_factory=list)
    timed_out: bool = False
