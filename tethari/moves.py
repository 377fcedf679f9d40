from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .board import Board
from .errors import InvalidSquareError
from .types import Delta, Move, PieceKind, Player, Square, parse_square

# -----------------------------
# Movement tables
# -----------------------------
_KING_STEPS: List[Delta] = [
    (-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1),
]
_KNIGHT_LEAPS: List[Delta] = [
    (-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1),
]
_DIAGONALS: List[Delta] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
_ORTHOGONALS: List[Delta] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
_HORIZONTALS: List[Delta] = [(1, 0), (-1, 0)]


def _warden_steps(fwd: int) -> List[Delta]:
    return [(0, fwd), (0, -fwd), (-1, 0), (1, 0), (-1, -fwd), (1, -fwd)]


def _blade_steps(fwd: int) -> List[Delta]:
    return [(0, fwd), (-1, fwd), (1, fwd), (-1, -fwd), (1, -fwd)]


# Step offsets are side-dependent because "forward" flips between players
STEP_DELTAS: Dict[Tuple[PieceKind, Player], List[Delta]] = {}
for _player in Player:
    _fwd = _player.forward
    STEP_DELTAS[(PieceKind.CAPTAIN, _player)] = _KING_STEPS
    STEP_DELTAS[(PieceKind.WARDEN, _player)] = _warden_steps(_fwd)
    STEP_DELTAS[(PieceKind.BLADE, _player)] = _blade_steps(_fwd)
    STEP_DELTAS[(PieceKind.KNIGHT, _player)] = _KNIGHT_LEAPS
    STEP_DELTAS[(PieceKind.ROOK, _player)] = []
    STEP_DELTAS[(PieceKind.SKIRMISHER, _player)] = []
    STEP_DELTAS[(PieceKind.BREAKER, _player)] = _DIAGONALS

SLIDE_DIRECTIONS: Dict[PieceKind, List[Delta]] = {
    PieceKind.CAPTAIN: [],
    PieceKind.WARDEN: [],
    PieceKind.BLADE: [],
    PieceKind.KNIGHT: [],
    PieceKind.ROOK: _ORTHOGONALS,
    PieceKind.SKIRMISHER: _HORIZONTALS,
    PieceKind.BREAKER: _ORTHOGONALS,
}

_missing = [k for k in PieceKind if k not in SLIDE_DIRECTIONS
            or any((k, p) not in STEP_DELTAS for p in Player)]
if _missing:
    raise RuntimeError(f"Movement tables incomplete for: {_missing}")


class MoveGenerator:
    """Generates legal destinations for pieces on a board.

    Steps and knight leaps land on empty or enemy squares. Slides walk outward
    until the edge or the first occupied square, which is a legal landing
    square only when it holds an enemy. The Skirmisher adds one forward step.
    """

    def legal_destinations(self, board: Board, origin: Square) -> List[Square]:
        piece = board.get(origin)
        if piece is None:
            return []
        player = piece.owner
        result: List[Square] = []

        for df, dr in STEP_DELTAS[(piece.kind, player)]:
            target = origin.offset(df, dr)
            if target is None:
                continue
            occupant = board.get(target)
            if occupant is None or occupant.owner is not player:
                result.append(target)

        if piece.kind is PieceKind.SKIRMISHER:
            target = origin.offset(0, player.forward)
            if target is not None:
                occupant = board.get(target)
                if occupant is None or occupant.owner is not player:
                    result.append(target)

        for df, dr in SLIDE_DIRECTIONS[piece.kind]:
            target = origin.offset(df, dr)
            while target is not None:
                occupant = board.get(target)
                if occupant is None:
                    result.append(target)
                else:
                    if occupant.owner is not player:
                        result.append(target)
                    break
                target = target.offset(df, dr)

        return result

    def moves_from(self, board: Board, origin: Square) -> List[Move]:
        return [Move(origin, t) for t in self.legal_destinations(board, origin)]

    def legal_moves(self, board: Board, player: Player) -> List[Move]:
        moves: List[Move] = []
        for sq, _piece in board.pieces(player):
            moves.extend(self.moves_from(board, sq))
        return moves

    def has_moves(self, board: Board, player: Player) -> bool:
        for sq, _piece in board.pieces(player):
            if self.legal_destinations(board, sq):
                return True
        return False


class MoveValidator:
    """Validates moves against generated legal moves."""

    @staticmethod
    def validate(board: Board, player: Player, move: Move) -> bool:
        piece = board.get(move.origin)
        if piece is None or piece.owner is not player:
            return False
        return move.target in _GENERATOR.legal_destinations(board, move.origin)


_GENERATOR = MoveGenerator()

_MOVE_RE = re.compile(r"^([a-z]\d)\s*[-x:]\s*([a-z]\d)$")


# Convenience functional API

def legal_destinations(board: Board, origin: Square) -> List[Square]:
    return _GENERATOR.legal_destinations(board, origin)


def legal_moves(board: Board, player: Player) -> List[Move]:
    return _GENERATOR.legal_moves(board, player)


def has_moves(board: Board, player: Player) -> bool:
    return _GENERATOR.has_moves(board, player)


def parse_move_str(s: str) -> Move:
    """Parse 'b2-b3', 'b3xb4' or 'b3:b4' into a Move."""
    text = s.strip().lower() if isinstance(s, str) else ""
    m: Optional[re.Match] = _MOVE_RE.match(text)
    if not m:
        raise InvalidSquareError(f"Malformed move: {s!r}")
    return Move(parse_square(m.group(1)), parse_square(m.group(2)))


def move_to_str(move: Move, capture: bool = False) -> str:
    sep = 'x' if capture else '-'
    return f"{move.origin.name}{sep}{move.target.name}"
