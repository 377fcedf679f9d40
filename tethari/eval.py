"""
Static evaluation, scored from White's perspective (positive favours White).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import List

from .board import ALL_DIRS, Board
from .types import BOARD_SIZE, MATERIAL, PieceKind, Player, Square, in_bounds

ENDANGERED_PENALTY = 0.4
NEIGHBOR_BONUS = 25
CENTER_RANK_BONUS = 15
ADVANCED_SUPPORTED_BONUS = 20
SKIRMISHER_ADVANCE_WEIGHT = 40
FLANK_BONUS = 80
SINGLE_GROUP_BONUS = 50
SPLIT_GROUP_PENALTY = 40


def count_groups(board: Board, player: Player) -> int:
    """Number of 8-connected components formed by ``player``'s pieces."""
    visited = [[False] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    groups = 0
    for start, _piece in board.pieces(player):
        if visited[start.file][start.rank]:
            continue
        groups += 1
        visited[start.file][start.rank] = True
        queue = deque([start])
        while queue:
            cur = queue.popleft()
            for df, dr in ALL_DIRS:
                f, r = cur.file + df, cur.rank + dr
                if not in_bounds(f, r) or visited[f][r]:
                    continue
                near = board.get(Square(f, r))
                if near is None or near.owner is not player:
                    continue
                visited[f][r] = True
                queue.append(Square(f, r))
    return groups


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def evaluate(board: Board) -> int:
    score = 0
    for sq, piece in board.occupied():
        sign = 1 if piece.owner is Player.WHITE else -1
        value = MATERIAL[piece.kind]
        score += sign * value

        if piece.endangered:
            score -= sign * _round_half_up(value * ENDANGERED_PENALTY)

        neighbors = board.friendly_neighbors(sq, piece.owner)
        score += sign * neighbors * NEIGHBOR_BONUS

        if 2 <= sq.rank <= 3:
            score += sign * CENTER_RANK_BONUS

        advancement = sq.rank if piece.owner is Player.WHITE else BOARD_SIZE - 1 - sq.rank
        if advancement >= 3 and neighbors > 0:
            score += sign * ADVANCED_SUPPORTED_BONUS

        if piece.kind is PieceKind.SKIRMISHER:
            score += sign * advancement * SKIRMISHER_ADVANCE_WEIGHT
            flanks: List[Square] = []
            for df in (-1, 1):
                side = sq.offset(df, 0)
                if side is not None:
                    flanks.append(side)
            front = sq.offset(0, piece.owner.forward)
            if front is not None:
                flanks.append(front)
            for near_sq in flanks:
                near = board.get(near_sq)
                if near is not None and near.owner is not piece.owner:
                    score += sign * FLANK_BONUS

    for player in (Player.WHITE, Player.BLACK):
        sign = 1 if player is Player.WHITE else -1
        groups = count_groups(board, player)
        if groups <= 1:
            score += sign * SINGLE_GROUP_BONUS
        else:
            score -= sign * (groups - 1) * SPLIT_GROUP_PENALTY

    return score


class Evaluator(ABC):
    """Abstract evaluator interface for position scoring."""

    @abstractmethod
    def evaluate_position(self, board: Board) -> int:  # pragma: no cover
        """Score a position from White's perspective."""
        raise NotImplementedError


class HeuristicEvaluator(Evaluator):
    """Material, connectivity, endangerment, advancement and flanking terms."""

    def evaluate_position(self, board: Board) -> int:
        return evaluate(board)


def get_evaluator() -> Evaluator:
    return HeuristicEvaluator()


__all__ = [
    "Evaluator",
    "HeuristicEvaluator",
    "get_evaluator",
    "evaluate",
    "count_groups",
]
