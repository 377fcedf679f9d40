"""
Minimax search with alpha-beta pruning over the game state machine.

The search explores lines by snapshotting the game, applying moves with
``Game.explore_move`` and restoring the snapshot afterwards, so the caller's
game is unchanged when a search returns.
"""
from __future__ import annotations

import logging
import random
import time
from typing import List, Optional

from .engine import Game
from .eval import Evaluator, get_evaluator
from .types import MATERIAL, Move, Player, SearchStats

logger = logging.getLogger(__name__)

WIN_SCORE = 100000
INF = float("inf")
BOARD_CENTER = 2.5


def order_moves(game: Game, moves: List[Move]) -> List[Move]:
    """Captures by victim value descending, then destinations nearest the centre."""
    board = game.board

    def key(move: Move):
        victim = board.get(move.target)
        value = MATERIAL[victim.kind] if victim is not None else 0
        center = abs(move.target.file - BOARD_CENTER) + abs(move.target.rank - BOARD_CENTER)
        return (-value, center)

    return sorted(moves, key=key)


class SearchEngine:
    """Alpha-beta search engine with a randomised tie-break at the root."""

    def __init__(self, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 evaluator: Optional[Evaluator] = None,
                 time_limit_ms: Optional[int] = None) -> None:
        self.rng: random.Random = rng if rng is not None else random.Random(seed)
        self.evaluator: Evaluator = evaluator or get_evaluator()
        self.time_limit_ms: Optional[int] = time_limit_ms
        self.stats: SearchStats = SearchStats()
        self._deadline: Optional[float] = None

    def find_best_move(self, game: Game, depth: int) -> Optional[Move]:
        """Best move for the side to move, or None when it has no legal move.

        Depths below 1 are searched as depth 1.
        """
        depth = max(1, depth)
        moves = game.all_legal_moves(game.active_player)
        if not moves:
            return None

        self.stats = SearchStats()
        start = time.perf_counter()
        if self.time_limit_ms is not None:
            self._deadline = start + self.time_limit_ms / 1000.0
        else:
            self._deadline = None

        maximizing = game.active_player is Player.WHITE
        best_value = -INF if maximizing else INF
        best_moves: List[Move] = []

        for move in order_moves(game, moves):
            saved = game.save_snapshot()
            game.explore_move(move)
            self.stats.nodes += 1
            value = self._minimax(game, depth - 1, -INF, INF, not maximizing)
            game.restore_snapshot(saved)

            if (maximizing and value > best_value) or (not maximizing and value < best_value):
                best_value = value
                best_moves = [move]
            elif value == best_value:
                best_moves.append(move)

        self.stats.elapsed = time.perf_counter() - start
        self.stats.best_score = int(best_value)
        self.stats.tied_moves = list(best_moves)
        chosen = best_moves[self.rng.randrange(len(best_moves))]
        logger.debug("depth=%d nodes=%d score=%d tied=%d elapsed=%.3fs move=%s",
                     depth, self.stats.nodes, self.stats.best_score, len(best_moves),
                     self.stats.elapsed, chosen)
        return chosen

    def _out_of_time(self) -> bool:
        if self._deadline is None:
            return False
        if time.perf_counter() >= self._deadline:
            self.stats.timed_out = True
            return True
        return False

    def _minimax(self, game: Game, depth: int, alpha: float, beta: float,
                 maximizing: bool) -> float:
        if game.game_over:
            if game.winner is Player.WHITE:
                return WIN_SCORE + depth
            if game.winner is Player.BLACK:
                return -WIN_SCORE - depth
            return 0  # DRAW

        if depth <= 0 or self._out_of_time():
            return self.evaluator.evaluate_position(game.board)

        moves = game.all_legal_moves(game.active_player)
        if not moves:
            return -WIN_SCORE if maximizing else WIN_SCORE

        if maximizing:
            best = -INF
            for move in order_moves(game, moves):
                saved = game.save_snapshot()
                game.explore_move(move)
                self.stats.nodes += 1
                value = self._minimax(game, depth - 1, alpha, beta, False)
                game.restore_snapshot(saved)

                if value > best:
                    best = value
                if value > alpha:
                    alpha = value
                if beta <= alpha:
                    break
            return best

        best = INF
        for move in order_moves(game, moves):
            saved = game.save_snapshot()
            game.explore_move(move)
            self.stats.nodes += 1
            value = self._minimax(game, depth - 1, alpha, beta, True)
            game.restore_snapshot(saved)

            if value < best:
                best = value
            if value < beta:
                beta = value
            if beta <= alpha:
                break
        return best


def get_engine(seed: Optional[int] = None) -> SearchEngine:
    """Get a search engine configured from the engine settings."""
    from config import get_engine_settings
    settings = get_engine_settings()
    return SearchEngine(
        seed=seed if seed is not None else settings.seed,
        time_limit_ms=settings.time_limit_ms,
    )


def find_best_move(game: Game, depth: int,
                   rng: Optional[random.Random] = None) -> Optional[Move]:
    """Convenience wrapper around ``SearchEngine.find_best_move``."""
    return SearchEngine(rng=rng).find_best_move(game, depth)


__all__ = [
    "SearchEngine",
    "get_engine",
    "find_best_move",
    "order_moves",
    "WIN_SCORE",
]
