"""
Human-vs-computer session management.
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional, Union

from .engine import Game, GameSnapshot
from .errors import IllegalMoveError, UndoNotAllowedError
from .moves import parse_move_str
from .search import SearchEngine, get_engine
from .types import DRAW, MoveRecord, Player

logger = logging.getLogger(__name__)


class GameSession:
    """Manages one game between a human and the computer, with undo history."""

    def __init__(self, human_side: Union[Player, str, None] = None,
                 depth: Optional[int] = None,
                 seed: Optional[int] = None,
                 engine: Optional[SearchEngine] = None) -> None:
        from config import get_engine_settings, get_game_rules, get_session_settings
        self.human_side: Player = Player(human_side or get_session_settings().human_side)
        self.depth: int = depth if depth is not None else get_engine_settings().default_depth
        self.allow_undo: bool = get_game_rules().allow_undo
        self.engine: SearchEngine = engine or get_engine(seed)
        self.game = Game()
        self.history: List[GameSnapshot] = []

    @property
    def computer_side(self) -> Player:
        return self.human_side.opponent

    def new_game(self, human_side: Union[Player, str, None] = None) -> None:
        """Reset the game to the default layout."""
        if human_side is not None:
            self.human_side = Player(human_side)
        self.game.reset()
        self.history.clear()

    def set_depth(self, depth: int) -> None:
        """Set the search depth for the computer."""
        self.depth = max(1, min(8, depth))

    def is_human_turn(self) -> bool:
        return not self.game.game_over and self.game.active_player is self.human_side

    def play(self, text: str) -> MoveRecord:
        """Play a human move given as text such as 'b2-b3'."""
        move = parse_move_str(text)
        if not self.game.game_over and self.game.active_player is not self.human_side:
            raise IllegalMoveError(
                f"{self.computer_side.value.capitalize()} is played by the computer")
        snapshot = self.game.save_snapshot(include_log=True)
        record = self.game.execute_move(move)
        self.history.append(snapshot)
        return record

    def computer_move(self) -> Optional[MoveRecord]:
        """Search and play the computer's move.

        Returns None when the game is over or the human is to move. When the
        computer has no legal move it is declared the loser and None is
        returned.
        """
        if self.game.game_over or self.game.active_player is not self.computer_side:
            return None
        side = self.game.active_player
        start_time = time.time()
        move = self.engine.find_best_move(self.game, self.depth)
        elapsed_time = time.time() - start_time
        if move is None:
            self.game.game_over = True
            self.game.winner = side.opponent
            logger.info("%s has no legal move and loses", side.value)
            return None
        logger.debug("Computer (%s) chose %s in %.2fs", side.value, move, elapsed_time)
        snapshot = self.game.save_snapshot(include_log=True)
        record = self.game.execute_move(move)
        self.history.append(snapshot)
        return record

    def undo(self) -> None:
        """Undo back to the last position where the human was to move."""
        if not self.allow_undo:
            raise UndoNotAllowedError("Undo is disabled by the rules settings")
        if not self.history:
            raise UndoNotAllowedError("Nothing to undo")
        snapshot = self.history.pop()
        while snapshot.active_player is not self.human_side and self.history:
            snapshot = self.history.pop()
        self.game.restore_snapshot(snapshot)

    def status_text(self) -> str:
        game = self.game
        if not game.game_over:
            return f"{game.active_player.value.capitalize()} to move"
        if game.winner == DRAW:
            return "Draw"
        return f"{game.winner.value.capitalize()} wins"
