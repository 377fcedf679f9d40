"""Tethari package: rules engine and search for the 6x6 isolation game.

Usage examples:
    from tethari import Game, parse_move_str
    from tethari import SearchEngine
    from tethari import GameSession
"""
from __future__ import annotations

from .types import (
    BOARD_SIZE,
    DRAW,
    MATERIAL,
    Move,
    MoveLogEntry,
    MoveRecord,
    Piece,
    PieceKind,
    Player,
    Square,
    parse_square,
)
from .errors import (
    TethariError,
    InvalidSquareError,
    IllegalMoveError,
    GameOverError,
    UndoNotAllowedError,
)
from .board import Board
from .moves import MoveGenerator, legal_destinations, legal_moves, parse_move_str, move_to_str
from .engine import Game, GameSnapshot
from .eval import Evaluator, HeuristicEvaluator, evaluate, count_groups, get_evaluator
from .search import SearchEngine, find_best_move, get_engine
from .session import GameSession
