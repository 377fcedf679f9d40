"""
Exception hierarchy for the Tethari engine.

All errors are local and recoverable: callers catch them, report to the
user and keep the game running.

Usage:
    from tethari.errors import IllegalMoveError

    try:
        game.execute_move(move)
    except IllegalMoveError as e:
        logger.warning(f"Rejected move: {e}")
"""
from __future__ import annotations

__all__ = [
    "TethariError",
    "InvalidSquareError",
    "IllegalMoveError",
    "GameOverError",
    "UndoNotAllowedError",
]


class TethariError(Exception):
    """Base exception for all Tethari errors."""


class InvalidSquareError(TethariError, ValueError):
    """A square reference is out of bounds or its text is malformed."""


class IllegalMoveError(TethariError):
    """The requested move is not in the generator's legal set."""


class GameOverError(TethariError):
    """A move was requested after the game ended."""


class UndoNotAllowedError(TethariError):
    """Undo was requested but is disabled or there is nothing to undo."""
