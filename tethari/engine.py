"""
Game state machine: owns the board, turn, counters, capture lists and
position history, and executes moves in the fixed rule order:

    relocate/capture -> promotion -> isolation resolution -> isolation
    marking -> event counter -> termination checks

Two entry points share the same core:

    execute_move  validates the request and keeps the move log
    explore_move  skips validation and the log; used by the search
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .board import Board
from .errors import GameOverError, IllegalMoveError, InvalidSquareError
from .moves import has_moves, legal_destinations, legal_moves
from .types import (
    DRAW,
    Move,
    MoveLogEntry,
    MoveRecord,
    Piece,
    PieceKind,
    Player,
    Square,
    Winner,
    to_square,
)

logger = logging.getLogger(__name__)

PieceSpec = Union[Mapping[str, Any], Sequence[Any]]


@dataclass(frozen=True)
class GameSnapshot:
    """Independent copy of everything move execution touches."""

    board: Board
    active_player: Player
    move_count: int
    moves_without_event: int
    position_history: Tuple[bytes, ...]
    captured_white: Tuple[PieceKind, ...]
    captured_black: Tuple[PieceKind, ...]
    game_over: bool
    winner: Optional[Winner]
    last_move: Optional[MoveRecord]
    last_deaths: Tuple[Square, ...]
    last_endangered: Tuple[Square, ...]
    move_log: Optional[Tuple[MoveLogEntry, ...]] = None


class Game:
    """Rules engine for one game."""

    def __init__(self, repetition_limit: Optional[int] = None,
                 no_event_limit: Optional[int] = None) -> None:
        if repetition_limit is None or no_event_limit is None:
            from config import get_game_rules
            rules = get_game_rules()
            if repetition_limit is None:
                repetition_limit = rules.repetition_limit
            if no_event_limit is None:
                no_event_limit = rules.no_event_limit
        self.repetition_limit: int = repetition_limit
        self.no_event_limit: int = no_event_limit
        self.reset()

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------
    def _clear(self, active_player: Player) -> None:
        self.board: Board = Board()
        self.active_player: Player = active_player
        self.move_count: int = 0
        self.moves_without_event: int = 0
        self.position_history: List[bytes] = []
        self.captured_white: List[PieceKind] = []
        self.captured_black: List[PieceKind] = []
        self.game_over: bool = False
        self.winner: Optional[Winner] = None
        self.last_move: Optional[MoveRecord] = None
        self.last_deaths: Tuple[Square, ...] = ()
        self.last_endangered: Tuple[Square, ...] = ()
        self.move_log: List[MoveLogEntry] = []

    def reset(self) -> None:
        """Start a new game from the default layout."""
        self._clear(Player.WHITE)
        self.board = Board.default()
        self.position_history.append(self.position_key())

    def load_position(self, pieces: Iterable[PieceSpec],
                      active_player: Union[Player, str] = Player.WHITE,
                      moves_without_event: int = 0,
                      move_count: int = 0) -> None:
        """Load an arbitrary position.

        Each entry is a mapping with ``square``, ``player`` (or ``owner``),
        ``kind`` (or ``type``) and optional ``endangered`` keys, or a tuple
        ``(square, owner, kind[, endangered])``. Entries with invalid squares
        are skipped.
        """
        self._clear(Player(active_player))
        self.moves_without_event = moves_without_event
        self.move_count = move_count
        for spec in pieces:
            if isinstance(spec, Mapping):
                raw_square = spec.get("square")
                owner = spec.get("player", spec.get("owner"))
                kind = spec.get("kind", spec.get("type"))
                endangered = bool(spec.get("endangered", False))
            else:
                raw_square, owner, kind = spec[0], spec[1], spec[2]
                endangered = bool(spec[3]) if len(spec) > 3 else False
            try:
                square = to_square(raw_square)
            except InvalidSquareError:
                logger.debug("Skipping piece on invalid square %r", raw_square)
                continue
            self.board.put(square, Piece(Player(owner), _as_kind(kind), endangered))
        self.position_history.append(self.position_key())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def piece_at(self, square: Union[Square, str]) -> Optional[Piece]:
        return self.board.get(to_square(square))

    def pieces(self, player: Player) -> List[Tuple[Square, Piece]]:
        return self.board.pieces(player)

    def piece_count(self, player: Player) -> int:
        return self.board.count(player)

    def captured_by_player(self, player: Player) -> List[PieceKind]:
        """Pieces lost by ``player`` (captured or dead by isolation)."""
        return self.captured_white if player is Player.WHITE else self.captured_black

    def legal_destinations(self, square: Union[Square, str]) -> List[Square]:
        return legal_destinations(self.board, to_square(square))

    def all_legal_moves(self, player: Optional[Player] = None) -> List[Move]:
        return legal_moves(self.board, player or self.active_player)

    def position_key(self) -> bytes:
        """Active player plus every square's (owner, kind, endangered)."""
        side = b"w" if self.active_player is Player.WHITE else b"b"
        return side + self.board.to_array().tobytes()

    # ------------------------------------------------------------------
    # Move execution
    # ------------------------------------------------------------------
    def execute_move(self, move: Move) -> MoveRecord:
        """Validate and play a move, updating the move log."""
        if self.game_over:
            raise GameOverError(f"Game is over (winner: {_winner_name(self.winner)})")
        piece = self.board.get(move.origin)
        if piece is None:
            raise IllegalMoveError(f"No piece on {move.origin.name}")
        if piece.owner is not self.active_player:
            raise IllegalMoveError(
                f"{move.origin.name} holds a {piece.owner.value} piece but "
                f"{self.active_player.value} is to move")
        if move.target not in legal_destinations(self.board, move.origin):
            raise IllegalMoveError(f"Illegal move {move}")

        record = self._apply(move)
        self._log(record)

        if record.deaths:
            logger.info("Isolation deaths after %s: %s", record.notation,
                        ", ".join(sq.name for sq in record.deaths))
        if self.game_over:
            logger.info("Game over after %d half-moves, winner: %s",
                        self.move_count, _winner_name(self.winner))
        return record

    def explore_move(self, move: Move) -> MoveRecord:
        """Apply a move for lookahead only: no validation, no log."""
        return self._apply(move)

    def _apply(self, move: Move) -> MoveRecord:
        board = self.board
        moving = board.take(move.origin)
        if moving is None:
            raise IllegalMoveError(f"No piece on {move.origin.name}")
        player = moving.owner
        target = board.get(move.target)
        board.put(move.target, moving)

        captured = False
        captured_kind: Optional[PieceKind] = None
        promoted = False
        if target is not None:
            captured = True
            captured_kind = target.kind
            self.captured_by_player(target.owner).append(target.kind)

        if moving.kind is PieceKind.SKIRMISHER and captured:
            board.put(move.target, Piece(player, PieceKind.BREAKER))
            promoted = True

        deaths = self._resolve_endangered(player)
        newly_endangered = self._mark_endangered(player)

        if captured or deaths:
            self.moves_without_event = 0
        else:
            self.moves_without_event += 1
        self.move_count += 1

        record = MoveRecord(
            move=move,
            player=player,
            kind=moving.kind,
            captured=captured,
            captured_kind=captured_kind,
            promoted=promoted,
            deaths=deaths,
            endangered=newly_endangered,
        )
        self.last_move = record
        self.last_deaths = deaths
        self.last_endangered = newly_endangered

        self._check_termination(player)
        return record

    def _resolve_endangered(self, player: Player) -> Tuple[Square, ...]:
        """Kill still-isolated endangered pieces, all at once; clear the rest."""
        own = self.board.pieces(player)
        if len(own) <= 1:
            for sq, piece in own:
                self.board.put(sq, piece.with_endangered(False))
            return ()

        deaths: List[Square] = []
        for sq, piece in own:
            if not piece.endangered:
                continue
            if self.board.is_isolated(sq, player):
                deaths.append(sq)
            else:
                self.board.put(sq, piece.with_endangered(False))

        lost = self.captured_by_player(player)
        for sq in deaths:
            dying = self.board.take(sq)
            if dying is not None:
                lost.append(dying.kind)
        return tuple(deaths)

    def _mark_endangered(self, player: Player) -> Tuple[Square, ...]:
        own = self.board.pieces(player)
        if len(own) <= 1:
            for sq, piece in own:
                self.board.put(sq, piece.with_endangered(False))
            return ()

        marked: List[Square] = []
        for sq, piece in own:
            if self.board.is_isolated(sq, player):
                if not piece.endangered:
                    marked.append(sq)
                self.board.put(sq, piece.with_endangered(True))
            else:
                self.board.put(sq, piece.with_endangered(False))
        return tuple(marked)

    def _check_termination(self, mover: Player) -> None:
        opponent = mover.opponent
        if self.board.count(opponent) == 0:
            self._finish(mover)
            return
        if self.board.count(mover) == 0:
            self._finish(opponent)
            return

        self.active_player = opponent
        key = self.position_key()
        self.position_history.append(key)

        if (self.position_history.count(key) >= self.repetition_limit
                or self.moves_without_event >= self.no_event_limit):
            self._finish(DRAW)
            return

        if not has_moves(self.board, opponent):
            # Stalemate loses
            self._finish(mover)

    def _finish(self, winner: Winner) -> None:
        self.game_over = True
        self.winner = winner

    def _log(self, record: MoveRecord) -> None:
        notation = record.notation
        if record.player is Player.WHITE:
            self.move_log.append(MoveLogEntry(math.ceil(self.move_count / 2), white=notation))
        elif self.move_log and not self.move_log[-1].black:
            self.move_log[-1].black = notation
        else:
            self.move_log.append(MoveLogEntry(math.ceil(self.move_count / 2), black=notation))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def save_snapshot(self, include_log: bool = False) -> GameSnapshot:
        log = None
        if include_log:
            log = tuple(MoveLogEntry(e.number, e.white, e.black) for e in self.move_log)
        return GameSnapshot(
            board=self.board.copy(),
            active_player=self.active_player,
            move_count=self.move_count,
            moves_without_event=self.moves_without_event,
            position_history=tuple(self.position_history),
            captured_white=tuple(self.captured_white),
            captured_black=tuple(self.captured_black),
            game_over=self.game_over,
            winner=self.winner,
            last_move=self.last_move,
            last_deaths=self.last_deaths,
            last_endangered=self.last_endangered,
            move_log=log,
        )

    def restore_snapshot(self, snapshot: GameSnapshot) -> None:
        """Restore all fields; the snapshot stays reusable."""
        self.board = snapshot.board.copy()
        self.active_player = snapshot.active_player
        self.move_count = snapshot.move_count
        self.moves_without_event = snapshot.moves_without_event
        self.position_history = list(snapshot.position_history)
        self.captured_white = list(snapshot.captured_white)
        self.captured_black = list(snapshot.captured_black)
        self.game_over = snapshot.game_over
        self.winner = snapshot.winner
        self.last_move = snapshot.last_move
        self.last_deaths = snapshot.last_deaths
        self.last_endangered = snapshot.last_endangered
        if snapshot.move_log is not None:
            self.move_log = [MoveLogEntry(e.number, e.white, e.black) for e in snapshot.move_log]


def _as_kind(kind: Union[PieceKind, str]) -> PieceKind:
    if isinstance(kind, PieceKind):
        return kind
    try:
        return PieceKind(kind)
    except ValueError:
        pass
    try:
        return PieceKind[str(kind).upper()]
    except KeyError:
        raise ValueError(f"Unknown piece kind: {kind!r}") from None


def _winner_name(winner: Optional[Winner]) -> str:
    if winner is None:
        return "none"
    return winner.value if isinstance(winner, Player) else str(winner)
