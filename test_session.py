import pytest

from config import reset_config
from tethari.engine import Game
from tethari.errors import IllegalMoveError, InvalidSquareError, UndoNotAllowedError
from tethari.session import GameSession
from tethari.types import Player

W = Player.WHITE
B = Player.BLACK


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ("TETHARI_ALLOW_UNDO", "TETHARI_HUMAN_SIDE", "TETHARI_DEPTH",
                 "TETHARI_REPETITION_LIMIT", "TETHARI_NO_EVENT_LIMIT", "TETHARI_TIME_LIMIT_MS"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def initial_snapshot():
    return Game().save_snapshot(include_log=True)


def test_human_then_computer_then_undo():
    session = GameSession(human_side=W, depth=1, seed=0)
    assert session.is_human_turn()
    record = session.play("b2-b3")
    assert record.notation.startswith("Sb2-b3")
    assert not session.is_human_turn()

    reply = session.computer_move()
    assert reply is not None
    assert reply.player is B
    assert session.is_human_turn()
    assert len(session.game.move_log) == 1
    assert session.game.move_log[0].black == reply.notation

    session.undo()
    assert session.game.save_snapshot(include_log=True) == initial_snapshot()
    assert session.history == []


def test_undo_after_human_move_only():
    session = GameSession(human_side="white", depth=1, seed=0)
    session.play("d2-c4")
    session.undo()
    assert session.game.save_snapshot(include_log=True) == initial_snapshot()


def test_undo_with_empty_history_raises():
    session = GameSession(depth=1, seed=0)
    with pytest.raises(UndoNotAllowedError):
        session.undo()


def test_undo_disabled_by_rules(monkeypatch):
    monkeypatch.setenv("TETHARI_ALLOW_UNDO", "false")
    reset_config()
    session = GameSession(depth=1, seed=0)
    session.play("b2-b3")
    with pytest.raises(UndoNotAllowedError):
        session.undo()


def test_bad_input_leaves_game_unchanged():
    session = GameSession(depth=1, seed=0)
    before = session.game.save_snapshot(include_log=True)
    with pytest.raises(InvalidSquareError):
        session.play("b2b3")
    with pytest.raises(IllegalMoveError):
        session.play("b2-b4")
    with pytest.raises(IllegalMoveError):
        session.play("b5-b4")
    assert session.game.save_snapshot(include_log=True) == before
    assert session.history == []


def test_computer_plays_white_when_human_is_black():
    session = GameSession(human_side=B, depth=1, seed=3)
    assert session.computer_side is W
    assert not session.is_human_turn()
    record = session.computer_move()
    assert record.player is W
    assert session.is_human_turn()


def test_side_without_moves_loses():
    session = GameSession(human_side=W, depth=1, seed=0)
    session.game.load_position([
        ("d5", W, "C"), ("d6", W, "W"),
        ("a1", B, "S"), ("b1", B, "S"), ("c1", B, "S"), ("d1", B, "S"),
        ("e1", B, "S"), ("f1", B, "S"),
    ], B)
    assert session.computer_move() is None
    assert session.game.game_over
    assert session.game.winner is W
    assert session.status_text() == "White wins"
    assert session.computer_move() is None


def test_status_text_and_new_game():
    session = GameSession(depth=1, seed=0)
    assert session.status_text() == "White to move"
    session.play("b2-b3")
    assert session.status_text() == "Black to move"
    session.new_game(human_side="black")
    assert session.human_side is B
    assert session.history == []
    assert session.status_text() == "White to move"


def test_set_depth_is_clamped():
    session = GameSession(depth=2, seed=0)
    session.set_depth(0)
    assert session.depth == 1
    session.set_depth(20)
    assert session.depth == 8
    session.set_depth(4)
    assert session.depth == 4


def test_human_cannot_play_the_computer_side():
    session = GameSession(human_side=W, depth=1, seed=0)
    session.play("b2-b3")
    before = session.game.save_snapshot(include_log=True)
    with pytest.raises(IllegalMoveError):
        session.play("b5-b4")
    assert session.game.save_snapshot(include_log=True) == before
    assert len(session.history) == 1


def test_computer_waits_for_human_turn():
    session = GameSession(human_side=W, depth=1, seed=0)
    assert session.computer_move() is None
    assert session.game.save_snapshot(include_log=True) == initial_snapshot()
    assert session.history == []
