import pytest

from tethari.board import Board
from tethari.errors import InvalidSquareError
from tethari.moves import MoveGenerator, MoveValidator, legal_moves, parse_move_str, move_to_str
from tethari.types import Move, Piece, PieceKind, Player, Square, parse_square

W = Player.WHITE
B = Player.BLACK

# Helpers

def sq(name):
    return parse_square(name)


def names(squares):
    return sorted(s.name for s in squares)


def board_with(*entries):
    board = Board()
    for name, player, kind in entries:
        board.put(sq(name), Piece(player, kind))
    return board


def test_empty_square_has_no_destinations():
    gen = MoveGenerator()
    assert gen.legal_destinations(Board(), sq("c3")) == []


def test_captain_steps_all_directions():
    board = board_with(("c3", W, PieceKind.CAPTAIN))
    dests = MoveGenerator().legal_destinations(board, sq("c3"))
    assert names(dests) == ["b2", "b3", "b4", "c2", "c4", "d2", "d3", "d4"]


def test_warden_white_and_black_tables_mirror():
    board = board_with(("c3", W, PieceKind.WARDEN), ("c4", B, PieceKind.WARDEN))
    gen = MoveGenerator()
    # White: forward, back, sideways, back-diagonals; c4 is an enemy so capture allowed
    assert names(gen.legal_destinations(board, sq("c3"))) == ["b2", "b3", "c2", "c4", "d2", "d3"]
    # Black forward is down the board
    assert names(gen.legal_destinations(board, sq("c4"))) == ["b4", "b5", "c3", "c5", "d4", "d5"]


def test_blade_moves_forward_and_back_diagonally():
    board = board_with(("c3", W, PieceKind.BLADE))
    dests = MoveGenerator().legal_destinations(board, sq("c3"))
    assert names(dests) == ["b2", "b4", "c4", "d2", "d4"]


def test_knight_jumps_over_pieces():
    board = board_with(
        ("b2", W, PieceKind.KNIGHT),
        ("b3", W, PieceKind.WARDEN),
        ("c2", W, PieceKind.WARDEN),
        ("c3", W, PieceKind.WARDEN),
    )
    dests = MoveGenerator().legal_destinations(board, sq("b2"))
    assert names(dests) == ["a4", "c4", "d1", "d3"]


def test_rook_slide_stops_at_first_piece():
    board = board_with(
        ("a3", W, PieceKind.ROOK),
        ("a5", B, PieceKind.BLADE),
        ("c3", W, PieceKind.WARDEN),
    )
    dests = MoveGenerator().legal_destinations(board, sq("a3"))
    # Up to a5 (capture, stop), down to a1, right to b3 (c3 is friendly)
    assert names(dests) == ["a1", "a2", "a4", "a5", "b3"]


def test_skirmisher_forward_step_and_side_glide():
    board = board_with(("b3", W, PieceKind.SKIRMISHER), ("e3", B, PieceKind.CAPTAIN))
    dests = MoveGenerator().legal_destinations(board, sq("b3"))
    assert names(dests) == ["a3", "b4", "c3", "d3", "e3"]


def test_skirmisher_cannot_move_backward_or_diagonally():
    board = board_with(("c4", B, PieceKind.SKIRMISHER), ("b3", W, PieceKind.BLADE))
    dests = MoveGenerator().legal_destinations(board, sq("c4"))
    assert "c5" not in names(dests)
    assert "b3" not in names(dests)
    assert "c3" in names(dests)


def test_breaker_diagonal_step_and_orthogonal_slide():
    board = board_with(("a1", W, PieceKind.BREAKER), ("a3", W, PieceKind.CAPTAIN))
    dests = MoveGenerator().legal_destinations(board, sq("a1"))
    assert names(dests) == ["a2", "b1", "b2", "c1", "d1", "e1", "f1"]


def test_no_move_lands_on_friendly_piece():
    board = Board.default()
    for player in Player:
        for move in legal_moves(board, player):
            target = board.get(move.target)
            assert target is None or target.owner is not player


def test_initial_position_moves():
    board = Board.default()
    moves = MoveGenerator().legal_moves(board, W)
    assert Move(sq("b2"), sq("b3")) in moves
    assert Move(sq("d2"), sq("c4")) in moves
    assert len(moves) == len(set(moves))


def test_move_validator_checks_side_and_destination():
    board = Board.default()
    assert MoveValidator.validate(board, W, Move(sq("b2"), sq("b3")))
    assert not MoveValidator.validate(board, B, Move(sq("b2"), sq("b3")))
    assert not MoveValidator.validate(board, W, Move(sq("b2"), sq("b4")))


def test_parse_move_str_variants():
    assert parse_move_str("b2-b3") == Move(sq("b2"), sq("b3"))
    assert parse_move_str(" B3xB4 ") == Move(sq("b3"), sq("b4"))
    assert parse_move_str("b3:b4") == Move(sq("b3"), sq("b4"))
    assert move_to_str(Move(sq("b3"), sq("b4")), capture=True) == "b3xb4"


@pytest.mark.parametrize("text", ["", "b2b3", "g1-a1", "a7-a6", "a0-a1", "zz", "b2 - "])
def test_parse_move_str_rejects_malformed(text):
    with pytest.raises(InvalidSquareError):
        parse_move_str(text)


def test_square_bounds_are_enforced():
    with pytest.raises(InvalidSquareError):
        Square(6, 0)
    with pytest.raises(InvalidSquareError):
        parse_square("f7")
    assert Square(5, 5).name == "f6"
    assert sq("a1").offset(-1, 0) is None
