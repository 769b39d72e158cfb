"""Unit tests for /src/chess/board.py"""

import pytest

from src.chess.board import STARTING_FEN, Board
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.core.exceptions import BoardStateError, KingNotFoundError

EMPTY_FEN = "/".join(["8"] * 8)
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R"


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def piece_at(board: Board, name: str) -> Piece:
    piece = board.get_piece(sq(name))
    assert piece is not None
    return piece


# --- CREATION ---
def test_standard_board() -> None:
    board = Board.standard()
    assert len(list(board.pieces())) == 32
    assert len(list(board.pieces(Color.WHITE))) == 16
    assert board.to_fen() == STARTING_FEN
    assert not any(piece.has_moved for piece in board.pieces())
    assert piece_at(board, "e1") == Piece(PieceType.KING, Color.WHITE, sq("e1"))
    assert piece_at(board, "d8") == Piece(PieceType.QUEEN, Color.BLACK, sq("d8"))
    assert board.move_history == ()


def test_empty_board() -> None:
    board = Board.empty()
    assert list(board.pieces()) == []
    assert board.to_fen() == EMPTY_FEN


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        EMPTY_FEN,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1",
        "8/8/8/8/8/kq6/8/K7",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


@pytest.mark.parametrize("fen", ["8/8/8", "9/8/8/8/8/8/8/8", "7/8/8/8/8/8/8/8"])
def test_invalid_fen(fen: str) -> None:
    with pytest.raises(ValueError):
        Board.from_fen(fen)


def test_from_fen_marks_displaced_pieces_as_moved() -> None:
    """Only pieces on their starting squares can still make a 'first move' (double push, castling)"""
    board = Board.from_fen("4k3/8/8/8/4P3/8/3P4/R4K1R")
    assert not piece_at(board, "d2").has_moved
    assert piece_at(board, "e4").has_moved
    assert not piece_at(board, "a1").has_moved
    assert not piece_at(board, "h1").has_moved
    assert piece_at(board, "f1").has_moved
    assert not piece_at(board, "e8").has_moved


# --- CELL ACCESS ---
def test_set_piece_updates_the_piece_position() -> None:
    board = Board.empty()
    rook = Piece(PieceType.ROOK, Color.WHITE, sq("a1"))
    board.set_piece(sq("d4"), rook)
    assert board.get_piece(sq("d4")) is rook
    assert rook.position == sq("d4")
    board.set_piece(sq("d4"), None)
    assert board.get_piece(sq("d4")) is None


# --- MOVING PIECES ---
def test_move_piece() -> None:
    board = Board.standard()
    pawn = piece_at(board, "e2")
    record = board.move_piece(sq("e2"), sq("e4"))

    assert board.get_piece(sq("e2")) is None
    assert board.get_piece(sq("e4")) is pawn
    assert pawn.position == sq("e4")
    assert pawn.has_moved

    assert record.piece is pawn
    assert record.from_position == sq("e2")
    assert record.to_position == sq("e4")
    assert record.captured_piece is None
    assert record.is_first_move
    assert board.move_history == (record,)
    assert board.last_move is record
    assert str(record) == "WPe2-e4"


def test_move_piece_captures() -> None:
    board = Board.from_fen("8/8/8/3p4/8/8/8/3Q4")
    queen = piece_at(board, "d1")
    pawn = piece_at(board, "d5")
    record = board.move_piece(sq("d1"), sq("d5"))
    assert board.get_piece(sq("d5")) is queen
    assert record.captured_piece is pawn
    assert str(record) == "WQd1-xd5"


def test_move_piece_does_not_check_legality() -> None:
    """The board is mechanical: a rook 'moving' like a knight is simply executed"""
    board = Board.from_fen("8/8/8/8/8/8/8/R7")
    board.move_piece(sq("a1"), sq("b3"))
    assert piece_at(board, "b3").type == PieceType.ROOK


def test_move_from_empty_square() -> None:
    board = Board.empty()
    with pytest.raises(BoardStateError):
        board.move_piece(sq("e2"), sq("e4"))
    assert board.move_history == ()


def test_second_move_is_not_a_first_move() -> None:
    board = Board.standard()
    board.move_piece(sq("g1"), sq("f3"))
    record = board.move_piece(sq("f3"), sq("g5"))
    assert not record.is_first_move


@pytest.mark.parametrize(
    "king_from, king_to, rook_from, rook_to",
    [
        ("e1", "g1", "h1", "f1"),
        ("e1", "c1", "a1", "d1"),
        ("e8", "g8", "h8", "f8"),
        ("e8", "c8", "a8", "d8"),
    ],
)
def test_castling_moves_the_rook(king_from: str, king_to: str, rook_from: str, rook_to: str) -> None:
    board = Board.from_fen(CASTLING_FEN)
    king = piece_at(board, king_from)
    rook = piece_at(board, rook_from)

    record = board.move_piece(sq(king_from), sq(king_to))
    assert record.is_castling
    assert board.get_piece(sq(king_to)) is king
    assert board.get_piece(sq(rook_to)) is rook
    assert board.get_piece(sq(rook_from)) is None
    assert board.get_piece(sq(king_from)) is None
    assert king.has_moved and rook.has_moved
    assert rook.position == sq(rook_to)
    # a single record for the compound move
    assert len(board.move_history) == 1

    board.undo_last_move()
    assert board.get_piece(sq(king_from)) is king
    assert board.get_piece(sq(rook_from)) is rook
    assert board.get_piece(sq(king_to)) is None
    assert board.get_piece(sq(rook_to)) is None
    assert not king.has_moved and not rook.has_moved
    assert rook.position == sq(rook_from)


def test_castling_without_rook_is_refused_by_the_board() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/4K3")
    with pytest.raises(BoardStateError):
        board.move_piece(sq("e1"), sq("g1"))
    assert piece_at(board, "e1").type == PieceType.KING
    assert board.move_history == ()


# --- UNDO ---
def test_undo_on_empty_history() -> None:
    board = Board.standard()
    before = board.snapshot()
    assert board.undo_last_move() is None
    assert board.snapshot() == before


def test_undo_restores_the_captured_piece() -> None:
    """The very same piece object comes back"""
    board = Board.from_fen("8/8/8/3p4/8/8/8/3Q4")
    pawn = piece_at(board, "d5")
    before = board.snapshot()

    board.move_piece(sq("d1"), sq("d5"))
    board.undo_last_move()

    assert board.get_piece(sq("d5")) is pawn
    assert pawn.position == sq("d5")
    assert board.snapshot() == before
    assert board.move_history == ()


def test_undo_keeps_has_moved_of_earlier_moves() -> None:
    """Undoing the 2nd move of a piece must not erase the fact it moved before"""
    board = Board.standard()
    knight = piece_at(board, "g1")
    board.move_piece(sq("g1"), sq("f3"))
    board.move_piece(sq("f3"), sq("g5"))

    board.undo_last_move()
    assert knight.position == sq("f3")
    assert knight.has_moved

    board.undo_last_move()
    assert knight.position == sq("g1")
    assert not knight.has_moved


def test_move_history_is_a_snapshot() -> None:
    board = Board.standard()
    history = board.move_history
    board.move_piece(sq("e2"), sq("e4"))
    assert history == ()
    assert len(board.move_history) == 1


# --- QUERIES ---
def test_find_king() -> None:
    board = Board.standard()
    assert board.find_king(Color.WHITE) == sq("e1")
    assert board.find_king(Color.BLACK) == sq("e8")


def test_find_king_missing() -> None:
    """Invariant violation, never handled silently"""
    board = Board.from_fen("4k3/8/8/8/8/8/8/8")
    with pytest.raises(KingNotFoundError):
        board.find_king(Color.WHITE)


def test_is_under_attack() -> None:
    board = Board.from_fen("k7/8/8/8/8/8/8/R6K")
    assert board.is_under_attack(sq("a8"), Color.WHITE)
    assert board.is_under_attack(sq("g2"), Color.WHITE)
    assert not board.is_under_attack(sq("b8"), Color.WHITE)
    # the attacking color matters
    assert not board.is_under_attack(sq("a8"), Color.BLACK)


def test_is_under_attack_blocked_line() -> None:
    board = Board.from_fen("k7/8/8/p7/8/8/8/R6K")
    assert not board.is_under_attack(sq("a8"), Color.WHITE)


def test_pawn_attacks_diagonally() -> None:
    board = Board.from_fen("8/8/8/8/8/3k4/4P3/8")
    assert board.is_under_attack(sq("d3"), Color.WHITE)


def test_snapshot_tracks_has_moved() -> None:
    board = Board.standard()
    before = board.snapshot()
    piece_at(board, "a1").has_moved = True
    assert board.snapshot() != before
