"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from src.chess.position import Position

E4 = Position.from_algebraic("e4")


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char, E4)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE
    assert piece.position == E4
    assert not piece.has_moved


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char, E4)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_pieces_to_fen(piece_type: PieceType) -> None:
    assert Piece(piece_type, Color.WHITE, E4).to_fen() == PIECE_TO_FEN[piece_type].upper()
    assert Piece(piece_type, Color.BLACK, E4).to_fen() == PIECE_TO_FEN[piece_type].lower()


@pytest.mark.parametrize(
    "piece_type, color, symbol",
    [
        (PieceType.PAWN, Color.WHITE, "WP"),
        (PieceType.KNIGHT, Color.BLACK, "BN"),
        (PieceType.BISHOP, Color.WHITE, "WB"),
        (PieceType.ROOK, Color.BLACK, "BR"),
        (PieceType.QUEEN, Color.WHITE, "WQ"),
        (PieceType.KING, Color.BLACK, "BK"),
    ],
)
def test_symbol(piece_type: PieceType, color: Color, symbol: str) -> None:
    """Color prefix + piece letter, used by the move notation and the text board"""
    piece = Piece(piece_type, color, E4)
    assert piece.symbol == symbol
    assert str(piece) == symbol


def test_opponent_color() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE


def test_mark_moved() -> None:
    piece = Piece(PieceType.ROOK, Color.WHITE, E4)
    piece.mark_moved()
    assert piece.has_moved


def test_equal_pieces_are_not_the_same_piece() -> None:
    """Structural equality compares the fields, identity is what the board and history rely on"""
    first = Piece(PieceType.PAWN, Color.WHITE, E4)
    second = Piece(PieceType.PAWN, Color.WHITE, E4)
    assert first == second
    assert first is not second
