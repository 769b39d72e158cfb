"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.chess.position import Position


class PieceType(Enum):
    PAWN = auto()
    ROOK = auto()
    KNIGHT = auto()
    BISHOP = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Letters used in the move notation / text board. Color is shown as a prefix (W or B)
PIECE_SYMBOLS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.ROOK: "R",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


@dataclass
class Piece:
    """
    A piece keeps track of where it stands and whether it ever moved.

    NOTE: identity matters. The board and the move history hold references to the same object,
    that is how undoing a move can restore `has_moved` and the piece's position.
    """

    type: PieceType
    color: Color
    position: Position
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str, position: Position) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color, position)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def symbol(self) -> str:
        """ex. 'WP' for a white pawn, 'BN' for a black knight"""
        color_prefix = "W" if self.color == Color.WHITE else "B"
        return f"{color_prefix}{PIECE_SYMBOLS[self.type]}"

    def mark_moved(self) -> None:
        self.has_moved = True

    def __str__(self) -> str:
        return self.symbol
