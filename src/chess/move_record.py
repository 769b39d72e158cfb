"""Snapshot of a move that was applied to the board. Everything needed to undo it again."""

from dataclasses import dataclass
from typing import Optional

from src.chess.pieces import Piece, PieceType
from src.chess.position import Position


@dataclass(frozen=True)
class MoveRecord:
    """
    NOTE: `piece` and `captured_piece` are references to the actual pieces, not copies.
    `is_first_move` is taken BEFORE the move is applied (was `has_moved` still False?)
    """

    piece: Piece
    from_position: Position
    to_position: Position
    captured_piece: Optional[Piece]
    is_first_move: bool

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_castling(self) -> bool:
        """A king moving two columns along its row"""
        return (
            self.piece.type == PieceType.KING
            and abs(self.to_position.column - self.from_position.column) == 2
        )

    def __str__(self) -> str:
        """ex. 'WPe2-e4', or 'WQd1-xd7' for a capture"""
        capture_marker = "x" if self.is_capture else ""
        return f"{self.piece.symbol}{self.from_position}-{capture_marker}{self.to_position}"
