"""
Boundary layer data model(s).

Transport-safe representation of the whole Game aggregate (board, turn, status, history, notation).
The Game converts itself into a GameModel, the repository stores it as JSON.

NOTE: Pieces get an integer id so that the same piece can be referenced both from the board and from the move history
(the moved piece of a record is the very same object as the one standing on the board).
"""

from typing import Optional, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from src.chess.position import BOARD_SIZE, is_algebraic_square
from src.core.shared_types import Color, PieceType, Status


class PieceModel(BaseModel):
    id: int
    type: PieceType
    color: Color
    row: int = Field(ge=0, lt=BOARD_SIZE)
    column: int = Field(ge=0, lt=BOARD_SIZE)
    has_moved: bool = False
    # Pieces that were captured (or replaced by a promotion) only live on in the move history
    on_board: bool = True


class MoveRecordModel(BaseModel):
    piece_id: int
    from_square: str
    to_square: str
    captured_piece_id: Optional[int] = None
    is_first_move: bool = False

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_algebraic_square(value):
            raise ValueError(f"{value!r} is not a square between a1 and h8")
        return value


class GameModel(BaseModel):
    """Everything needed to continue a game exactly where it was left."""

    pieces: list[PieceModel]
    history: list[MoveRecordModel] = []
    current_turn: Color = Color.WHITE
    status: Status = Status.ACTIVE
    move_notation: list[str] = []

    @model_validator(mode="after")
    def validate_references(self) -> Self:
        ids = [piece.id for piece in self.pieces]
        if len(ids) != len(set(ids)):
            raise ValueError("Piece ids must be unique.")

        occupied = [
            (piece.row, piece.column) for piece in self.pieces if piece.on_board
        ]
        if len(occupied) != len(set(occupied)):
            raise ValueError("Two pieces cannot stand on the same square.")

        known_ids = set(ids)
        for record in self.history:
            if record.piece_id not in known_ids:
                raise ValueError(f"Move history refers to unknown piece {record.piece_id}")
            if (
                record.captured_piece_id is not None
                and record.captured_piece_id not in known_ids
            ):
                raise ValueError(
                    f"Move history refers to unknown captured piece {record.captured_piece_id}"
                )
        return self
