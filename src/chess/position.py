"""
A position (cell) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8
BOARD_SIZE = 8
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Position:
    """
    Zero-based coordinates: row 0 is White's back rank (rank 1), column 0 is the a-file.

    Construction never fails. Callers must check `is_valid()` before using a position that came from user input.
    """

    row: int
    column: int

    @classmethod
    def from_algebraic(cls, square: str) -> Position:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        column = ord(square[0].lower()) - ord("a")
        row = int(square[1:]) - 1
        return cls(row, column)

    def to_algebraic(self) -> str:
        return f"{chr(ord('a') + self.column)}{self.row + 1}"

    def is_valid(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.column < BOARD_SIZE)

    def offset(self, d_row: int, d_column: int) -> Position:
        return Position(self.row + d_row, self.column + d_column)

    def __str__(self) -> str:
        return self.to_algebraic()


def all_positions() -> list[Position]:
    """Every cell of the board, row by row starting at a1."""
    return [
        Position(row, column)
        for row in range(BOARD_SIZE)
        for column in range(BOARD_SIZE)
    ]


def is_algebraic_square(text: str) -> bool:
    """Exactly a file 'a'-'h' followed by a rank '1'-'8' (lower case, no surrounding blanks)."""
    return len(text) == 2 and text[0] in FILES and text[1] in RANKS
