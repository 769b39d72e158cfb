"""
The Game board: 8x8 cells holding optional pieces, plus the stack of moves applied to it.

The board is a mechanical layer. It moves (and un-moves) pieces without asking if that is legal, Game decides legality.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.chess.move_record import MoveRecord
from src.chess.moves import KING_SIDE_ROOK_COLUMN, QUEEN_SIDE_ROOK_COLUMN, is_valid_move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import BOARD_SIZE, Position
from src.core.exceptions import BoardStateError, KingNotFoundError
from src.core.logging import get_logger

logger = get_logger(__name__)

Grid = list[list[Optional[Piece]]]
CellSnapshot = tuple[int, int, PieceType, Color, bool]

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

# Where the rook lands when castling (same row as the king)
KING_SIDE_ROOK_TARGET_COLUMN = 5
QUEEN_SIDE_ROOK_TARGET_COLUMN = 3


def _empty_grid() -> Grid:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def _home_row(piece_type: PieceType, color: Color) -> int:
    if piece_type == PieceType.PAWN:
        return 1 if color == Color.WHITE else BOARD_SIZE - 2
    return 0 if color == Color.WHITE else BOARD_SIZE - 1


def _is_home_square(piece: Piece) -> bool:
    """Would this piece stand here in the starting position?"""
    if piece.position.row != _home_row(piece.type, piece.color):
        return False
    if piece.type == PieceType.PAWN:
        return True
    return BACK_RANK[piece.position.column] == piece.type


def _castling_rook_squares(
    row: int, king_to_column: int, king_from_column: int
) -> tuple[Position, Position]:
    """Rook starting square and landing square for the castling move the king just made."""
    if king_to_column > king_from_column:
        return (
            Position(row, KING_SIDE_ROOK_COLUMN),
            Position(row, KING_SIDE_ROOK_TARGET_COLUMN),
        )
    return (
        Position(row, QUEEN_SIDE_ROOK_COLUMN),
        Position(row, QUEEN_SIDE_ROOK_TARGET_COLUMN),
    )


@dataclass
class Board:
    squares: Grid = field(default_factory=_empty_grid)
    _history: list[MoveRecord] = field(default_factory=list, repr=False)

    # --- CONSTRUCTION ---
    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def standard(cls) -> Self:
        """Pieces on their starting squares. White occupies rows 0 and 1."""
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 7), read from the a-file to the h-file
        * ranks 6 through 3 have 8 consecutive empty squares
        * capital letters are the white pieces

        Any piece that does not stand on its starting square is considered to have moved already
        (so a pawn on e4 cannot advance by two squares, a king on f1 cannot castle).
        """
        board = cls()
        fen_by_rows = fen_str.split("/")
        if len(fen_by_rows) != BOARD_SIZE:
            raise ValueError(f"FEN placement needs {BOARD_SIZE} ranks: {fen_str!r}")

        for rank_idx, fen_one_row in enumerate(fen_by_rows):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            row = BOARD_SIZE - 1 - rank_idx
            column = 0
            for character in fen_one_row:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    column += int(character)
                    continue
                piece = Piece.from_fen(character, Position(row, column))
                piece.has_moved = not _is_home_square(piece)
                board.place_piece(piece)
                column += 1
            if column != BOARD_SIZE:
                raise ValueError(f"FEN rank {fen_one_row!r} does not describe {BOARD_SIZE} squares")
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_SIZE - 1, -1, -1))

    def _row_to_fen(self, row: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for column in range(BOARD_SIZE):
            piece = self.squares[row][column]
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- CELL ACCESS ---
    def get_piece(self, position: Position) -> Optional[Piece]:
        return self.squares[position.row][position.column]

    def set_piece(self, position: Position, piece: Optional[Piece]) -> None:
        """Direct write, no validation. The piece (if any) is told where it now stands."""
        self.squares[position.row][position.column] = piece
        if piece is not None:
            piece.position = position

    def place_piece(self, piece: Piece) -> None:
        """Setup helper: put the piece on the cell it claims to stand on."""
        self.set_piece(piece.position, piece)

    def pieces(self, color: Optional[Color] = None) -> Iterator[Piece]:
        """Every piece on the board (of the given color), row by row starting at a1"""
        for row in self.squares:
            for piece in row:
                if piece is not None and (color is None or piece.color == color):
                    yield piece

    # --- MOVES ---
    @property
    def move_history(self) -> tuple[MoveRecord, ...]:
        """Read-only view. Only the board pushes and pops records."""
        return tuple(self._history)

    @property
    def last_move(self) -> Optional[MoveRecord]:
        return self._history[-1] if self._history else None

    def move_piece(self, from_position: Position, to_position: Position) -> MoveRecord:
        """
        Move whatever stands on `from_position` to `to_position`, capturing whatever stood there.
        ---

        No legality checks at all. A king moving two columns is a castling move: the rook is moved along.
        """
        piece = self.get_piece(from_position)
        if piece is None:
            raise BoardStateError(f"No piece to move on {from_position}")

        record = MoveRecord(
            piece=piece,
            from_position=from_position,
            to_position=to_position,
            captured_piece=self.get_piece(to_position),
            is_first_move=not piece.has_moved,
        )

        rook = None
        if record.is_castling:
            rook_from, rook_to = _castling_rook_squares(
                from_position.row, to_position.column, from_position.column
            )
            rook = self.get_piece(rook_from)
            if rook is None:
                raise BoardStateError(f"Castling without a rook on {rook_from}")

        self._history.append(record)
        self.set_piece(from_position, None)
        self.set_piece(to_position, piece)
        piece.mark_moved()

        if rook is not None:
            self.set_piece(rook_from, None)
            self.set_piece(rook_to, rook)
            rook.mark_moved()

        logger.debug("moved %s", record)
        return record

    def undo_last_move(self) -> Optional[MoveRecord]:
        """Restore the board to what it was before the last move. Nothing happens if no move was made."""
        if not self._history:
            return None

        record = self._history.pop()
        self.set_piece(record.to_position, record.captured_piece)
        self.set_piece(record.from_position, record.piece)

        if record.is_castling:
            rook_from, rook_to = _castling_rook_squares(
                record.from_position.row,
                record.to_position.column,
                record.from_position.column,
            )
            rook = self.get_piece(rook_to)
            if rook is None:
                raise BoardStateError(f"Cannot undo castling: no rook on {rook_to}")
            self.set_piece(rook_to, None)
            self.set_piece(rook_from, rook)
            rook.has_moved = False

        # Only a piece's FIRST move resets the flag. A piece that moved before keeps having moved.
        if record.is_first_move:
            record.piece.has_moved = False

        logger.debug("undid %s", record)
        return record

    def restore_history(self, records: list[MoveRecord]) -> None:
        """Used when loading a saved game: the records must refer to the pieces on (or captured from) this board."""
        self._history = list(records)

    # --- QUERIES ---
    def find_king(self, color: Color) -> Position:
        for piece in self.pieces(color):
            if piece.type == PieceType.KING:
                return piece.position
        raise KingNotFoundError(f"King not found for color: {color.name}")

    def is_under_attack(self, position: Position, attacking_color: Color) -> bool:
        """
        Can any piece of `attacking_color` move onto `position` according to its movement rule?

        NOTE: Purely geometric. Does not care whose turn it is, nor whether the attacker would expose its own king.
        """
        return any(
            is_valid_move(piece, position, self)
            for piece in self.pieces(attacking_color)
        )

    def snapshot(self) -> tuple[CellSnapshot, ...]:
        """Comparable description of all pieces (type, color, location, has_moved)"""
        return tuple(
            (
                piece.position.row,
                piece.position.column,
                piece.type,
                piece.color,
                piece.has_moved,
            )
            for piece in self.pieces()
        )
