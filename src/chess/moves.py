"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement rule of each piece type.
One pure function per PieceType, looked up in MOVEMENT_RULES by `is_valid_move()`.

A rule only answers "can this piece reach that cell, given the board as it is right now?".
Whether the move leaves your own king in check is checked later by Game.
"""

from typing import Callable, Optional, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position


class Board(Protocol):
    """Just the parts the movement rules need"""

    def get_piece(self, position: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]

KING_SIDE_ROOK_COLUMN = 7
QUEEN_SIDE_ROOK_COLUMN = 0


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def squares_between(start: Position, end: Position) -> list[Position]:
    """
    The cells strictly in between two positions on the same row, column or diagonal (both ends excluded).

    Needed to check the line of sight of sliding pieces and the path between king and rook when castling.
    """
    d_row = end.row - start.row
    d_column = end.column - start.column
    is_straight = d_row == 0 or d_column == 0
    is_diagonal = abs(d_row) == abs(d_column)
    if not (is_straight or is_diagonal):
        raise ValueError(
            f"squares_between requires both positions on a single line.\n from: {start}\n to: {end}"
        )

    step: Vector = (_sign(d_row), _sign(d_column))
    squares: list[Position] = []
    current = start.offset(*step)
    while current != end:
        squares.append(current)
        current = current.offset(*step)
    return squares


def is_path_clear(start: Position, end: Position, board: Board) -> bool:
    return all(board.get_piece(square) is None for square in squares_between(start, end))


# --- MOVEMENT RULES ---
def is_valid_pawn_move(piece: Piece, destination: Position, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in its first move, if both squares in front of it are empty.
    - takes diagonally (one square), only if an opponent's piece stands there.

    NOTE: No en passant.
    """
    # White moves up the board (row increases), Black moves down the board
    direction = 1 if piece.color == Color.WHITE else -1
    d_row = destination.row - piece.position.row
    d_column = abs(destination.column - piece.position.column)
    target = board.get_piece(destination)

    if d_column == 0:
        if d_row == direction:
            return target is None
        if d_row == 2 * direction and not piece.has_moved:
            intermediate = piece.position.offset(direction, 0)
            return board.get_piece(intermediate) is None and target is None
        return False

    if d_column == 1 and d_row == direction:
        return target is not None and target.color != piece.color

    return False


def is_valid_knight_move(piece: Piece, destination: Position, board: Board) -> bool:
    """Knights jump: |delta_row| + |delta_column| = 3, with neither of them zero"""
    d_row = abs(destination.row - piece.position.row)
    d_column = abs(destination.column - piece.position.column)
    return (d_row, d_column) in [(2, 1), (1, 2)]


def is_valid_bishop_move(piece: Piece, destination: Position, board: Board) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_column|, nothing in between"""
    d_row = abs(destination.row - piece.position.row)
    d_column = abs(destination.column - piece.position.column)
    if d_row != d_column:
        return False
    return is_path_clear(piece.position, destination, board)


def is_valid_rook_move(piece: Piece, destination: Position, board: Board) -> bool:
    """Rooks move either horizontally or vertically, nothing in between"""
    same_row = destination.row == piece.position.row
    same_column = destination.column == piece.position.column
    if same_row == same_column:
        return False
    return is_path_clear(piece.position, destination, board)


def is_valid_queen_move(piece: Piece, destination: Position, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_rook_move(piece, destination, board) or is_valid_bishop_move(
        piece, destination, board
    )


def is_valid_king_move(piece: Piece, destination: Position, board: Board) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a king move of two columns (the Board moves the rook along).
    """
    d_row = abs(destination.row - piece.position.row)
    d_column = abs(destination.column - piece.position.column)
    if d_row <= 1 and d_column <= 1:
        return True

    if d_row == 0 and d_column == 2:
        return can_castle(piece, destination, board)
    return False


def can_castle(king: Piece, destination: Position, board: Board) -> bool:
    """
    Castling conditions
    ---

    * the king never moved
    * the rook on the side the king is moving to stands on its corner, is of the same color, and never moved
    * every square between king and rook is empty

    NOTE: Whether the king passes through (or lands on) an attacked square is NOT checked.
    Game only rejects the move when the king ends up in check.
    """
    if king.has_moved:
        return False

    rook_column = (
        KING_SIDE_ROOK_COLUMN
        if destination.column > king.position.column
        else QUEEN_SIDE_ROOK_COLUMN
    )
    rook = board.get_piece(Position(king.position.row, rook_column))
    if rook is None:
        return False
    if rook.type != PieceType.ROOK or rook.color != king.color or rook.has_moved:
        return False
    return is_path_clear(king.position, rook.position, board)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveRuleFn = Callable[[Piece, Position, Board], bool]
MOVEMENT_RULES: dict[PieceType, MoveRuleFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}


def is_valid_move(piece: Piece, destination: Position, board: Board) -> bool:
    """
    Can `piece` (from where it currently stands) reach `destination`?
    ----

    Checks applied to every piece before its own movement rule:
    1. destination lies on the board
    2. the piece actually moves
    3. the destination is not occupied by a piece of the same color
    """
    if not destination.is_valid():
        return False

    if destination == piece.position:
        return False

    occupant = board.get_piece(destination)
    if occupant is not None and occupant.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(piece, destination, board)
