"""Plain text rendering of the board and game information"""

from src.chess.board import Board
from src.chess.game import Game, GameStatus
from src.chess.position import BOARD_SIZE, Position

FILES_LINE = "    " + "  ".join("abcdefgh")
BORDER_LINE = "  " + "-" * 26
EMPTY_CELL = " . "


def render_board(board: Board) -> str:
    """
    Rank 8 at the top, White's pieces at the bottom. Every cell is 3 characters wide.

        a  b  c  d  e  f  g  h
      --------------------------
    8 | BR BN BB BQ BK BB BN BR| 8
    """
    lines = [FILES_LINE, BORDER_LINE]
    for row in range(BOARD_SIZE - 1, -1, -1):
        cells = []
        for column in range(BOARD_SIZE):
            piece = board.get_piece(Position(row, column))
            cells.append(EMPTY_CELL if piece is None else f" {piece.symbol}")
        lines.append(f"{row + 1} |{''.join(cells)}| {row + 1}")
    lines.extend([BORDER_LINE, FILES_LINE])
    return "\n".join(lines)


def render_status(game: Game) -> str:
    lines = [f"Current turn: {game.current_turn.name.capitalize()}"]
    if game.status == GameStatus.CHECK:
        lines.append("Check!")
    elif game.status == GameStatus.CHECKMATE:
        assert game.winner is not None
        lines.append(f"Checkmate! {game.winner.name.capitalize()} wins!")
    elif game.status == GameStatus.STALEMATE:
        lines.append("Stalemate! The game is a draw.")
    return "\n".join(lines)


def render_notation(game: Game) -> str:
    notation = game.move_notation
    if not notation:
        return ""
    return "\n".join(["Move History:", *notation])


def render_game(game: Game) -> str:
    parts = [render_notation(game), render_status(game), render_board(game.board)]
    return "\n\n".join(part for part in parts if part)


HELP_TEXT = """Available commands:
- Move a piece: e2 e4 (from square to square)
- Undo last move: undo
- Show legal moves: moves
- Start over: new
- Save game: save
- Load game: load
- Show this help: help
- Quit game: quit or exit

Square notation:
- Files (columns): a-h
- Ranks (rows): 1-8
Example: e2 e4 moves the piece from e2 to e4"""

PROMOTION_MENU = """Pawn promotion! Choose a piece to promote to:
1. Queen
2. Rook
3. Bishop
4. Knight"""
