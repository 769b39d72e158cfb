"""Unit tests for src/cli/render.py"""

from src.chess.board import Board
from src.chess.game import Game
from src.chess.position import Position
from src.cli.render import BORDER_LINE, FILES_LINE, render_board, render_game, render_notation, render_status


def play(game: Game, moves: list[tuple[str, str]]) -> None:
    for from_square, to_square in moves:
        assert game.make_move(Position.from_algebraic(from_square), Position.from_algebraic(to_square))


def test_render_starting_board() -> None:
    lines = render_board(Board.standard()).splitlines()
    assert len(lines) == 12
    assert lines[0] == FILES_LINE == "    a  b  c  d  e  f  g  h"
    assert lines[1] == BORDER_LINE
    assert lines[2] == "8 | BR BN BB BQ BK BB BN BR| 8"
    assert lines[3] == "7 | BP BP BP BP BP BP BP BP| 7"
    assert lines[4] == "6 | .  .  .  .  .  .  .  . | 6"
    assert lines[9] == "1 | WR WN WB WQ WK WB WN WR| 1"
    assert lines[-1] == FILES_LINE


def test_rows_have_equal_width() -> None:
    board = Board.from_fen("4k3/8/8/8/4P3/8/8/4K3")
    widths = {len(line) for line in render_board(board).splitlines()[2:10]}
    assert len(widths) == 1


def test_status_lines() -> None:
    game = Game.new_game()
    assert render_status(game) == "Current turn: White"

    play(game, [("e2", "e4"), ("f7", "f6"), ("d1", "h5")])
    assert render_status(game) == "Current turn: Black\nCheck!"


def test_checkmate_status() -> None:
    game = Game.new_game()
    play(game, [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")])
    assert render_status(game).endswith("Checkmate! Black wins!")


def test_stalemate_status() -> None:
    game = Game(board=Board.from_fen("7k/8/6K1/8/8/8/8/5Q2"))
    play(game, [("f1", "f7")])
    assert render_status(game).endswith("Stalemate! The game is a draw.")


def test_notation() -> None:
    game = Game.new_game()
    assert render_notation(game) == ""
    play(game, [("e2", "e4")])
    assert render_notation(game) == "Move History:\n1. WPe2-e4"


def test_render_game_combines_everything() -> None:
    game = Game.new_game()
    assert "Move History:" not in render_game(game)
    play(game, [("e2", "e4")])
    output = render_game(game)
    assert output.index("Move History:") < output.index("Current turn: Black") < output.index(FILES_LINE)
