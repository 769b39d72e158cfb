"""
Console front end: read a command, hand it to the service, redraw the board.

Run with `chess-cli` (or `python -m src.cli.app`). `--mode pva` lets a random player answer with Black.
"""

import argparse
import random
from typing import Callable, Optional, Sequence

from src.chess.pieces import Color
from src.chess.random_player import PROMOTION_CHOICE
from src.cli.commands import (
    KeywordCommand,
    MoveCommand,
    parse_command,
    parse_promotion_choice,
)
from src.cli.render import HELP_TEXT, PROMOTION_MENU, render_game
from src.core.config import Settings, get_settings
from src.core.exceptions import InvalidCommandError, PersistenceError
from src.core.logging import get_logger, set_level
from src.db.database import create_db_engine, get_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

logger = get_logger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

PVP = "pvp"
PVA = "pva"
# In "player vs AI" mode the human plays White
AI_COLOR = Color.BLACK


class ConsoleApp:
    def __init__(
        self,
        service: ChessService,
        mode: str = PVP,
        slot: str = "default",
        input_fn: Optional[InputFn] = None,
        output_fn: Optional[OutputFn] = None,
    ) -> None:
        self.service = service
        self.mode = mode
        self.slot = slot
        self.read = input_fn or input
        self.write = output_fn or print
        self.running = False

    def refresh(self) -> None:
        """Observer callback: redraw everything after the game changed."""
        self.write(render_game(self.service.game))

    def run(self) -> None:
        self.service.add_observer(self.refresh)
        self.running = True
        self.refresh()
        while self.running and not self.service.game.is_over:
            try:
                text = self.read("\nEnter command (move: 'e2 e4', or type 'help'): ")
            except EOFError:
                break
            self.handle(text)

        if self.service.game.is_over:
            self.write("\nGame Over!")
        self.service.remove_observer(self.refresh)

    def handle(self, text: str) -> None:
        """Dispatch one line of user input. Errors are shown, never raised."""
        try:
            command = parse_command(text)
            if isinstance(command, KeywordCommand):
                self._handle_keyword(command)
            elif isinstance(command, MoveCommand):
                self._handle_move(command)
        except (InvalidCommandError, PersistenceError) as exc:
            self.write(f"Error: {exc}")

    def _handle_keyword(self, command: KeywordCommand) -> None:
        match command.keyword:
            case "quit":
                self.write("Game ended by player.")
                self.running = False
            case "help":
                self.write(HELP_TEXT)
            case "undo":
                self._undo()
            case "moves":
                moves = self.service.game.legal_moves()
                self.write(" ".join(f"{start}{end}" for start, end in moves) or "No legal moves.")
            case "new":
                self.service.new_game()
            case "save":
                self.service.save(self.slot)
                self.write("Game saved successfully!")
            case "load":
                self.service.load(self.slot)
                self.write("Game loaded successfully!")

    def _handle_move(self, command: MoveCommand) -> None:
        outcome = self.service.make_move(command.from_square, command.to_square)
        if not outcome.accepted:
            self.write("Error: Invalid move!")
            return

        if outcome.promotion_square is not None:
            self._ask_promotion(outcome.promotion_square)

        if self.running and self.mode == PVA and self._is_ai_turn():
            ai_outcome = self.service.play_random_move()
            if ai_outcome is not None:
                self.write(f"AI played {ai_outcome.from_square} {ai_outcome.to_square}")

    def _undo(self) -> None:
        """In pva mode take back the random player's answer too, so the human is to move again."""
        self.service.undo()
        if self.mode == PVA and self._is_ai_turn():
            self.service.undo()

    def _ask_promotion(self, square: str) -> None:
        """Input ending at the prompt stops the app, the pawn becomes a queen."""
        self.write(PROMOTION_MENU)
        while True:
            try:
                piece_type = parse_promotion_choice(self.read("Enter your choice (1-4): "))
            except EOFError:
                self.running = False
                piece_type = PROMOTION_CHOICE
            except InvalidCommandError as exc:
                self.write(f"Error: {exc}")
                continue
            self.service.promote(square, piece_type)
            return

    def _is_ai_turn(self) -> bool:
        game = self.service.game
        return not game.is_over and game.current_turn == AI_COLOR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chess-cli", description="Play chess in the terminal.")
    parser.add_argument("--mode", choices=[PVP, PVA], default=PVP, help="player vs player, or player vs random AI")
    parser.add_argument("--db-url", help="SQLAlchemy database URL used for save/load")
    parser.add_argument("--slot", help="name of the save slot")
    parser.add_argument("--seed", type=int, help="seed for the random AI")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """CLI flags win over environment variables"""
    if args.db_url:
        settings.database_url = args.db_url
    if args.slot:
        settings.save_slot = args.slot
    if args.seed is not None:
        settings.random_seed = args.seed
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_arguments(get_settings(), args)
    set_level(settings.log_level)

    engine = create_db_engine(settings.database_url)
    with get_db(engine) as session:
        service = ChessService(
            SQLGameRepository(session), rng=random.Random(settings.random_seed)
        )
        logger.info("starting %s game", args.mode)
        ConsoleApp(service, mode=args.mode, slot=settings.save_slot).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
