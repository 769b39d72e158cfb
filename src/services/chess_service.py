"""Orchestration of communication from the CLI to the chess engine and the persistence layer (and the reverse direction)."""

import random
from typing import Optional

from pydantic import BaseModel

from src.chess.game import Game, Observer
from src.chess.pieces import PieceType
from src.chess.position import Position, is_algebraic_square
from src.chess.random_player import PROMOTION_CHOICE, choose_random_move
from src.core.exceptions import BoardStateError, InvalidCommandError, PersistenceError
from src.core.logging import get_logger
from src.core.shared_types import Color, Status
from src.db.repository import GameRepository

logger = get_logger(__name__)


class MoveOutcome(BaseModel):
    """What the caller needs to know after a move attempt."""

    accepted: bool
    from_square: str
    to_square: str
    notation: Optional[str] = None
    status: Status
    current_turn: Color
    # Square of a pawn that reached the last rank and waits for the player's choice
    promotion_square: Optional[str] = None


def parse_square(square: str) -> Position:
    """'e2' -> Position(1, 4). Anything that is not a square on the board is refused."""
    text = square.strip().lower()
    if not is_algebraic_square(text):
        raise InvalidCommandError(
            f"Cannot interpret {square!r} as a square. Use a file a-h and a rank 1-8, ex. 'e2'."
        )
    return Position.from_algebraic(text)


class ChessService:
    """Owns the game being played. Starting a new game or loading one replaces it."""

    def __init__(
        self,
        repository: GameRepository,
        game: Optional[Game] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.rng = rng or random.Random()
        self._observers: list[Observer] = []
        self.game = game if game is not None else Game.new_game()

    # -- Game lifecycle ---
    def new_game(self) -> Game:
        """Throw the current game away and start from the initial position."""
        self._replace_game(Game.new_game())
        logger.info("new game started")
        return self.game

    def add_observer(self, observer: Observer) -> None:
        """Observers stay registered when the game gets replaced (new game / load)."""
        self._observers.append(observer)
        self.game.add_observer(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
        self.game.remove_observer(observer)

    # -- Playing ---
    def make_move(self, from_square: str, to_square: str) -> MoveOutcome:
        """Parse both squares and try the move. Malformed squares raise, illegal moves come back as not accepted."""
        from_position = parse_square(from_square)
        to_position = parse_square(to_square)
        accepted = self.game.make_move(from_position, to_position)
        return self._create_outcome(from_position, to_position, accepted)

    def promote(self, square: str, piece_type: PieceType) -> None:
        """Promote the pawn on the square, recompute the status, then let the observers redraw."""
        position = parse_square(square)
        if not self.game.needs_promotion(position):
            raise InvalidCommandError(f"No pawn waiting for promotion on {square}.")
        if piece_type in (PieceType.PAWN, PieceType.KING):
            raise InvalidCommandError(f"A pawn cannot promote to a {piece_type.name.lower()}.")
        self.game.promote_pawn(position, piece_type)
        # The new piece may give check, mate or stalemate
        self.game.update_status()
        self.game.notify_observers()

    def undo(self) -> None:
        self.game.undo_move()

    def play_random_move(self) -> Optional[MoveOutcome]:
        """Let the random player move for the side to move (promoting to a queen when needed)."""
        move = choose_random_move(self.game, self.rng)
        if move is None:
            return None
        from_position, to_position = move
        accepted = self.game.make_move(from_position, to_position)
        if accepted and self.game.needs_promotion(to_position):
            self.game.promote_pawn(to_position, PROMOTION_CHOICE)
            self.game.update_status()
            self.game.notify_observers()
        return self._create_outcome(from_position, to_position, accepted)

    # -- Persistence ---
    def save(self, slot: str) -> None:
        self.repo.save_game(slot, self.game.to_model())
        logger.info("game saved to slot %r", slot)

    def load(self, slot: str) -> Game:
        """Replace the current game by the one saved in the slot. On failure the current game is kept."""
        model = self.repo.load_game(slot)
        if model is None:
            raise PersistenceError(f"No saved game in slot {slot!r}.")
        try:
            game = Game.from_model(model)
        except BoardStateError as exc:
            raise PersistenceError(f"Saved game in slot {slot!r} is not playable: {exc}") from exc
        self._replace_game(game)
        logger.info("game loaded from slot %r", slot)
        return self.game

    # -- Internal helpers --
    def _replace_game(self, game: Game) -> None:
        for observer in self._observers:
            game.add_observer(observer)
        self.game = game
        self.game.notify_observers()

    def _create_outcome(
        self, from_position: Position, to_position: Position, accepted: bool
    ) -> MoveOutcome:
        notation = self.game.move_notation
        promotion_square = (
            to_position.to_algebraic()
            if accepted and self.game.needs_promotion(to_position)
            else None
        )
        return MoveOutcome(
            accepted=accepted,
            from_square=from_position.to_algebraic(),
            to_square=to_position.to_algebraic(),
            notation=notation[-1] if accepted and notation else None,
            status=Status[self.game.status.name],
            current_turn=Color[self.game.current_turn.name],
            promotion_square=promotion_square,
        )
