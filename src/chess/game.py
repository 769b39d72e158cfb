"""
The Game class is the entrypoint into the domain layer for the service layer (and the CLI).
It is responsible for orchestrating all the rules required to play a turn:
whose turn it is, whether a move leaves your own king in check, and what the status of the game is afterwards.

A Game is an ordinary object: whoever creates it owns it and passes it around. Starting over means creating a new one.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, Optional, Self

from src.chess.board import Board
from src.chess.move_record import MoveRecord
from src.chess.moves import is_valid_move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import BOARD_SIZE, Position, all_positions
from src.core import shared_types
from src.core.exceptions import KingNotFoundError
from src.core.logging import get_logger
from src.core.models import GameModel, MoveRecordModel, PieceModel

logger = get_logger(__name__)

# Anything that wants to refresh itself after the game changed. Called without arguments.
Observer = Callable[[], None]
Move = tuple[Position, Position]


class GameStatus(Enum):
    ACTIVE = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    INACTIVE = auto()  # never set by the engine itself


TERMINAL_STATUSES = (GameStatus.CHECKMATE, GameStatus.STALEMATE)


@dataclass
class Game:
    board: Board = field(default_factory=Board.standard)
    current_turn: Color = Color.WHITE
    status: GameStatus = GameStatus.ACTIVE
    _notation: list[str] = field(default_factory=list)
    _observers: list[Observer] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, White to move."""
        return cls(board=Board.standard())

    # --- DOMAIN LAYER API ---
    @property
    def move_notation(self) -> list[str]:
        """Copy of the human-readable move log, ex. ['1. WPe2-e4', '1. BPe7-e5']"""
        return list(self._notation)

    @property
    def is_over(self) -> bool:
        """
        Checkmate and stalemate end the game.
        NOTE: make_move() does not refuse to play on. The loop driving the game is expected to stop.
        """
        return self.status in TERMINAL_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """Only for checkmate: the player to move just got mated, so the opponent won."""
        if self.status != GameStatus.CHECKMATE:
            return None
        return self.current_turn.opponent

    def make_move(self, from_position: Position, to_position: Position) -> bool:
        """
        Attempt to make a move
        -----

        1. there must be a piece of the player to move on `from_position`
        2. the piece's movement rule must accept `to_position`
        3. play the move on the board
        4. if your own king is now attacked, take the move back and refuse it
        5. record the notation, switch turns, update the status, tell the observers

        Returns False (and leaves everything as it was) when the move is refused.
        """
        piece = self.board.get_piece(from_position)
        if piece is None or piece.color != self.current_turn:
            logger.debug(
                "rejected %s-%s: no piece of %s to move",
                from_position,
                to_position,
                self.current_turn.name,
            )
            return False

        if not is_valid_move(piece, to_position, self.board):
            logger.debug("rejected %s-%s: %s cannot move there", from_position, to_position, piece)
            return False

        record = self.board.move_piece(from_position, to_position)
        try:
            exposes_king = self.is_in_check(self.current_turn)
        except KingNotFoundError:
            self.board.undo_last_move()
            raise

        if exposes_king:
            self.board.undo_last_move()
            logger.debug("rejected %s: leaves own king in check", record)
            return False

        self._record_notation(record)
        self._switch_turn()
        self.update_status()
        self.notify_observers()
        return True

    def undo_move(self) -> None:
        """
        Take back the last move.

        NOTE: The turn switches even when there was nothing to undo (the board simply ignores the request).
        NOTE: On purpose, the notation entry is removed BEFORE the observers are notified
        (not after), so a redraw never shows the move that was just taken back.
        """
        record = self.board.undo_last_move()
        if record is None:
            logger.debug("nothing to undo")
        if self._notation:
            self._notation.pop()
        self._switch_turn()
        self.update_status()
        self.notify_observers()

    def promote_pawn(self, position: Position, piece_type: PieceType) -> None:
        """
        Replace the pawn on `position` by a brand new piece of `piece_type` (same color).
        ---

        Does nothing if no pawn stands there. The caller decides when a promotion is due (see `needs_promotion`).

        NOTE: the new piece starts out with has_moved=False, like any freshly created piece.
        """
        pawn = self.board.get_piece(position)
        if pawn is None or pawn.type != PieceType.PAWN:
            return
        self.board.set_piece(position, Piece(piece_type, pawn.color, position))
        logger.debug("promoted pawn on %s to %s", position, piece_type.name)

    def needs_promotion(self, position: Position) -> bool:
        """A pawn standing on the farthest rank (from its own point of view)"""
        piece = self.board.get_piece(position)
        if piece is None or piece.type != PieceType.PAWN:
            return False
        last_row = BOARD_SIZE - 1 if piece.color == Color.WHITE else 0
        return position.row == last_row

    def is_in_check(self, color: Color) -> bool:
        king_position = self.board.find_king(color)
        return self.board.is_under_attack(king_position, color.opponent)

    def update_status(self) -> None:
        """
        Status from the point of view of the player who is about to move (current_turn).
        ----

        * king attacked -> CHECK, and CHECKMATE if no move gets the king out of it
        * king not attacked but no legal move -> STALEMATE
        * otherwise -> ACTIVE
        """
        previous_status = self.status
        if self.is_in_check(self.current_turn):
            self.status = GameStatus.CHECK
            if not self.has_legal_moves():
                self.status = GameStatus.CHECKMATE
        elif not self.has_legal_moves():
            self.status = GameStatus.STALEMATE
        else:
            self.status = GameStatus.ACTIVE

        if self.status != previous_status:
            logger.debug("status %s -> %s", previous_status.name, self.status.name)

    def has_legal_moves(self) -> bool:
        """Stops at the first legal move found for the player to move."""
        return next(self._iter_legal_moves(), None) is not None

    def legal_moves(self) -> list[Move]:
        """Every legal (from, to) pair for the player to move."""
        return list(self._iter_legal_moves())

    # --- OBSERVERS ---
    def add_observer(self, observer: Observer) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify_observers(self) -> None:
        """Observers are called in the order they registered. Errors are not caught here."""
        for observer in list(self._observers):
            observer()

    # -- PRIVATE HELPERS ---
    def _switch_turn(self) -> None:
        self.current_turn = self.current_turn.opponent

    def _record_notation(self, record: MoveRecord) -> None:
        move_number = len(self._notation) // 2 + 1
        self._notation.append(f"{move_number}. {record}")

    def _iter_legal_moves(self) -> Iterator[Move]:
        """
        Brute force: every piece of the player to move, every cell of the board.
        Geometry first (cheap), then play the move, look at your own king, and take the move back.
        """
        color = self.current_turn
        for piece in list(self.board.pieces(color)):
            from_position = piece.position
            for to_position in all_positions():
                if not is_valid_move(piece, to_position, self.board):
                    continue
                if not self._leaves_king_in_check(from_position, to_position, color):
                    yield from_position, to_position

    def _leaves_king_in_check(
        self, from_position: Position, to_position: Position, color: Color
    ) -> bool:
        """Simulate the move and always take it back again"""
        self.board.move_piece(from_position, to_position)
        try:
            return self.is_in_check(color)
        finally:
            self.board.undo_last_move()

    # --- CONVERSION FROM/TO THE BOUNDARY MODEL ---
    def to_model(self) -> GameModel:
        """Encode into a format the Service layer (and the repository) uses"""
        piece_ids: dict[int, int] = {}
        piece_models: list[PieceModel] = []

        def register(piece: Piece, on_board: bool) -> int:
            if id(piece) not in piece_ids:
                piece_ids[id(piece)] = len(piece_models)
                piece_models.append(
                    PieceModel(
                        id=piece_ids[id(piece)],
                        type=shared_types.PieceType[piece.type.name],
                        color=shared_types.Color[piece.color.name],
                        row=piece.position.row,
                        column=piece.position.column,
                        has_moved=piece.has_moved,
                        on_board=on_board,
                    )
                )
            return piece_ids[id(piece)]

        for piece in self.board.pieces():
            register(piece, on_board=True)

        history: list[MoveRecordModel] = []
        for record in self.board.move_history:
            captured_id = (
                register(record.captured_piece, on_board=False)
                if record.captured_piece is not None
                else None
            )
            history.append(
                MoveRecordModel(
                    piece_id=register(record.piece, on_board=False),
                    from_square=record.from_position.to_algebraic(),
                    to_square=record.to_position.to_algebraic(),
                    captured_piece_id=captured_id,
                    is_first_move=record.is_first_move,
                )
            )

        return GameModel(
            pieces=piece_models,
            history=history,
            current_turn=shared_types.Color[self.current_turn.name],
            status=shared_types.Status[self.status.name],
            move_notation=self.move_notation,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild a Game from the boundary model.

        NOTE: the stored status is not trusted, it is recomputed from the board like after every move.
        """
        pieces: dict[int, Piece] = {
            piece_model.id: Piece(
                type=PieceType[piece_model.type.name],
                color=Color[piece_model.color.name],
                position=Position(piece_model.row, piece_model.column),
                has_moved=piece_model.has_moved,
            )
            for piece_model in model.pieces
        }

        board = Board.empty()
        for piece_model in model.pieces:
            if piece_model.on_board:
                board.place_piece(pieces[piece_model.id])

        board.restore_history(
            [
                MoveRecord(
                    piece=pieces[record.piece_id],
                    from_position=Position.from_algebraic(record.from_square),
                    to_position=Position.from_algebraic(record.to_square),
                    captured_piece=(
                        pieces[record.captured_piece_id]
                        if record.captured_piece_id is not None
                        else None
                    ),
                    is_first_move=record.is_first_move,
                )
                for record in model.history
            ]
        )

        game = cls(
            board=board,
            current_turn=Color[model.current_turn.name],
            _notation=list(model.move_notation),
        )
        game.update_status()
        return game
