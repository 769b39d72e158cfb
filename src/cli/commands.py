"""Command models for the text interface. Parsing happens here, the engine only ever sees valid squares."""

from typing import Literal, Union

from pydantic import BaseModel, field_validator

from src.chess.pieces import PieceType
from src.chess.position import is_algebraic_square
from src.core.exceptions import InvalidCommandError

Keyword = Literal["undo", "save", "load", "help", "quit", "moves", "new"]

KEYWORD_ALIASES: dict[str, Keyword] = {
    "undo": "undo",
    "save": "save",
    "load": "load",
    "help": "help",
    "quit": "quit",
    "exit": "quit",
    "moves": "moves",
    "new": "new",
}

# Same order as the promotion menu: 1. Queen 2. Rook 3. Bishop 4. Knight
PROMOTION_CHOICES: dict[str, PieceType] = {
    "1": PieceType.QUEEN,
    "q": PieceType.QUEEN,
    "queen": PieceType.QUEEN,
    "2": PieceType.ROOK,
    "r": PieceType.ROOK,
    "rook": PieceType.ROOK,
    "3": PieceType.BISHOP,
    "b": PieceType.BISHOP,
    "bishop": PieceType.BISHOP,
    "4": PieceType.KNIGHT,
    "n": PieceType.KNIGHT,
    "knight": PieceType.KNIGHT,
}


class MoveCommand(BaseModel):
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_algebraic_square(value):
            raise InvalidCommandError(
                f"Cannot interpret {value!r} as a square. Use 'e2 e4' format."
            )
        return value


class KeywordCommand(BaseModel):
    keyword: Keyword


Command = Union[MoveCommand, KeywordCommand]


def parse_command(text: str) -> Command:
    """
    'e2 e4' -> MoveCommand
    'undo', 'save', 'load', 'help', 'moves', 'new', 'quit'/'exit' -> KeywordCommand
    """
    normalized = text.strip().lower()
    if normalized in KEYWORD_ALIASES:
        return KeywordCommand(keyword=KEYWORD_ALIASES[normalized])

    parts = normalized.split()
    if len(parts) != 2:
        raise InvalidCommandError(
            f"Invalid command {text.strip()!r}. Use 'e2 e4' format, or type 'help'."
        )
    return MoveCommand(from_square=parts[0], to_square=parts[1])


def parse_promotion_choice(text: str) -> PieceType:
    choice = text.strip().lower()
    if choice not in PROMOTION_CHOICES:
        raise InvalidCommandError(
            f"Invalid choice {text.strip()!r}. Enter 1-4 (or q, r, b, n)."
        )
    return PROMOTION_CHOICES[choice]
