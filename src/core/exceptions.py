"""
Custom exceptions used across layers.

NOTE: An illegal move is NOT an exception. Game.make_move() simply answers False.
Exceptions are reserved for malformed input (CLI), broken invariants (engine) and persistence failures.
"""


class GameError(Exception):
    """Base class for everything this application raises on purpose."""


class BoardStateError(GameError):
    """The board reached a state that should never happen if the engine is correct (programming error)."""


class KingNotFoundError(BoardStateError):
    """Kings are never captured, so not finding one means the board was mutated illegally."""


class InvalidCommandError(GameError):
    """User input could not be interpreted (wrong number of tokens, unknown square, etc.)"""


class PersistenceError(GameError):
    """Saving or loading a game failed. The game in memory is left untouched."""
