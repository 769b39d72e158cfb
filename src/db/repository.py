"""Protocol repository (implemented with SQLAlchemy, tests use an in-memory dictionary)"""

from typing import Protocol

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def save_game(self, slot: str, game: GameModel) -> GameModel:
        """Store the game in the slot, replacing whatever was saved there before."""
        ...

    def load_game(self, slot: str) -> GameModel | None:
        """Get the game saved in the slot, if any."""
        ...

    def delete_game(self, slot: str) -> bool:
        """Empty the slot. False if there was nothing to delete."""
        ...

    def list_slots(self) -> list[str]:
        """Names of all slots that hold a game."""
        ...
