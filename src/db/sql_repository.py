"""Implementation of (Game)Repository using SQLAlchemy"""

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import PersistenceError
from src.core.logging import get_logger
from src.core.models import GameModel
from src.db.schema import SavedGame

logger = get_logger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def save_game(self, slot: str, game: GameModel) -> GameModel:
        """Create the slot, or overwrite the game saved in it."""
        payload = game.model_dump(mode="json")
        try:
            saved = self._fetch_slot(slot)
            if saved is None:
                saved = SavedGame(slot=slot, payload=payload)
                self.db.add(saved)
            else:
                saved.payload = payload
            self.db.commit()
            self.db.refresh(saved)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Could not save game in slot {slot!r}: {exc}") from exc
        logger.info("saved game in slot %r", slot)
        return self._to_model(saved)

    def load_game(self, slot: str) -> GameModel | None:
        try:
            saved = self._fetch_slot(slot)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not read slot {slot!r}: {exc}") from exc
        if saved is None:
            return None
        return self._to_model(saved)

    def delete_game(self, slot: str) -> bool:
        try:
            saved = self._fetch_slot(slot)
            if saved is None:
                return False
            self.db.delete(saved)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Could not delete slot {slot!r}: {exc}") from exc
        return True

    def list_slots(self) -> list[str]:
        query = select(SavedGame.slot).order_by(SavedGame.slot)
        try:
            return list(self.db.scalars(query))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not list save slots: {exc}") from exc

    def _fetch_slot(self, slot: str) -> SavedGame | None:
        query = select(SavedGame).where(SavedGame.slot == slot)
        return self.db.scalar(query)

    def _to_model(self, saved: SavedGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model. A payload that does not parse is a corrupt save."""
        try:
            return GameModel.model_validate(saved.payload)
        except ValidationError as exc:
            raise PersistenceError(f"Save slot {saved.slot!r} is corrupt: {exc}") from exc
