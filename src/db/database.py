"""Generate database sessions"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine and make sure all tables exist."""
    engine = create_engine(database_url, echo=echo)
    Base.metadata.create_all(bind=engine)
    return engine


@contextmanager
def get_db(engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=engine)
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
