"""Application settings. Read from environment variables, CLI flags can override them afterwards."""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_DATABASE_URL = "sqlite:///chess_save.db"
DEFAULT_SAVE_SLOT = "default"
DEFAULT_LOG_LEVEL = "WARNING"


def _read_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {value!r}") from exc


@dataclass
class Settings:
    database_url: str = field(
        default_factory=lambda: os.getenv("CHESS_DATABASE_URL", DEFAULT_DATABASE_URL)
    )
    save_slot: str = field(
        default_factory=lambda: os.getenv("CHESS_SAVE_SLOT", DEFAULT_SAVE_SLOT)
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("CHESS_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    )
    random_seed: Optional[int] = field(
        default_factory=lambda: _read_optional_int("CHESS_RANDOM_SEED")
    )


def get_settings() -> Settings:
    """Fresh settings every call, so changes to the environment (or monkeypatching in tests) are picked up."""
    return Settings()
