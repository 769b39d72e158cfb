"""Logger configuration shared by all layers."""

import logging
import sys

DEFAULT_LOGGER_NAME = "chess"
DEFAULT_LOG_LEVEL = logging.WARNING
_FORMATTER = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _configure_logger(logger: logging.Logger, level: int) -> None:
    """Attach a single stream handler (only once) and set the level if nobody did so before."""
    if logger.level == logging.NOTSET:
        logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_FORMATTER)
        logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Loggers are children of the 'chess' logger (ex. 'chess.board'),
    so setting the level on the root 'chess' logger configures the whole application.
    """
    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    _configure_logger(root, DEFAULT_LOG_LEVEL)
    if name is None:
        return root
    return root.getChild(name)


def set_level(level: int | str) -> None:
    """Change the level of the whole application (CLI flag / environment variable)."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    get_logger().setLevel(level)
