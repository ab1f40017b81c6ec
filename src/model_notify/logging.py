"""Logging configuration for model-notify.

All modules log under the ``model_notify`` package logger. Warnings from
the notifier reach the console; the CLI can also mirror records to a file.
"""

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "model_notify"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger: logging.Logger | None = None


def parse_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its value. Unknown -> INFO."""
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _build_handlers(log_file: Optional[str]) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))
    handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Set up the package logger once per process.

    Args:
        level: Level name, e.g. "DEBUG".
        log_file: Optional file to log to in addition to the console.

    Returns:
        Configured logger instance. Later calls return it unchanged.
    """
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_level(level))
    logger.handlers.clear()
    for handler in _build_handlers(log_file):
        logger.addHandler(handler)

    # Keep records out of the host's root logger
    logger.propagate = False

    _logger = logger
    return logger


def reset_logging() -> None:
    """Undo setup_logging. Used for testing."""
    global _logger
    if _logger is None:
        return
    for handler in _logger.handlers:
        handler.close()
    _logger.handlers.clear()
    _logger.propagate = True
    _logger.setLevel(logging.NOTSET)
    _logger = None
