"""Logging utilities for dtsbundle runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "dtsbundle"

# Progress messages; sits between DEBUG and INFO.
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "verbose": VERBOSE,
    "debug": logging.DEBUG,
    "silly": logging.DEBUG,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the dtsbundle hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(level_name: str | None) -> int:
    """Map a CLI level name onto a logging level, defaulting to INFO."""
    if not level_name:
        return logging.INFO
    return LEVELS.get(level_name.strip().lower(), logging.INFO)


def configure_logging(
    *, level: str | None = "info", log_file: Path | None = None
) -> logging.Logger:
    """Configure the dtsbundle logger with console output and optional file sink."""
    numeric_level = resolve_level(level)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(numeric_level)
    stream_handler.setFormatter(logging.Formatter("[dtsbundle] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["LEVELS", "VERBOSE", "configure_logging", "get_logger", "resolve_level"]
