"""Logging setup for shipscore scans."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

_LOGGER_NAME = "shipscore"

CONSOLE_FORMAT = "[shipscore] %(levelname)s %(message)s"
# Checks run on worker threads, so the file sink records which one logged.
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``shipscore.<name>``, or the package logger itself."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a console handler (stderr unless ``stream`` is given) and an optional file sink.

    Handlers from an earlier call are closed and replaced.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    set_verbosity(verbose)
    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the shipscore hierarchy between INFO and DEBUG output."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "configure_logging", "get_logger", "set_verbosity"]
