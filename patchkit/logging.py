"""Logging configuration for patchkit."""

import logging
import os

LOGGER_NAME = "patchkit"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL_ENV = "PATCHKIT_LOG_LEVEL"


def _level_from_env(default: int = logging.WARNING) -> int:
    value = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if not value:
        return default
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value)
    return level if isinstance(level, int) else default


def setup_logging(level: int | None = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger, replacing the one a
    previous call attached.

    When `level` is None the level comes from PATCHKIT_LOG_LEVEL
    (a name such as DEBUG or a number), defaulting to WARNING.
    """

    logger = logging.getLogger(LOGGER_NAME)
    # Calling twice must not duplicate output.
    for existing in list(logger.handlers):
        if getattr(existing, "_patchkit_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._patchkit_handler = True
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else _level_from_env())
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
