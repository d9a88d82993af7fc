"""Logger setup shared by the acrofill modules."""

from __future__ import annotations

import logging
import os

LOG_ENV_VAR = "ACROFILL_LOG"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _level_from_env() -> int:
    level_name = os.getenv(LOG_ENV_VAR, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


class _UnconfiguredRootFilter(logging.Filter):
    """Pass records only while the root logger has no handlers.

    Checked per record, so an application that configures logging after
    importing acrofill takes over without lines being printed twice.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not logging.getLogger().handlers


def get_logger(name: str) -> logging.Logger:
    """Return a module logger honouring ``ACROFILL_LOG``."""
    logger = logging.getLogger(name)
    logger.setLevel(_level_from_env())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_UnconfiguredRootFilter())
        logger.addHandler(handler)
    return logger


__all__ = ["LOG_ENV_VAR", "LOG_FORMAT", "get_logger"]
