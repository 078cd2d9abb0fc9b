from __future__ import annotations

import logging
import sys

from .config import settings


_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class _ConditionalFormatter(logging.Formatter):
    """Adds module:lineno to WARNING and above."""

    _SHORT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"
    _LONG = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(module)s:%(lineno)d] - %(message)s"

    def format(self, record: logging.LogRecord) -> str:
        self._style._fmt = self._LONG if record.levelno >= logging.WARNING else self._SHORT
        return super().format(record)


def setup_logger(name: str, log_level: int = logging.WARNING) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    # stdout is reserved for the MCP stdio transport.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_ConditionalFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    if log_level is None:
        log_level = settings.log_level
    return setup_logger(name, _LEVELS.get(log_level.upper(), logging.WARNING))
