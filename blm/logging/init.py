from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Labeled console logging for the blm command line tool.

Lines look like ``<LABEL> <message>``, e.g.::

    INFO feed.blm: version=3 rows=120 valid
    WARN other.blm: 2 invalid row error(s)
    SUMMARY files=2 valid=1 invalid=1 failed=0 rows=180 errors=2 elapsed_sec=0.04

Library modules log through ``logging.getLogger(__name__)``; everything under
the ``blm`` namespace ends up on the single handler installed here.
"""

__all__ = [
    "LabeledFormatter",
    "SUMMARY_LEVEL",
    "get_logger",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

LOGGER_NAME = "blm"

# sits between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Prefix each message with a short level label (WARNING -> WARN)."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _set_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for h in logger.handlers:
        h.setLevel(level)


def setup_logging(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Install the labeled handler on the ``blm`` logger.

    Repeated calls return the already configured logger; ``debug=True`` on a
    later call still lowers the level to DEBUG. ``stream`` defaults to the
    current ``sys.stdout``.
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        logger = logging.getLogger(LOGGER_NAME)
        for old in logger.handlers[:]:
            logger.removeHandler(old)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
        # keep blm output off the root logger
        logger.propagate = False
        _set_level(logger, logging.INFO)
        _logger = logger

    if debug:
        _set_level(_logger, logging.DEBUG)
    return _logger


def get_logger() -> logging.Logger:
    return setup_logging()


def log_summary(message: str) -> None:
    """Emit ``message`` with the SUMMARY label."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup rebinds the stream (tests)."""
    global _logger
    _logger = None
