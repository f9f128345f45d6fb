"""
Logging Configuration
Diagnostics of the Markov and queueing engines go to stderr (and optionally
a file) so the reports the CLIs print on stdout stay clean.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "stochcalc"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_from_name(name: str) -> int:
    """Translate a ``--log-level`` string into a logging constant."""
    value = logging.getLevelName(name.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{name}'.")
    return value


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    return handler


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``stochcalc`` logger namespace and return it.

    Args:
        level: logging constant or a name such as ``"debug"``.
        log_file: optional path that receives the same records.
        stream: console stream, stderr by default.
    """
    if isinstance(level, str):
        level = level_from_name(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # A CLI main() may run several times in one process (tests, notebooks).
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(logging.StreamHandler(stream or sys.stderr), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level))

    logger.debug("Logging at %s%s.", logging.getLevelName(level), f" into {log_file}" if log_file else "")
    return logger
