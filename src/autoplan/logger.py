"""Verbosity-driven logging for the scheduler.

Scheduling decisions are logged at two extra levels between the standard ones:

- CHANGES (25): what a pass did - tasks placed, floors moved, deadlines clamped
- CHECKS (15): how it decided - classifications, slots considered and rejected

The CLI's ``-v`` count selects how much of this reaches the terminal.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25
CHECKS_LEVEL = 15

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

LOGGER_NAME = "autoplan"

# Index is the verbosity; 0 shows errors only
VERBOSITY_LEVELS = (logging.ERROR, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)
MAX_VERBOSITY = len(VERBOSITY_LEVELS) - 1


class AutoplanLogger(logging.Logger):
    """Logger with one method per scheduling verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> AutoplanLogger:
    """Return the shared ``autoplan`` logger."""
    logging.setLoggerClass(AutoplanLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, AutoplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send scheduler logging to a stream at the given verbosity.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbosity: 0 (errors only) to 3 (debug); out-of-range values are clamped
        stream: Destination, sys.stderr by default
    """
    verbosity = min(max(verbosity, 0), MAX_VERBOSITY)
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(VERBOSITY_LEVELS[verbosity])

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    # Debug output carries level names
    fmt = "%(levelname)s: %(message)s" if verbosity == MAX_VERBOSITY else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only, as before setup_logger()."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True


def current_verbosity() -> int:
    """Verbosity matching the logger's effective level."""
    level = get_logger().getEffectiveLevel()
    for verbosity in range(MAX_VERBOSITY, -1, -1):
        if level <= VERBOSITY_LEVELS[verbosity]:
            return verbosity
    return 0
