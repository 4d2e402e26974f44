"""Engine log output.

Every algorithm logs through the ``slacksched`` logger, which knows two levels
beyond the standard ones:

- ``changes`` (verbosity 1): which strategy produced the schedule, completed passes
- ``checks`` (verbosity 2): individual placements and the reasons a strategy gave up
- ``debug`` (verbosity 3): search statistics and internal state

Nothing is printed until ``setup_logger`` installs a handler.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

LOGGER_NAME = "slacksched"

CHANGES = 25  # INFO < CHANGES < WARNING
CHECKS = 15  # DEBUG < CHECKS < INFO

for _level, _name in ((CHANGES, "CHANGES"), (CHECKS, "CHECKS")):
    logging.addLevelName(_level, _name)

# Logger threshold per verbosity; anything out of range is treated as silent.
_THRESHOLDS = (logging.ERROR, CHANGES, CHECKS, logging.DEBUG)


class SchedLogger(logging.Logger):
    """Logger with one method per engine verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES):
            self._log(CHANGES, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS):
            self._log(CHECKS, msg, args, **kwargs)


def get_logger() -> SchedLogger:
    """Return the shared engine logger."""
    logging.setLoggerClass(SchedLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, SchedLogger)
    return logger


def _threshold(verbosity: int) -> int:
    if 0 <= verbosity < len(_THRESHOLDS):
        return _THRESHOLDS[verbosity]
    return logging.ERROR


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send engine messages at ``verbosity`` and below to ``stream``.

    Replaces any handler installed by an earlier call. Messages are written bare,
    without level names, to ``stream`` or to stderr.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_threshold(verbosity))

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop all handlers and go back to errors only."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_threshold(0))


def debug_enabled() -> bool:
    """True at verbosity 3, where building debug messages is worth the cost."""
    return get_logger().isEnabledFor(logging.DEBUG)
