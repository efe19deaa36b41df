"""structlog setup for the refcheck CLI."""

from __future__ import annotations

import logging
import os
import sys

import structlog

DEBUG_ENV_VAR = "REFCHECK_DEBUG"

_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def level_for(verbosity: int) -> int:
    """Map ``-v`` counts to a logging level. ``REFCHECK_DEBUG`` forces debug."""
    if os.environ.get(DEBUG_ENV_VAR):
        return logging.DEBUG
    return _LEVELS.get(verbosity, logging.DEBUG)


def _stderr_logger(*_args: object) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def configure_logging(verbosity: int = 0) -> None:
    """Send key-value log events to stderr, filtered by verbosity.

    Reports go to stdout, so logs never mix with JSON output. The stream is
    looked up on each log call, so a replaced ``sys.stderr`` is honoured.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_for(verbosity)),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


__all__ = ["DEBUG_ENV_VAR", "configure_logging", "level_for"]
