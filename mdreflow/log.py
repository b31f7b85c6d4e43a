"""Logging setup for the command line."""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG, TRACE]
FORMAT = '%(levelname)s %(relativeCreated)6dms %(name)s: %(message)s'


def init_logging(verbosity: int = 0) -> logging.Logger:
    """Send mdreflow's log records to stderr, more of them the higher verbosity."""
    level = LEVELS[min(verbosity, len(LEVELS) - 1)]
    logger = logging.getLogger(__package__)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
