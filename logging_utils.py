"""Logging setup shared by command line tools.

Log records are routed through tqdm.write() so they appear above an active
progress bar instead of tearing it.
"""

from __future__ import annotations

import logging
from typing import Iterable

from tqdm import tqdm

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS)

# -v/-q move along this ladder, starting at INFO
_VERBOSITY_LADDER = (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)
_DEFAULT_RUNG = 1

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


class TqdmLoggingHandler(logging.Handler):
    """Emit records with tqdm.write so open progress bars stay intact."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record))
        except Exception:
            self.handleError(record)


def add_logging_args(parser) -> None:
    """Add --log-level, -v and -q options to an argparse parser."""
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Set log verbosity explicitly (overrides -v/-q)",
    )
    group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log per-image reads and writes (debug)",
    )
    group.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Only log warnings (-q) or errors (-qq)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Map --log-level or the -v/-q balance to a logging level."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]
    rung = _DEFAULT_RUNG - verbose + quiet
    rung = min(max(rung, 0), len(_VERBOSITY_LADDER) - 1)
    return _VERBOSITY_LADDER[rung]


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure the root logger and return the active level.

    Installs a TqdmLoggingHandler the first time it is called. Later calls
    (or an already configured root logger, e.g. under pytest) only adjust
    levels.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    handler = TqdmLoggingHandler(level=level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root_logger.addHandler(handler)
    return level
