"""Shared logging configuration helpers.

Decoded results go to stdout as JSON, so every log record (including
Python warnings raised by the decoder libraries) is written to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Iterable

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Level for each -v/-q offset; offsets beyond the ends clamp to them.
# 0 keeps block failure warnings, -v adds per-image summaries, -vv per-block timings.
_OFFSET_LEVELS = (
    (-1, logging.ERROR),
    (0, logging.WARNING),
    (1, logging.INFO),
    (2, logging.DEBUG),
)


def add_logging_args(parser) -> None:
    """Add the shared --log-level/-v/-q options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Set log verbosity explicitly (overrides -v/-q)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log per-image summaries (-vv adds per-block timings)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Hide block failure warnings, logging errors only",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level from explicit or modifier flags."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    low, high = _OFFSET_LEVELS[0][0], _OFFSET_LEVELS[-1][0]
    offset = min(max(verbose - quiet, low), high)
    return dict(_OFFSET_LEVELS)[offset]


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging on stderr and return the active level.

    Calling it again (e.g. from tests running main() repeatedly) only
    adjusts the level of the existing handlers.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    logging.captureWarnings(True)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    return level
