"""Package-wide logging helpers.

A NullHandler sits on the package logger so library use stays quiet until
the CLI (or an embedding application) configures a handler.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

PACKAGE_LOGGER_NAME = "apply_license"
DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    stream: Optional[IO[str]] = None,
    fmt: str | None = None,
) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Handlers installed by an earlier call are replaced, so repeated CLI
    invocations in one process do not duplicate output.
    """
    logger = get_logger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(level)

    # Streams from earlier calls may already be closed.
    for old in list(logger.handlers):
        if isinstance(old, logging.StreamHandler):
            logger.removeHandler(old)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    return logger
