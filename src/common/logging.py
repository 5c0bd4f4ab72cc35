"""Logging setup for the forecast engine and its CLI.

Log lines go to stderr so that JSON printed by the CLI on stdout can be
piped straight into other tools.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# requests/urllib3 log every retry and pooled connection at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(
    level: int | None = None,
    module_name: str = "src",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach one formatted handler to ``module_name`` and return the logger.

    Calling again never adds a second handler. Passing ``level`` on a later
    call changes the level; leaving it out keeps the current one (INFO on
    first use).
    """
    logger = logging.getLogger(module_name)
    handler = next(
        (h for h in logger.handlers if getattr(h, "_forecast_engine", False)),
        None,
    )

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler._forecast_engine = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        if level is None:
            level = logging.INFO

    if level is not None:
        logger.setLevel(level)
        handler.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logger.level))

    return logger
