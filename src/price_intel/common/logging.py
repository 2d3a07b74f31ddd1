"""Logging configuration for the price intelligence engine.

Log records go to stderr; stdout is reserved for the CLI's JSON output.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "price_intel",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single formatted handler to the package logger.

    Calling again for the same logger only adjusts the level, so
    repeated CLI invocations in one process never duplicate output.

    Args:
        level: Logging level (default INFO).
        module_name: Logger to configure; child module loggers propagate to it.
        stream: Destination stream (default sys.stderr).

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
