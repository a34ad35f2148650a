"""
Logging setup for the asnlens CLI
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "asnlens"


def setup_logging(verbose: int = 0, console: Optional[Console] = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    -v gives INFO, -vv gives DEBUG. Without -v the LOG_LEVEL environment
    variable is used, falling back to WARNING.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level_str = os.getenv("LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_str, logging.WARNING)
    logger.setLevel(level)

    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        log_time_format="%H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
