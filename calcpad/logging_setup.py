"""Logging setup for the calcpad CLI.

Library modules only create loggers under "calcpad.*"; this attaches a rich
handler to the package logger when running from the command line.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("calcpad")


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    """Attach a RichHandler to the calcpad logger. Safe to call repeatedly."""
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
