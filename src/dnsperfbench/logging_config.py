"""
Logging setup.

Log records go to stderr through rich, keeping stdout free for tables
and raw output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def init_logging(level: str = "info", console: Optional[Console] = None) -> None:
    """
    Configure the root logger with a single rich handler.

    Args:
        level: debug, info, warn, error (unknown names fall back to info)
        console: Console to log to (default: stderr)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.setLevel(_LEVELS.get(level.lower(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
