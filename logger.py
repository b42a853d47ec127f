"""Logging setup shared by all Hoard modules"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "hoard"


def setup_logger(name: str = ROOT_LOGGER_NAME, level: str = 'WARNING') -> logging.Logger:
    """Configure the root Hoard logger and return the named logger.

    Log records go to stderr so they never end up in a command printed to
    stdout for shell integration.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        root.propagate = False
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return get_logger(name)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger nested under the Hoard hierarchy"""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
