"""Runtime logging helpers."""

from __future__ import annotations

import os
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED_LEVEL: Optional[str] = None


def configure_logging(debug: bool = False) -> None:
    """Route loguru through rich on stderr. Safe to call more than once."""
    global _CONFIGURED_LEVEL
    level = "DEBUG" if debug else os.getenv("GEMCHAT_LOG_LEVEL", "WARNING").upper()
    if level == _CONFIGURED_LEVEL:
        return

    logger.remove()
    logger.add(
        RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        ),
        level=level,
        format="{message}",
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = level
