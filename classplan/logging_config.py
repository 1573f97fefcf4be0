"""
Logging setup for the command line entry points.

Library modules only create loggers (logging.getLogger(__name__)); the
handler is installed here, once, writing to stderr through rich.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ENV_LOG_LEVEL = "CLASSPLAN_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"


def _resolve_level(level: Optional[str]) -> str:
    name = (level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LEVEL).strip().upper()
    # Unknown names ("loud") fall back instead of crashing the CLI
    if not isinstance(logging.getLevelName(name), int):
        return DEFAULT_LEVEL
    return name


def setup_logging(level: Optional[str] = None) -> None:
    """
    Level: explicit argument, else $CLASSPLAN_LOG_LEVEL, else WARNING.

    Calling it again updates the level of the installed handler.
    """
    level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(level)

    # Prevent duplicate handlers
    existing = [h for h in root.handlers if isinstance(h, RichHandler)]
    if existing:
        for h in existing:
            h.setLevel(level)
        return

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="%(name)s | %(message)s"))
    root.addHandler(handler)
