"""Logging configuration helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .adapters.mqtt import PAHO_LOGGER

PAHO_LOGGER_NAME = PAHO_LOGGER.name
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its value, falling back to INFO."""

    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def _build_handlers(log_path: Optional[Path]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    level: str = "INFO", *, log_path: Optional[Path] = None, log_network: bool = False
) -> None:
    """Send records to stderr and, when ``log_path`` is given, to a file as well.

    Calling this again replaces the handlers installed by the previous call.
    The paho client logger stays at WARNING unless ``log_network`` is set.
    """

    root = logging.getLogger()
    root.handlers[:] = _build_handlers(log_path)
    root.setLevel(resolve_level(level))
    logging.captureWarnings(True)

    PAHO_LOGGER.setLevel(logging.NOTSET if log_network else logging.WARNING)


def banner(title: str) -> list[str]:
    """Return the boxed title lines logged at startup."""

    border = "#" * (len(title) + 4)
    return [border, f"# {title} #", border]
