"""Settings loader for pi-relay-bridge."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional

from . import constants

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    broker: str = constants.DEFAULT_BROKER
    topic: str = constants.DEFAULT_TOPIC
    port: int = constants.DEFAULT_BROKER_PORT
    keepalive: int = constants.DEFAULT_KEEPALIVE_SECONDS
    qos: int = constants.DEFAULT_SUBSCRIBE_QOS
    source: Optional[Path] = None  # None when defaults were used

    def summary(self) -> str:
        return f"TOPIC: {self.topic}\nBROKER: {self.broker}"


def default_settings_path(argv0: str) -> Path:
    """Return the settings file that sits alongside the executable."""

    return Path(argv0).parent / constants.SETTINGS_FILENAME


def _tokenise(line: str) -> Optional[tuple[str, Optional[str]]]:
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    tokens = text.split()
    value = tokens[1] if len(tokens) > 1 else None
    return tokens[0].upper(), value


def parse_settings(lines: Iterable[str], *, source: Optional[Path] = None) -> SessionConfig:
    """Build a session configuration from ``LABEL value`` lines.

    Recognised labels are ``TOPIC`` and ``BROKER`` (case-insensitive). Unknown
    labels and labels without a value are ignored, leaving the default in place.
    """

    settings = SessionConfig(source=source)
    for line in lines:
        entry = _tokenise(line)
        if entry is None:
            continue
        label, value = entry
        if value is None:
            continue
        if label == "TOPIC":
            settings = replace(settings, topic=value)
        elif label == "BROKER":
            settings = replace(settings, broker=value)
    return settings


def load_settings(path: Optional[Path] = None) -> SessionConfig:
    """Load settings from disk, falling back to defaults when unavailable."""

    settings_path = path or Path(constants.SETTINGS_FILENAME)
    try:
        with settings_path.open("r", encoding="utf-8") as stream:
            settings = parse_settings(stream, source=settings_path)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.info("Unable to open file: %s, using defaults (%s)", settings_path, exc)
        settings = SessionConfig()

    for line in settings.summary().splitlines():
        LOGGER.info(line)
    return settings
