"""Protocol definitions for the hardware and transport collaborators."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol


MessageHandler = Callable[[str, bytes], None]


class LogicLevel(str, Enum):
    """Electrical level driven onto an output pin."""

    HIGH = "high"
    LOW = "low"


class PinDriver(Protocol):
    """Minimal contract for components that drive output pins."""

    def setup(self, pin_count: int) -> None:
        """Configure pins ``0..pin_count-1`` as outputs."""
        ...

    def write(self, pin_index: int, level: LogicLevel) -> None:
        """Drive a single pin to the given level."""
        ...

    def cleanup(self) -> None:
        """Release any pins claimed by :meth:`setup`."""
        ...
