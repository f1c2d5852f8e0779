from typing import Optional

import pytest

from pi_relay_bridge.core import LogicLevel


class RecordingPinDriver:
    """Pin driver fake that records setup and every write."""

    def __init__(self) -> None:
        self.setup_count: Optional[int] = None
        self.writes: list[tuple[int, LogicLevel]] = []
        self.cleaned_up = False

    def setup(self, pin_count: int) -> None:
        self.setup_count = pin_count

    def write(self, pin_index: int, level: LogicLevel) -> None:
        self.writes.append((pin_index, level))

    def cleanup(self) -> None:
        self.cleaned_up = True


@pytest.fixture
def pin_driver() -> RecordingPinDriver:
    return RecordingPinDriver()
