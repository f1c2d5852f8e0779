"""Relay channel control on top of a pin driver."""

from __future__ import annotations

import logging

from . import constants
from .codec import RelayCommand
from .core import LogicLevel, PinDriver

LOGGER = logging.getLogger(__name__)


def level_for(state: bool) -> LogicLevel:
    """Return the pin level for a relay state.

    The board's relay drivers are active-low: energising a relay means pulling
    its pin LOW.
    """

    return LogicLevel.LOW if state else LogicLevel.HIGH


class RelayController:
    """Applies decoded relay commands to the board's output pins."""

    def __init__(self, driver: PinDriver, *, channel_count: int = constants.CHANNEL_COUNT) -> None:
        self._driver = driver
        self.channel_count = channel_count

    def initialise(self) -> None:
        """Configure every pin as an output and switch all relays off."""

        self._driver.setup(self.channel_count)
        off = level_for(False)
        for pin_index in range(self.channel_count):
            self._driver.write(pin_index, off)
        LOGGER.info("Initialised %s relay channels (all off)", self.channel_count)

    def apply(self, command: RelayCommand) -> None:
        level = level_for(command.state)
        LOGGER.debug(
            "Relay %s -> %s (pin %s %s)",
            command.channel,
            "on" if command.state else "off",
            command.pin_index,
            level.value,
        )
        self._driver.write(command.pin_index, level)

    def release(self) -> None:
        self._driver.cleanup()
