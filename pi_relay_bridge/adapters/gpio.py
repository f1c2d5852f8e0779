"""GPIO adapter encapsulating RPi.GPIO usage."""

from __future__ import annotations

import logging
from types import ModuleType
from typing import Optional, Sequence

from .. import constants
from ..core import LogicLevel

LOGGER = logging.getLogger(__name__)


class GpioUnavailableError(RuntimeError):
    """Raised when the GPIO library cannot be loaded or initialised."""


class GpioPinDriver:
    """Drives the relay board's pins through RPi.GPIO in BCM mode.

    Pin indices follow the board's wiringPi numbering and are translated to
    BCM GPIO numbers through ``pin_map``.
    """

    def __init__(self, pin_map: Sequence[int] = constants.WIRINGPI_TO_BCM) -> None:
        self.pin_map = tuple(pin_map)
        self._gpio: Optional[ModuleType] = None

    def setup(self, pin_count: int) -> None:
        if pin_count > len(self.pin_map):
            raise GpioUnavailableError(
                f"Pin map covers {len(self.pin_map)} pins, {pin_count} requested"
            )

        try:
            import RPi.GPIO as gpio
        except (ImportError, RuntimeError) as exc:
            raise GpioUnavailableError(f"RPi.GPIO unavailable: {exc}") from exc

        try:
            gpio.setwarnings(False)
            gpio.setmode(gpio.BCM)
            for index in range(pin_count):
                gpio.setup(self.pin_map[index], gpio.OUT, initial=gpio.HIGH)
        except RuntimeError as exc:
            raise GpioUnavailableError(f"GPIO setup failed: {exc}") from exc

        self._gpio = gpio
        LOGGER.info("Configured %s GPIO outputs", pin_count)

    def write(self, pin_index: int, level: LogicLevel) -> None:
        gpio = self._gpio
        if gpio is None:
            raise RuntimeError("GPIO driver not initialised")

        value = gpio.LOW if level is LogicLevel.LOW else gpio.HIGH
        gpio.output(self.pin_map[pin_index], value)

    def cleanup(self) -> None:
        if self._gpio is None:
            return
        self._gpio.cleanup()
        self._gpio = None
