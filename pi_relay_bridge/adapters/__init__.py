"""Adapter modules for external integrations."""

from .gpio import GpioPinDriver, GpioUnavailableError
from .mqtt import MQTTClient, MQTTConnectionError

__all__ = [
    "GpioPinDriver",
    "GpioUnavailableError",
    "MQTTClient",
    "MQTTConnectionError",
]
