"""Constants used across the pi-relay-bridge package."""

from __future__ import annotations

APP_NAME = "pi-relay-bridge"
APP_TITLE = "Pi Zero Relay Controller"

SETTINGS_FILENAME = "settings.dat"

DEFAULT_TOPIC = "relays"
DEFAULT_BROKER = "192.168.0.1"
DEFAULT_BROKER_PORT = 1883
DEFAULT_KEEPALIVE_SECONDS = 60
DEFAULT_SUBSCRIBE_QOS = 1

CHANNEL_COUNT = 16
COMMAND_PAYLOAD_LENGTH = 2

# Board pin index (wiringPi numbering) -> BCM GPIO number.
WIRINGPI_TO_BCM = (17, 18, 27, 22, 23, 24, 25, 4, 2, 3, 8, 7, 10, 9, 11, 14)
