"""MQTT to GPIO relay bridge for a 16-channel relay board."""

__version__ = "0.1.0"
