"""Core primitives for pi-relay-bridge."""

from .protocols import LogicLevel, MessageHandler, PinDriver

__all__ = [
    "LogicLevel",
    "MessageHandler",
    "PinDriver",
]
