"""Decoding of two-byte relay control payloads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from . import constants

Payload = Union[bytes, bytearray, memoryview]


class DecodeFailure(str, Enum):
    """Reason a payload was rejected."""

    INVALID_LENGTH = "invalid_length"
    CHANNEL_OUT_OF_RANGE = "channel_out_of_range"


class CommandDecodeError(ValueError):
    """Raised when a payload does not describe a valid relay command."""

    def __init__(self, reason: DecodeFailure, payload: bytes) -> None:
        super().__init__(f"{reason.value}: {format_payload(payload)}")
        self.reason = reason
        self.payload = payload


@dataclass(frozen=True, slots=True)
class RelayCommand:
    channel: int
    state: bool

    @property
    def pin_index(self) -> int:
        return self.channel - 1


def format_payload(payload: Payload) -> str:
    """Render raw payload bytes as ``[1] [0]`` for diagnostics."""

    return " ".join(f"[{value}]" for value in bytes(payload))


def decode_command(payload: Payload) -> RelayCommand:
    """Decode ``[channel, state]`` into a :class:`RelayCommand`.

    The channel byte must be in 1..16. A state byte of zero means off, any other
    value means on.

    Raises:
        CommandDecodeError: If the payload length or channel is invalid.
    """

    data = bytes(payload)
    if len(data) != constants.COMMAND_PAYLOAD_LENGTH:
        raise CommandDecodeError(DecodeFailure.INVALID_LENGTH, data)

    channel, state = data
    if channel == 0 or channel > constants.CHANNEL_COUNT:
        raise CommandDecodeError(DecodeFailure.CHANNEL_OUT_OF_RANGE, data)

    return RelayCommand(channel=channel, state=state != 0)
