"""MQTT adapter encapsulating paho-mqtt client usage."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence

import paho.mqtt.client as mqtt

from ..config import SessionConfig
from ..core import MessageHandler

LOGGER = logging.getLogger(__name__)
PAHO_LOGGER = LOGGER.getChild("paho")

# Granted QoS values above this are SUBACK rejections (0x80 and up).
MAX_GRANTED_QOS = 2


class MQTTConnectionError(RuntimeError):
    """Raised when the MQTT client fails to establish a connection."""


def _reason_value(code: Any) -> int:
    return int(getattr(code, "value", code))


def any_subscription_granted(granted: Sequence[int]) -> bool:
    """Return True when the broker accepted at least one topic of a SUBSCRIBE."""

    return any(qos <= MAX_GRANTED_QOS for qos in granted)


class MQTTClient:
    """Async-friendly wrapper over the threaded paho-mqtt client.

    Every paho callback is handed to the asyncio loop with
    ``call_soon_threadsafe`` so handlers run one at a time, in arrival order,
    on the loop thread.
    """

    def __init__(self, config: SessionConfig, *, client_id: str = "") -> None:
        self.config = config
        self.client_id = client_id

        self._client: Optional[mqtt.Client] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._connected_event: Optional[asyncio.Event] = None
        self._disconnect_event: Optional[asyncio.Event] = None
        self._message_handler: Optional[MessageHandler] = None
        self._last_connect_rc: Optional[int] = None
        self._connect_handlers: List[Callable[[int], None]] = []
        self._subscribe_handlers: List[Callable[[List[int]], None]] = []
        self._disconnect_handlers: List[Callable[[int], None]] = []

    async def connect(self, timeout: float = 30.0) -> None:
        """Connect to the MQTT broker and wait for acknowledgement."""

        self._loop = asyncio.get_running_loop()
        self._connected_event = asyncio.Event()
        self._disconnect_event = asyncio.Event()
        self._last_connect_rc = None

        try:
            client = mqtt.Client(
                mqtt.CallbackAPIVersion.VERSION2,
                client_id=self.client_id,
                clean_session=True,
            )
        except (MemoryError, ValueError) as exc:
            raise MQTTConnectionError(f"Unable to create MQTT client: {exc}") from exc

        client.enable_logger(PAHO_LOGGER)
        client.on_connect = self._on_connect
        client.on_subscribe = self._on_subscribe
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message

        self._client = client

        LOGGER.info(
            "Connecting to MQTT broker %s:%s", self.config.broker, self.config.port
        )

        try:
            client.connect_async(
                self.config.broker, self.config.port, self.config.keepalive
            )
        except (OSError, ValueError) as exc:
            raise MQTTConnectionError(f"Unable to connect to MQTT broker: {exc}") from exc
        client.loop_start()

        try:
            await asyncio.wait_for(self._connected_event.wait(), timeout=timeout)
            if self._last_connect_rc is None or self._last_connect_rc != 0:
                raise MQTTConnectionError(
                    f"MQTT broker rejected connection (rc={self._last_connect_rc})"
                )
        except asyncio.TimeoutError as exc:
            client.loop_stop()
            raise MQTTConnectionError("Timed out connecting to MQTT broker") from exc
        except MQTTConnectionError:
            client.loop_stop()
            raise
        except asyncio.CancelledError:
            client.loop_stop()
            self._client = None
            raise

    async def disconnect(self, timeout: float = 5.0) -> None:
        """Gracefully disconnect from the broker."""

        if not self._client:
            return

        assert self._disconnect_event is not None

        rc = self._client.disconnect()

        try:
            if rc == mqtt.MQTT_ERR_SUCCESS:
                await asyncio.wait_for(self._disconnect_event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            LOGGER.warning("Timed out waiting for MQTT disconnect acknowledgement")
        finally:
            self._client.loop_stop()
            self._client = None

    def subscribe(self, topic: str, qos: int = 1) -> None:
        if not self._client:
            raise RuntimeError("MQTT client not connected")
        result, _ = self._client.subscribe(topic, qos=qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise MQTTConnectionError(f"Subscribe failed with rc={result}")
        LOGGER.info("Subscribing to %s (qos=%s)", topic, qos)

    def set_message_handler(self, handler: Optional[MessageHandler]) -> None:
        self._message_handler = handler

    def register_connect_handler(self, handler: Callable[[int], None]) -> None:
        self._connect_handlers.append(handler)

    def register_subscribe_handler(
        self, handler: Callable[[List[int]], None]
    ) -> None:
        self._subscribe_handlers.append(handler)

    def register_disconnect_handler(self, handler: Callable[[int], None]) -> None:
        self._disconnect_handlers.append(handler)

    # ------------------------------------------------------------------
    # Internal callbacks bridging the threaded paho callbacks into asyncio
    # ------------------------------------------------------------------
    def _on_connect(
        self, client: mqtt.Client, userdata, flags, reason_code, properties=None
    ) -> None:
        rc = _reason_value(reason_code)
        self._last_connect_rc = rc
        if rc == 0:
            LOGGER.info("Connected to MQTT broker")
        else:
            LOGGER.error("MQTT connection failed with rc=%s", rc)

        loop = self._loop
        if loop is None:
            return
        if self._connected_event:
            loop.call_soon_threadsafe(self._connected_event.set)
        for handler in self._connect_handlers:
            loop.call_soon_threadsafe(handler, rc)

    def _on_subscribe(
        self,
        client: mqtt.Client,
        userdata,
        mid: int,
        reason_codes: Sequence[Any],
        properties=None,
    ) -> None:
        granted = [_reason_value(code) for code in reason_codes]
        for index, qos in enumerate(granted):
            LOGGER.info("Subscription %s: granted qos = %s", index, qos)

        loop = self._loop
        if loop is None:
            return
        for handler in self._subscribe_handlers:
            loop.call_soon_threadsafe(handler, list(granted))

    def _on_disconnect(
        self, client: mqtt.Client, userdata, flags, reason_code, properties=None
    ) -> None:
        rc = _reason_value(reason_code)
        LOGGER.info("Disconnected from MQTT broker (rc=%s)", rc)

        loop = self._loop
        if loop is None:
            return
        if self._disconnect_event:
            loop.call_soon_threadsafe(self._disconnect_event.set)
        for handler in self._disconnect_handlers:
            loop.call_soon_threadsafe(handler, rc)

    def _on_message(
        self, client: mqtt.Client, userdata, message: mqtt.MQTTMessage
    ) -> None:
        loop = self._loop
        if not self._message_handler or not loop:
            return
        loop.call_soon_threadsafe(
            self._dispatch_message, message.topic, bytes(message.payload)
        )

    def _dispatch_message(self, topic: str, payload: bytes) -> None:
        handler = self._message_handler
        if handler is None:
            return

        try:
            handler(topic, payload)
        except Exception:  # pragma: no cover
            LOGGER.exception("MQTT message handler raised an exception")
