"""Main application entry-point for pi-relay-bridge."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from enum import Enum
from typing import List, Optional

from .adapters import GpioUnavailableError, MQTTClient, MQTTConnectionError
from .adapters.mqtt import any_subscription_granted
from .codec import CommandDecodeError, decode_command, format_payload
from .config import SessionConfig
from .relays import RelayController

LOGGER = logging.getLogger(__name__)


class SessionState(str, Enum):
    COLD_START = "cold_start"
    AWAITING_BROKER = "awaiting_broker"
    ACTIVE = "active"
    STOPPING = "stopping"


class RelayBridgeApp:
    """Coordinates the MQTT session and the relay board.

    Connect, subscribe-result and message events arrive from the MQTT client
    on the event loop thread and are handled one at a time. A payload that
    fails to decode is logged and dropped; only connection failures and a
    fully rejected subscription end the session.
    """

    def __init__(
        self,
        settings: SessionConfig,
        *,
        relays: RelayController,
        mqtt_client: Optional[MQTTClient] = None,
    ) -> None:
        self._settings = settings
        self._relays = relays
        self._mqtt_client = mqtt_client or MQTTClient(settings)
        self._session_ended: Optional[asyncio.Event] = None
        self._state = SessionState.COLD_START
        self._fatal_reason: Optional[str] = None
        self._stopping = False

        self._mqtt_client.register_connect_handler(self._handle_connect)
        self._mqtt_client.register_subscribe_handler(self._handle_subscribe)
        self._mqtt_client.register_disconnect_handler(self._handle_disconnect)
        self._mqtt_client.set_message_handler(self._handle_message)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def fatal_reason(self) -> Optional[str]:
        return self._fatal_reason

    async def run(self) -> int:
        """Run one session; return the process exit status."""

        self._session_ended = asyncio.Event()
        self._fatal_reason = None
        self._stopping = False

        try:
            self._relays.initialise()
        except GpioUnavailableError as exc:
            LOGGER.error("GPIO initialisation failed: %s", exc)
            return 1

        try:
            return await self._run_session()
        finally:
            self._relays.release()

    async def _run_session(self) -> int:
        client = self._mqtt_client
        session_ended = self._session_ended
        assert session_ended is not None

        self._transition_state(SessionState.AWAITING_BROKER)
        connect_task = asyncio.ensure_future(client.connect())
        stop_task = asyncio.ensure_future(session_ended.wait())
        await asyncio.wait(
            {connect_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )
        stop_task.cancel()

        if not connect_task.done():
            connect_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await connect_task
            LOGGER.info("Shutdown requested before the broker connection completed")
            self._transition_state(SessionState.STOPPING)
            return 0

        try:
            connect_task.result()
        except MQTTConnectionError as exc:
            LOGGER.error("MQTT connection failed: %s", exc)
            self._fatal_reason = str(exc)
            self._transition_state(SessionState.STOPPING)
            return 1

        self._transition_state(SessionState.ACTIVE)
        try:
            await session_ended.wait()
        finally:
            self._transition_state(SessionState.STOPPING)
            await client.disconnect()

        return 1 if self._fatal_reason else 0

    def request_stop(self) -> None:
        """Ask the running session to end cleanly."""

        self._stopping = True
        if self._session_ended is not None:
            self._session_ended.set()

    def _terminate(self, reason: str) -> None:
        LOGGER.error("Terminating MQTT session: %s", reason)
        if self._fatal_reason is None:
            self._fatal_reason = reason
        if self._session_ended is not None:
            self._session_ended.set()

    def _transition_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        LOGGER.info("Session state transition %s -> %s", self._state.value, state.value)
        self._state = state

    # ------------------------------------------------------------------
    # MQTT event handlers
    # ------------------------------------------------------------------
    def _handle_connect(self, rc: int) -> None:
        if rc != 0:
            # The initial refusal is reported by MQTTClient.connect itself.
            if self._state is SessionState.ACTIVE:
                self._terminate(f"broker refused connection (rc={rc})")
            return

        # Subscribing here recreates the subscription after automatic reconnects.
        try:
            self._mqtt_client.subscribe(self._settings.topic, qos=self._settings.qos)
        except MQTTConnectionError as exc:
            self._terminate(f"error subscribing: {exc}")

    def _handle_subscribe(self, granted: List[int]) -> None:
        if not any_subscription_granted(granted):
            self._terminate("all subscriptions rejected")

    def _handle_disconnect(self, rc: int) -> None:
        if rc != 0 and not self._stopping and self._fatal_reason is None:
            LOGGER.warning("Unexpected MQTT disconnect (rc=%s); awaiting reconnect", rc)

    def _handle_message(self, topic: str, payload: bytes) -> None:
        LOGGER.info("%s: %s", topic, format_payload(payload))

        try:
            command = decode_command(payload)
        except CommandDecodeError as exc:
            LOGGER.warning("Dropping message on %s: %s", topic, exc.reason.value)
            return

        self._relays.apply(command)

    @classmethod
    def start(cls, settings: SessionConfig, *, relays: RelayController) -> int:
        instance = cls(settings, relays=relays)
        try:
            exit_code = asyncio.run(instance._run_with_signals())
        except KeyboardInterrupt:
            LOGGER.info("pi-relay-bridge received shutdown signal")
            return 0

        if instance.fatal_reason:
            LOGGER.error("pi-relay-bridge stopped: %s", instance.fatal_reason)
        return exit_code

    async def _run_with_signals(self) -> int:
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(signum, self.request_stop)
        return await self.run()
