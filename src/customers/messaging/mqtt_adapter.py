"""MQTT notifier for low-QoS analytics messages.

Every publish is a single-shot operation: open a fresh connection, publish
one QoS 1 message (acknowledged by the broker, not persisted), disconnect.
Whichever outcome arrives first (publish acknowledged, publish error,
connect error or the completion deadline) decides the result; later
callbacks are ignored. The connection is torn down exactly once, whatever
the outcome.
"""

import asyncio
import json
import threading
from collections.abc import Callable
from urllib.parse import urlparse

import paho.mqtt.client as mqtt
import structlog

from customers.messaging.port import BrokerConnectionError, MessagePublisher, PublishError

logger = structlog.get_logger(__name__)

_DEFAULT_PORTS = {"mqtt": 1883, "tcp": 1883, "mqtts": 8883, "ssl": 8883}


def _default_client_factory() -> mqtt.Client:
    return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, reconnect_on_failure=False)


class _PublishAttempt:
    """Outcome holder for one publish; only the first completion is accepted."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._completed = False
        self.outcome: asyncio.Future = loop.create_future()

    @property
    def completed(self) -> bool:
        return self._completed

    def complete(self, error: Exception | None = None) -> bool:
        """Record the outcome. Returns False if another path already completed."""
        with self._lock:
            if self._completed:
                return False
            self._completed = True
        self._loop.call_soon_threadsafe(self._resolve, error)
        return True

    def _resolve(self, error: Exception | None) -> None:
        if self.outcome.done():
            return
        if error is None:
            self.outcome.set_result(None)
        else:
            self.outcome.set_exception(error)


class MqttMessagePublisher(MessagePublisher):
    """Publishes each message over its own short-lived MQTT connection."""

    def __init__(
        self,
        url: str,
        connect_timeout: float = 1.0,
        completion_timeout: float = 1.5,
        client_factory: Callable[[], mqtt.Client] = _default_client_factory,
    ) -> None:
        parsed = urlparse(url)
        if parsed.scheme not in _DEFAULT_PORTS:
            raise ValueError(f"Unsupported MQTT URL scheme: {url}")

        self.url = url
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or _DEFAULT_PORTS[parsed.scheme]
        self.use_tls = parsed.scheme in ("mqtts", "ssl")
        self.username = parsed.username
        self.password = parsed.password
        self.connect_timeout = connect_timeout
        self.completion_timeout = completion_timeout
        self._client_factory = client_factory

    async def connect(self) -> None:
        # Connections are opened per publish
        return None

    async def close(self) -> None:
        return None

    async def publish(self, topic: str, key: str, payload: dict) -> None:
        attempt = _PublishAttempt(asyncio.get_running_loop())
        data = json.dumps(payload)
        client = self._build_client(topic, data, attempt)

        try:
            client.connect_async(self.host, self.port)
            client.loop_start()

            await asyncio.wait({attempt.outcome}, timeout=self.completion_timeout)
            if attempt.complete(PublishError(f"MQTT publish to {topic} timed out after {self.completion_timeout}s")):
                logger.debug("MQTT publish deadline reached", topic=topic, url=self.url)
            await attempt.outcome
        finally:
            await asyncio.to_thread(self._teardown, client)

    def _build_client(self, topic: str, data: str, attempt: _PublishAttempt) -> mqtt.Client:
        client = self._client_factory()
        client.connect_timeout = self.connect_timeout
        if self.username:
            client.username_pw_set(self.username, self.password)
        if self.use_tls:
            client.tls_set()

        def on_connect(client, userdata, flags, reason_code, properties):
            if reason_code.is_failure:
                attempt.complete(BrokerConnectionError(f"MQTT broker {self.url} refused connection: {reason_code}"))
                return
            info = client.publish(topic, data, qos=1)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                attempt.complete(PublishError(f"MQTT publish to {topic} failed: {mqtt.error_string(info.rc)}"))

        def on_publish(client, userdata, mid, reason_code, properties):
            if reason_code.is_failure:
                attempt.complete(PublishError(f"MQTT publish to {topic} rejected: {reason_code}"))
            else:
                attempt.complete()

        def on_connect_fail(client, userdata):
            attempt.complete(BrokerConnectionError(f"Cannot connect to MQTT broker {self.url}"))

        client.on_connect = on_connect
        client.on_publish = on_publish
        client.on_connect_fail = on_connect_fail
        return client

    @staticmethod
    def _teardown(client: mqtt.Client) -> None:
        client.disconnect()
        client.loop_stop()
