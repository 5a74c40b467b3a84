"""Kafka message publisher.

Holds a single KafkaProducer for the whole process. The producer is created
on first use (or by an explicit `connect()` at startup) and reused by every
request and by the sync consumer. kafka-python is a blocking client, so each
call is pushed onto a worker thread to keep the event loop free.
"""

import asyncio
import json
import threading
from collections.abc import Callable, Sequence

import structlog
from kafka import KafkaProducer
from kafka.errors import KafkaError

from customers.messaging.port import BrokerConnectionError, MessagePublisher, PublishError

logger = structlog.get_logger(__name__)


def _encode_key(key: str) -> bytes:
    return key.encode("utf-8")


def _encode_value(value: dict) -> bytes:
    return json.dumps(value).encode("utf-8")


class KafkaMessagePublisher(MessagePublisher):
    """Publishes JSON messages through one lazily created KafkaProducer."""

    def __init__(
        self,
        brokers: Sequence[str],
        client_id: str,
        send_timeout: float = 10.0,
        producer_factory: Callable[..., KafkaProducer] = KafkaProducer,
    ) -> None:
        self.brokers = list(brokers)
        self.client_id = client_id
        self.send_timeout = send_timeout
        self._producer_factory = producer_factory
        self._producer: KafkaProducer | None = None
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self._producer is not None

    def _ensure_producer(self) -> KafkaProducer:
        with self._lock:
            if self._producer is None:
                try:
                    self._producer = self._producer_factory(
                        bootstrap_servers=self.brokers,
                        client_id=self.client_id,
                        key_serializer=_encode_key,
                        value_serializer=_encode_value,
                    )
                except KafkaError as exc:
                    raise BrokerConnectionError(
                        f"Cannot connect to Kafka brokers {','.join(self.brokers)}: {exc}"
                    ) from exc
                logger.info("Kafka producer connected", brokers=self.brokers, client_id=self.client_id)
            return self._producer

    def _send(self, topic: str, key: str, payload: dict) -> None:
        producer = self._ensure_producer()
        try:
            future = producer.send(topic, key=key, value=payload)
            future.get(timeout=self.send_timeout)
        except KafkaError as exc:
            raise PublishError(f"Kafka publish to {topic} failed: {exc}") from exc

    async def connect(self) -> None:
        await asyncio.to_thread(self._ensure_producer)

    async def publish(self, topic: str, key: str, payload: dict) -> None:
        await asyncio.to_thread(self._send, topic, key, payload)

    async def close(self) -> None:
        with self._lock:
            producer, self._producer = self._producer, None
        if producer is not None:
            await asyncio.to_thread(producer.close)
            logger.info("Kafka producer closed", client_id=self.client_id)
