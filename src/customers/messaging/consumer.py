"""Kafka consumer loop for preference sync requests.

Lifecycle: IDLE → CONNECTED → SUBSCRIBED → RUNNING → STOPPED. `start()` must
succeed before `run()`; a failure there is a startup error and propagates.
Once running, each record is handed to the PreferenceSyncHandler. A failure
while handling one record is logged and the loop moves on to the next record;
offsets are committed automatically by the client either way. A failed poll
is logged and retried after `poll_retry_delay` seconds.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

import structlog
from kafka import KafkaConsumer
from kafka.errors import KafkaError

from customers.config import Settings
from customers.customer.sync import PreferenceSyncHandler
from customers.messaging.port import BrokerConnectionError

logger = structlog.get_logger(__name__)


class ConsumerState(Enum):
    IDLE = "IDLE"
    CONNECTED = "CONNECTED"
    SUBSCRIBED = "SUBSCRIBED"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


class PreferenceSyncConsumer:
    """Feeds records from the sync request topic into a PreferenceSyncHandler."""

    def __init__(
        self,
        handler: PreferenceSyncHandler,
        brokers: list[str],
        topic: str,
        group_id: str,
        client_id: str,
        poll_timeout_ms: int = 1000,
        poll_retry_delay: float = 1.0,
        consumer_factory: Callable[..., KafkaConsumer] = KafkaConsumer,
    ) -> None:
        self.handler = handler
        self.brokers = list(brokers)
        self.topic = topic
        self.group_id = group_id
        self.client_id = client_id
        self.poll_timeout_ms = poll_timeout_ms
        self.poll_retry_delay = poll_retry_delay
        self._consumer_factory = consumer_factory
        self._consumer: KafkaConsumer | None = None
        self._stopping = False
        self.state = ConsumerState.IDLE

    def _connect_and_subscribe(self) -> None:
        try:
            consumer = self._consumer_factory(
                bootstrap_servers=self.brokers,
                group_id=self.group_id,
                client_id=self.client_id,
                enable_auto_commit=True,
                auto_offset_reset="latest",
            )
        except KafkaError as exc:
            raise BrokerConnectionError(f"Cannot connect to Kafka brokers {','.join(self.brokers)}: {exc}") from exc
        self._consumer = consumer
        self.state = ConsumerState.CONNECTED

        try:
            consumer.subscribe([self.topic])
        except KafkaError as exc:
            raise BrokerConnectionError(f"Cannot subscribe to {self.topic}: {exc}") from exc
        self.state = ConsumerState.SUBSCRIBED

    async def start(self) -> None:
        """Connect to the brokers and subscribe to the request topic."""
        if self.state is not ConsumerState.IDLE:
            raise RuntimeError(f"Consumer cannot start from state {self.state.value}")
        await asyncio.to_thread(self._connect_and_subscribe)
        logger.info("Preference sync consumer subscribed", topic=self.topic, group_id=self.group_id)

    async def run(self) -> None:
        """Process records until `stop()` is called."""
        if self.state is not ConsumerState.SUBSCRIBED:
            raise RuntimeError(f"Consumer cannot run from state {self.state.value}")
        self.state = ConsumerState.RUNNING

        try:
            while not self._stopping:
                try:
                    batches = await asyncio.to_thread(self._consumer.poll, timeout_ms=self.poll_timeout_ms)
                except KafkaError as exc:
                    logger.warning("Polling sync requests failed, retrying", topic=self.topic, error=str(exc))
                    await asyncio.sleep(self.poll_retry_delay)
                    continue
                for records in batches.values():
                    for record in records:
                        await self.process(record.value)
        finally:
            self.state = ConsumerState.STOPPED
        logger.info("Preference sync consumer stopped", topic=self.topic)

    async def process(self, value: bytes | None) -> None:
        """Handle one record, logging instead of raising on failure."""
        try:
            await self.handler.handle(value)
        except Exception:
            logger.exception("Failed to process preference sync request", topic=self.topic)
        finally:
            structlog.contextvars.clear_contextvars()

    def stop(self) -> None:
        self._stopping = True

    async def close(self) -> None:
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            await asyncio.to_thread(consumer.close)
        self.state = ConsumerState.STOPPED


def create_sync_consumer(settings: Settings, handler: PreferenceSyncHandler) -> PreferenceSyncConsumer:
    return PreferenceSyncConsumer(
        handler=handler,
        brokers=list(settings.kafka_brokers),
        topic=settings.sync_request_topic,
        group_id=settings.sync_group_id,
        client_id=settings.kafka_client_id,
    )
