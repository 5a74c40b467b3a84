"""Message publisher port (abstract interface).

Defines the contract shared by the Kafka producer, the MQTT notifier and the
fake adapter used in tests. Adapters raise `PublishError` when a message could
not be delivered; deciding whether that failure matters is the caller's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class PublishError(Exception):
    """A message could not be handed to the broker."""


class BrokerConnectionError(PublishError):
    """The broker could not be reached at all."""


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a best-effort publish. Callers may ignore it."""

    success: bool
    topic: str
    error: str | None = None


class MessagePublisher(ABC):
    """Abstract one-way message publisher."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish the broker connection ahead of the first publish.

        Adapters without a persistent connection treat this as a no-op.
        """
        ...

    @abstractmethod
    async def publish(self, topic: str, key: str, payload: dict) -> None:
        """Publish one JSON payload to `topic`, partitioned by `key` where supported."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the broker connection, if any."""
        ...
