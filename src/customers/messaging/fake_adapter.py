"""Fake message publisher that records published messages for testing."""

from customers.messaging.port import BrokerConnectionError, MessagePublisher, PublishError


class FakeMessagePublisher(MessagePublisher):
    """Publisher that records messages in memory for test assertions."""

    def __init__(self) -> None:
        self.published: list[dict] = []
        self.connect_calls = 0
        self.closed = False
        self.should_succeed = True
        self.failure_reason = "Broker unavailable"
        self.can_connect = True

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Broker unavailable",
        can_connect: bool = True,
    ) -> None:
        """Configure the fake publisher behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.can_connect = can_connect

    async def connect(self) -> None:
        self.connect_calls += 1
        if not self.can_connect:
            raise BrokerConnectionError(self.failure_reason)

    async def publish(self, topic: str, key: str, payload: dict) -> None:
        if not self.should_succeed:
            raise PublishError(self.failure_reason)
        self.published.append({"topic": topic, "key": key, "payload": payload})

    async def close(self) -> None:
        self.closed = True

    def messages_on(self, topic: str) -> list[dict]:
        """Return the messages published to `topic`, oldest first."""
        return [message for message in self.published if message["topic"] == topic]

    def reset(self) -> None:
        """Clear recorded messages (useful between tests)."""
        self.published.clear()
        self.connect_calls = 0
        self.closed = False
        self.should_succeed = True
        self.failure_reason = "Broker unavailable"
        self.can_connect = True
