import pytest
from customers.messaging.fake_adapter import FakeMessagePublisher
from customers.messaging.port import BrokerConnectionError, MessagePublisher, PublishError


class TestFakeMessagePublisher:
    def test_is_a_message_publisher(self):
        assert isinstance(FakeMessagePublisher(), MessagePublisher)

    @pytest.mark.asyncio
    async def test_records_messages(self):
        fake = FakeMessagePublisher()

        await fake.publish("a", "k1", {"n": 1})
        await fake.publish("b", "k2", {"n": 2})

        assert fake.published == [
            {"topic": "a", "key": "k1", "payload": {"n": 1}},
            {"topic": "b", "key": "k2", "payload": {"n": 2}},
        ]
        assert fake.messages_on("b") == [{"topic": "b", "key": "k2", "payload": {"n": 2}}]

    @pytest.mark.asyncio
    async def test_configured_failure(self):
        fake = FakeMessagePublisher()
        fake.configure(should_succeed=False, failure_reason="nope")

        with pytest.raises(PublishError, match="nope"):
            await fake.publish("a", "k", {})
        assert fake.published == []

    @pytest.mark.asyncio
    async def test_configured_connect_failure(self):
        fake = FakeMessagePublisher()
        fake.configure(can_connect=False)

        with pytest.raises(BrokerConnectionError):
            await fake.connect()
        assert fake.connect_calls == 1

    @pytest.mark.asyncio
    async def test_reset(self):
        fake = FakeMessagePublisher()
        fake.configure(should_succeed=False)
        await fake.close()

        fake.reset()

        assert fake.should_succeed
        assert not fake.closed
        assert fake.published == []
