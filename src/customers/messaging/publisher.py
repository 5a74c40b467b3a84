"""Domain event publisher.

Maps each customer event to its topic and message key and hands it to the
right transport: the primary broker for profile updates and sync replies, the
analytics transport (MQTT notifier or the primary broker) for notifications.

The `publish_*` methods raise `PublishError` on failure. Callers that must not
fail because of messaging wrap them in `publish_best_effort`, which logs the
failure and returns a `PublishResult` the caller is free to ignore.
"""

from collections.abc import Awaitable

import structlog

from customers.config import Settings
from customers.customer.customer import Customer
from customers.customer.events import (
    AnalyticsNotificationEvent,
    CustomerPreferenceSyncReplyEvent,
    CustomerProfileUpdatedEvent,
)
from customers.messaging.port import MessagePublisher, PublishError, PublishResult

logger = structlog.get_logger(__name__)


class EventPublisher:
    """Publishes customer events to the configured brokers."""

    def __init__(self, broker: MessagePublisher, notifier: MessagePublisher, settings: Settings) -> None:
        self.broker = broker
        self.notifier = notifier
        self.settings = settings

    async def connect(self) -> None:
        """Connect the primary broker eagerly instead of on first publish."""
        await self.broker.connect()

    async def close(self) -> None:
        await self.broker.close()
        if self.notifier is not self.broker:
            await self.notifier.close()

    async def publish_profile_updated(self, customer: Customer) -> CustomerProfileUpdatedEvent:
        event = CustomerProfileUpdatedEvent.for_customer(customer)
        await self.broker.publish(self.settings.profile_updated_topic, customer.id, event.to_message())
        logger.debug(
            "Profile updated event published",
            customer_id=customer.id,
            event_id=event.event_id,
            topic=self.settings.profile_updated_topic,
        )
        return event

    async def publish_analytics_notification(self, event: AnalyticsNotificationEvent) -> AnalyticsNotificationEvent:
        await self.notifier.publish(self.settings.analytics_topic, event.request_id, event.to_message())
        logger.debug(
            "Analytics notification published",
            notification_id=event.notification_id,
            title=event.title,
            topic=self.settings.analytics_topic,
        )
        return event

    async def publish_sync_reply(self, reply: CustomerPreferenceSyncReplyEvent) -> CustomerPreferenceSyncReplyEvent:
        await self.broker.publish(self.settings.sync_reply_topic, reply.customer_id, reply.to_message())
        logger.debug(
            "Preference sync reply published",
            request_id=reply.request_id,
            status=reply.status.value,
            topic=self.settings.sync_reply_topic,
        )
        return reply

    async def notify_analytics(self, event: AnalyticsNotificationEvent) -> PublishResult:
        """Best-effort analytics notification, suitable for background dispatch."""
        return await publish_best_effort(
            self.publish_analytics_notification(event),
            topic=self.settings.analytics_topic,
            request_id=event.request_id,
        )


async def publish_best_effort(publish: Awaitable, topic: str, **context) -> PublishResult:
    """Await a publish call, converting any failure into a logged, failed result.

    Never raises for messaging failures. The triggering operation is considered
    successful regardless of the returned result.
    """
    try:
        await publish
    except PublishError as exc:
        logger.error("Failed to publish message", topic=topic, error=str(exc), **context)
        return PublishResult(success=False, topic=topic, error=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error while publishing message", topic=topic, **context)
        return PublishResult(success=False, topic=topic, error=str(exc))
    return PublishResult(success=True, topic=topic)
