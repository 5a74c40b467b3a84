"""Messaging adapter registry.

Provides singleton access to the process-wide EventPublisher. The default
publisher talks to Kafka for domain events and to MQTT (or Kafka, when
ANALYTICS_TRANSPORT=kafka) for analytics notifications. The application
builds it once at startup, so broker settings that cannot be used fail the
lifespan rather than a request. Tests install a publisher backed by fake
adapters with set_event_publisher().
"""

from customers.config import Settings, get_settings
from customers.messaging.publisher import EventPublisher

_event_publisher: EventPublisher | None = None


def build_event_publisher(settings: Settings) -> EventPublisher:
    """Create an EventPublisher wired to the real brokers described by `settings`."""
    from customers.messaging.kafka_adapter import KafkaMessagePublisher

    broker = KafkaMessagePublisher(
        brokers=settings.kafka_brokers,
        client_id=settings.kafka_client_id,
        send_timeout=settings.kafka_send_timeout,
    )

    if settings.analytics_transport == "kafka":
        notifier = broker
    elif settings.analytics_transport == "mqtt":
        from customers.messaging.mqtt_adapter import MqttMessagePublisher

        notifier = MqttMessagePublisher(
            url=settings.analytics_mqtt_url,
            connect_timeout=settings.mqtt_connect_timeout,
            completion_timeout=settings.mqtt_completion_timeout,
        )
    else:
        raise ValueError(f"Unknown analytics transport: {settings.analytics_transport}")

    return EventPublisher(broker=broker, notifier=notifier, settings=settings)


def get_event_publisher() -> EventPublisher:
    """Return the configured event publisher (singleton)."""
    global _event_publisher
    if _event_publisher is None:
        _event_publisher = build_event_publisher(get_settings())
    return _event_publisher


def set_event_publisher(publisher: EventPublisher) -> None:
    """Override the active event publisher (useful for tests)."""
    global _event_publisher
    _event_publisher = publisher


def reset_event_publisher() -> None:
    """Reset the publisher singleton (useful for testing)."""
    global _event_publisher
    _event_publisher = None
