"""Runtime configuration for the customer profile service.

All settings are read from environment variables once per process. Defaults
match a local development setup (Kafka on localhost:5411, Mosquitto on
localhost:1883).
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

ONE_MEBIBYTE = 1024 * 1024

_MQTT_ANALYTICS_TOPIC = "notification/user"
_KAFKA_ANALYTICS_TOPIC = "notification.user"

_TRUTHY = {"1", "true", "yes", "on"}


def _split_brokers(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Build with `Settings.from_env()` outside tests."""

    host: str = "0.0.0.0"
    port: int = 9000
    max_body_bytes: int = ONE_MEBIBYTE

    kafka_brokers: tuple[str, ...] = ("localhost:5411",)
    kafka_client_id: str = "customer-service"
    kafka_send_timeout: float = 10.0

    profile_updated_topic: str = "customer.profile.updated"
    sync_request_topic: str = "customer.preference.sync.request"
    sync_reply_topic: str = "customer.preference.sync.reply"
    sync_group_id: str = "customer-service"
    sync_enabled: bool = True

    analytics_transport: str = "mqtt"
    analytics_mqtt_url: str = "mqtt://localhost:1883"
    analytics_topic: str = _MQTT_ANALYTICS_TOPIC
    mqtt_connect_timeout: float = 1.0
    mqtt_completion_timeout: float = 1.5

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        transport = env.get("ANALYTICS_TRANSPORT", "mqtt").strip().lower()
        if transport not in ("mqtt", "kafka"):
            raise ValueError(f"Unknown analytics transport: {transport}")
        default_topic = _MQTT_ANALYTICS_TOPIC if transport == "mqtt" else _KAFKA_ANALYTICS_TOPIC

        return cls(
            host=env.get("CUSTOMER_HOST", cls.host),
            port=int(env.get("CUSTOMER_PORT", cls.port)),
            max_body_bytes=int(env.get("CUSTOMER_MAX_BODY_BYTES", cls.max_body_bytes)),
            kafka_brokers=_split_brokers(env.get("CUSTOMER_KAFKA_BROKERS", ",".join(cls.kafka_brokers))),
            kafka_client_id=env.get("CUSTOMER_KAFKA_CLIENT_ID", cls.kafka_client_id),
            profile_updated_topic=env.get("CUSTOMER_PROFILE_UPDATED_TOPIC", cls.profile_updated_topic),
            sync_request_topic=env.get("CUSTOMER_PREFERENCE_SYNC_REQUEST_TOPIC", cls.sync_request_topic),
            sync_reply_topic=env.get("CUSTOMER_PREFERENCE_SYNC_REPLY_TOPIC", cls.sync_reply_topic),
            sync_group_id=env.get("CUSTOMER_PREFERENCE_SYNC_GROUP_ID", cls.sync_group_id),
            sync_enabled=env.get("CUSTOMER_PREFERENCE_SYNC_ENABLED", "true").strip().lower() in _TRUTHY,
            analytics_transport=transport,
            analytics_mqtt_url=env.get("ANALYTICS_MQTT_URL", cls.analytics_mqtt_url),
            analytics_topic=env.get("ANALYTICS_NOTIFICATION_TOPIC", default_topic),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings for this process, read from the environment on first call."""
    return Settings.from_env()
