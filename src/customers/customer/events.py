"""Event contracts exchanged with the message brokers.

Field names are snake_case in Python and camelCase on the wire. Each outbound
event renders its broker payload with `to_message()`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel

from customers.customer.customer import Customer, CustomerTier


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a `Z` suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return str(uuid4())


class NotificationPriority(Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class SyncStatus(Enum):
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"


class WireEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_message(self) -> dict:
        """Render the JSON-ready broker payload, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CustomerProfileUpdatedEvent(WireEvent):
    """A customer's profile changed. Published once per preference update."""

    event_id: str = Field(default_factory=_new_id)
    customer_id: str
    updated_at: str = Field(default_factory=utc_timestamp)
    tier: CustomerTier

    @classmethod
    def for_customer(cls, customer: Customer) -> CustomerProfileUpdatedEvent:
        return cls(customer_id=customer.id, tier=customer.tier)


class AnalyticsNotificationEvent(WireEvent):
    """User-facing analytics notification, correlated to a customer via `request_id`."""

    notification_id: str = Field(default_factory=_new_id)
    request_id: str
    title: str
    body: str
    priority: NotificationPriority = NotificationPriority.NORMAL

    @classmethod
    def customer_created(cls, customer: Customer) -> AnalyticsNotificationEvent:
        return cls(
            request_id=customer.id,
            title="CustomerCreated",
            body=f"Customer {customer.id} created",
        )

    @classmethod
    def preferences_updated(cls, customer_id: str) -> AnalyticsNotificationEvent:
        return cls(
            request_id=customer_id,
            title="CustomerPreferencesUpdated",
            body=f"Preferences updated for customer {customer_id}",
        )


class CustomerPreferenceSyncRequestEvent(WireEvent):
    """Inbound request to publish a customer's current preferences.

    All three fields must be JSON strings; numbers or nulls are rejected rather
    than coerced.
    """

    request_id: StrictStr
    customer_id: StrictStr
    requested_at: StrictStr


def _stringify(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CustomerPreferenceSyncReplyEvent(WireEvent):
    """Reply to a sync request, correlated by `request_id`.

    `preferences` is only present when the customer was already stored.
    """

    request_id: str
    customer_id: str
    status: SyncStatus
    synced_at: str = Field(default_factory=utc_timestamp)
    preference_version: int = 1
    preferences: dict[str, str] | None = None

    @classmethod
    def for_request(
        cls,
        request: CustomerPreferenceSyncRequestEvent,
        customer: Customer,
        found: bool,
    ) -> CustomerPreferenceSyncReplyEvent:
        preferences = None
        if found:
            preferences = {key: _stringify(value) for key, value in customer.preferences.as_payload().items()}

        return cls(
            request_id=request.request_id,
            customer_id=request.customer_id,
            status=SyncStatus.SUCCESS if found else SyncStatus.NOT_FOUND,
            preferences=preferences,
        )
