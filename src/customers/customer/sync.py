"""Preference synchronization: handles inbound sync requests.

For every valid request the current profile is republished and a reply is
sent on the reply topic, correlated by the request id. Malformed requests are
dropped without a reply.
"""

import structlog
from pydantic import ValidationError

from customers.customer.events import CustomerPreferenceSyncReplyEvent, CustomerPreferenceSyncRequestEvent
from customers.messaging.publisher import EventPublisher
from customers.store.port import CustomerStore


logger = structlog.get_logger(__name__)


def parse_sync_request(raw: bytes | str | None) -> CustomerPreferenceSyncRequestEvent | None:
    """Parse a raw message into a sync request, or return None if it is malformed."""
    if raw is None:
        return None
    try:
        return CustomerPreferenceSyncRequestEvent.model_validate_json(raw)
    except (ValidationError, ValueError):
        return None


class PreferenceSyncHandler:
    """Answers preference sync requests from the customer store."""

    def __init__(self, store: CustomerStore, publisher: EventPublisher) -> None:
        self.store = store
        self.publisher = publisher

    async def handle(self, raw: bytes | str | None) -> CustomerPreferenceSyncReplyEvent | None:
        request = parse_sync_request(raw)
        if request is None:
            logger.debug("Dropping malformed preference sync request")
            return None

        structlog.contextvars.bind_contextvars(request_id=request.request_id, customer_id=request.customer_id)

        # Status reflects the store before get() synthesizes a default
        found = self.store.contains(request.customer_id)
        customer = self.store.get(request.customer_id)

        await self.publisher.publish_profile_updated(customer)

        reply = CustomerPreferenceSyncReplyEvent.for_request(request, customer, found=found)
        await self.publisher.publish_sync_reply(reply)

        logger.info(
            "Preference sync request answered",
            request_id=request.request_id,
            customer_id=request.customer_id,
            status=reply.status.value,
        )
        return reply
