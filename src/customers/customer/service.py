"""Customer application service: reads, registration and preference changes.

Store mutations always stand on their own: a failed publish afterwards is
logged by the best-effort wrapper and never undoes the mutation.
"""

import structlog

from customers.customer.customer import Customer, CustomerPreferences, CustomerTier
from customers.messaging import get_event_publisher
from customers.messaging.publisher import EventPublisher, publish_best_effort
from customers.store import get_store
from customers.store.port import CustomerStore

logger = structlog.get_logger(__name__)

# Reads for this id always report "not found", whatever the store holds
RESERVED_MISSING_ID = "missing"


class CustomerNotFound(Exception):
    def __init__(self, customer_id: str) -> None:
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class CustomerService:
    def __init__(self, store: CustomerStore | None = None, publisher: EventPublisher | None = None) -> None:
        self.store = store if store is not None else get_store()
        self.publisher = publisher if publisher is not None else get_event_publisher()

    def get_customer(self, customer_id: str) -> Customer:
        """Return the stored customer or its synthesized default.

        Raises:
            CustomerNotFound: for the reserved id only.
        """
        if customer_id == RESERVED_MISSING_ID:
            raise CustomerNotFound(customer_id)
        return self.store.get(customer_id)

    def get_preferences(self, customer_id: str) -> CustomerPreferences:
        return self.get_customer(customer_id).preferences

    def register_customer(self, email: str, tier: CustomerTier, preferences: CustomerPreferences) -> Customer:
        customer = self.store.create(email=email, tier=tier, preferences=preferences)
        logger.info("Customer registered", customer_id=customer.id, tier=customer.tier)
        return customer

    async def update_preferences(self, customer_id: str, preferences: CustomerPreferences) -> Customer:
        """Replace the customer's preferences, then publish a profile-updated event.

        The publish is best-effort. Concurrent updates of the same customer are
        not serialized across the publish, so the published tier may describe a
        record that has already been superseded.
        """
        updated = self.store.set_preferences(customer_id, preferences)
        logger.info("Customer preferences updated", customer_id=customer_id)

        await publish_best_effort(
            self.publisher.publish_profile_updated(updated),
            topic=self.publisher.settings.profile_updated_topic,
            customer_id=customer_id,
        )
        return updated
