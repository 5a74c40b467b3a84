"""Customer store on the customers domain's default (in-memory) provider.

Every operation runs inside the domain context, so it works the same from a
request handler, the sync consumer or a worker thread. The read-modify-write
in `set_preferences` is serialized by a lock. Nothing survives a restart.
"""

import threading

from protean.domain import Domain
from protean.exceptions import ObjectNotFoundError

from customers.customer.customer import Customer, CustomerPreferences, CustomerTier
from customers.domain import customers
from customers.store.port import CustomerStore


class InMemoryCustomerStore(CustomerStore):
    """Customer store backed by the domain's Customer repository."""

    def __init__(self, domain: Domain = customers) -> None:
        self.domain = domain
        self._lock = threading.Lock()

    def _find(self, customer_id: str) -> Customer | None:
        try:
            return self.domain.repository_for(Customer).get(customer_id)
        except ObjectNotFoundError:
            return None

    def get(self, customer_id: str) -> Customer:
        with self.domain.domain_context():
            customer = self._find(customer_id)
            return customer if customer is not None else Customer.default_for(customer_id)

    def contains(self, customer_id: str) -> bool:
        with self.domain.domain_context():
            return self._find(customer_id) is not None

    def create(
        self,
        email: str,
        tier: CustomerTier,
        preferences: CustomerPreferences,
    ) -> Customer:
        with self.domain.domain_context():
            customer = Customer.register(email=email, tier=tier, preferences=preferences)
            self.domain.repository_for(Customer).add(customer)
        return customer

    def set_preferences(self, customer_id: str, preferences: CustomerPreferences) -> Customer:
        with self.domain.domain_context(), self._lock:
            customer = self._find(customer_id)
            if customer is None:
                customer = Customer.default_for(customer_id)
            customer.replace_preferences(preferences)
            self.domain.repository_for(Customer).add(customer)
        return customer

    def count(self) -> int:
        with self.domain.domain_context():
            return self.domain.repository_for(Customer)._dao.query.all().total

    def clear(self) -> None:
        """Drop every stored record (useful between tests)."""
        with self.domain.domain_context():
            for _, provider in self.domain.providers.items():
                provider._data_reset()
