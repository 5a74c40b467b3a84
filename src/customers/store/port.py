"""Customer store port (abstract interface).

Defines the contract every customer store adapter must implement, so the
domain-backed adapter can be replaced by a persistent one without changing the
application service or the sync consumer.
"""

from abc import ABC, abstractmethod

from customers.customer.customer import Customer, CustomerPreferences, CustomerTier


class CustomerStore(ABC):
    """Abstract customer store interface."""

    @abstractmethod
    def get(self, customer_id: str) -> Customer:
        """Return the stored customer, or a synthesized default that is not stored."""
        ...

    @abstractmethod
    def contains(self, customer_id: str) -> bool:
        """Return True if a record for `customer_id` has been stored."""
        ...

    @abstractmethod
    def create(
        self,
        email: str,
        tier: CustomerTier,
        preferences: CustomerPreferences,
    ) -> Customer:
        """Store a new customer under a freshly generated id and return it."""
        ...

    @abstractmethod
    def set_preferences(self, customer_id: str, preferences: CustomerPreferences) -> Customer:
        """Replace the customer's preferences and return the full updated record.

        A customer that was never stored is synthesized first and then stored
        with the new preferences.
        """
        ...
