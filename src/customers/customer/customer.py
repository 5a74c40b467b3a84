"""Customer aggregate with its CustomerPreferences value object."""

from enum import Enum
from uuid import uuid4

from protean.fields import Boolean, String, Text, ValueObject

from customers.domain import customers


class CustomerTier(Enum):
    """Enumeration of customer loyalty tiers."""

    STANDARD = "STANDARD"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


DEFAULT_NEWSLETTER = True
DEFAULT_LANGUAGE = "en-US"


@customers.value_object(part_of="Customer")
class CustomerPreferences:
    """Communication preferences of a customer.

    Preferences have no identity of their own and are replaced wholesale on
    update; individual fields are never merged. `language` is free-form.
    """

    newsletter: Boolean(required=True)
    language: Text()

    def as_payload(self) -> dict:
        # An empty language is held as absent
        return {"newsletter": bool(self.newsletter), "language": self.language or ""}


@customers.aggregate
class Customer:
    """A customer profile: contact email, loyalty tier and preferences.

    Ids are opaque strings. Customers nobody has stored yet are served as a
    synthesized default (see `default_for`), which is only persisted once its
    preferences are changed.
    """

    email: Text(required=True)
    tier: String(choices=CustomerTier, default=CustomerTier.STANDARD.value)
    preferences: ValueObject(CustomerPreferences, required=True)

    @classmethod
    def register(cls, email: str, tier: CustomerTier, preferences: CustomerPreferences) -> "Customer":
        return cls(id=str(uuid4()), email=email, tier=tier.value, preferences=preferences)

    @classmethod
    def default_for(cls, customer_id: str) -> "Customer":
        """Synthesize the default profile served for a customer nobody has stored yet."""
        return cls(
            id=customer_id,
            email=f"{customer_id}@example.com",
            tier=CustomerTier.STANDARD.value,
            preferences=CustomerPreferences(newsletter=DEFAULT_NEWSLETTER, language=DEFAULT_LANGUAGE),
        )

    def replace_preferences(self, preferences: CustomerPreferences) -> None:
        self.preferences = preferences

    def as_payload(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "tier": self.tier,
            "preferences": self.preferences.as_payload(),
        }
