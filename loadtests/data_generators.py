"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the customer API's validation
rules and match the exact field names of its request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

TIERS = ["STANDARD", "GOLD", "PLATINUM"]
LANGUAGES = ["en-US", "en-GB", "fr-FR", "de-DE", "es-ES", "it-IT", "pt-BR", "ja-JP"]


def valid_email() -> str:
    """Generate a unique email. The API only requires an `@`."""
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def unknown_customer_id() -> str:
    """An id the store has never seen, so reads synthesize a default record."""
    return f"lt-{uuid.uuid4().hex[:12]}"


def preferences_data() -> dict:
    """Generate a PATCH /customers/{id}/preferences payload."""
    return {
        "newsletter": random.choice([True, False]),
        "language": random.choice(LANGUAGES),
    }


def customer_data(tier: str | None = None) -> dict:
    """Generate a POST /customers payload."""
    return {
        "email": valid_email(),
        "tier": tier or random.choice(TIERS),
        "preferences": preferences_data(),
    }


def invalid_preferences_data() -> dict:
    """A preferences payload the API must reject with 400."""
    return random.choice(
        [
            {"newsletter": "yes", "language": "en-US"},
            {"newsletter": 1, "language": "en-US"},
            {"newsletter": True, "language": 42},
            {"language": "en-US"},
        ]
    )


def invalid_customer_data() -> dict:
    """A customer payload the API must reject with 400."""
    payload = customer_data()
    broken = random.choice(["email", "tier", "newsletter"])
    if broken == "email":
        payload["email"] = fake.user_name()
    elif broken == "tier":
        payload["tier"] = "DIAMOND"
    else:
        payload["preferences"]["newsletter"] = "true"
    return payload
