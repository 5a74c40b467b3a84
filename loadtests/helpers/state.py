"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, with no cross-user
sharing. State tracks the ids returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CustomerState:
    """Tracks state for a single simulated customer lifecycle."""

    customer_id: str | None = None
    tier: str = "STANDARD"
    preferences: dict = field(default_factory=dict)
    update_count: int = 0
