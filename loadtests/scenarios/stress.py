"""Stress test scenarios for the publish path and the customer store.

EventFloodUser generates as many broker publishes per second as it can.
HotCustomerUser piles concurrent preference updates onto a handful of
customers. SpikeUser simulates sudden registration bursts.
"""

import random

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import customer_data, preferences_data, unknown_customer_id

HOT_CUSTOMER_IDS = [f"hot-customer-{n}" for n in range(5)]


class EventFloodUser(HttpUser):
    """Stress test: maximum publish throughput.

    Every task triggers at least one broker publish. No sequential
    dependencies, and every update targets a fresh customer to avoid
    contention on the store.

    Monitor: the broker's incoming rate on customer.profile.updated and
    the analytics topic should track the request rate.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def register_customer(self):
        """1 analytics notification."""
        self.client.post(
            "/customers",
            json=customer_data(),
            name="[STRESS] POST /customers",
        )

    @task(5)
    def update_preferences(self):
        """1 profile-updated event + 1 analytics notification."""
        self.client.patch(
            f"/customers/{unknown_customer_id()}/preferences",
            json=preferences_data(),
            name="[STRESS] PATCH /customers/{id}/preferences",
        )


class HotCustomerUser(HttpUser):
    """Stress test: concurrent writers on the same few customers.

    Each customer record must always read back as one complete set of
    preferences, never a mix of two updates.
    """

    wait_time = constant_pacing(0.05)

    @task(4)
    def update_hot_customer(self):
        self.client.patch(
            f"/customers/{random.choice(HOT_CUSTOMER_IDS)}/preferences",
            json=preferences_data(),
            name="[HOT] PATCH /customers/{id}/preferences",
        )

    @task(1)
    def read_hot_customer(self):
        self.client.get(
            f"/customers/{random.choice(HOT_CUSTOMER_IDS)}/preferences",
            name="[HOT] GET /customers/{id}/preferences",
        )


class SpikeUser(HttpUser):
    """Spike test: rapid-fire customer registration.

    Use with high user count and instant spawn rate to simulate
    sudden traffic bursts. Spawn 50-100 of these simultaneously
    to see how the system handles sudden load.
    """

    wait_time = constant_pacing(0.05)  # ~20 req/sec per user

    @task
    def rapid_registration(self):
        self.client.post(
            "/customers",
            json=customer_data(),
            name="[SPIKE] POST /customers",
        )
