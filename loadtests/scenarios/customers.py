"""Customer load test scenarios.

Stateful SequentialTaskSet journeys covering registration, preference
changes and reads of never-stored customers. Steps execute in order, and
each depends on the previous step succeeding.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    customer_data,
    invalid_customer_data,
    invalid_preferences_data,
    preferences_data,
    unknown_customer_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CustomerState


class NewCustomerJourney(SequentialTaskSet):
    """Register -> Read -> Update Preferences -> Read Preferences.

    Publishes one analytics notification on registration, then one
    profile-updated event and one analytics notification on the update.
    """

    def on_start(self):
        self.state = CustomerState()

    @task
    def register(self):
        payload = customer_data()
        with self.client.post(
            "/customers",
            json=payload,
            catch_response=True,
            name="POST /customers",
        ) as resp:
            if resp.status_code == 201:
                self.state.customer_id = resp.json()["id"]
                self.state.tier = payload["tier"]
                self.state.preferences = payload["preferences"]
            else:
                resp.failure(f"Registration failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def read_customer(self):
        with self.client.get(
            f"/customers/{self.state.customer_id}",
            catch_response=True,
            name="GET /customers/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["tier"] != self.state.tier:
                resp.failure(f"Tier mismatch: expected {self.state.tier}, got {resp.json()['tier']}")

    @task
    def update_preferences(self):
        payload = preferences_data()
        with self.client.patch(
            f"/customers/{self.state.customer_id}/preferences",
            json=payload,
            catch_response=True,
            name="PATCH /customers/{id}/preferences",
        ) as resp:
            if resp.status_code == 200:
                self.state.preferences = payload
                self.state.update_count += 1
            else:
                resp.failure(f"Preference update failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def read_preferences(self):
        with self.client.get(
            f"/customers/{self.state.customer_id}/preferences",
            catch_response=True,
            name="GET /customers/{id}/preferences",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read preferences failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json() != self.state.preferences:
                resp.failure(f"Preferences mismatch: expected {self.state.preferences}, got {resp.json()}")

    @task
    def done(self):
        self.interrupt()


class PreferenceChurnJourney(SequentialTaskSet):
    """Repeatedly update the preferences of a customer that was never registered.

    The first update stores the synthesized default record; later updates
    replace its preferences.
    """

    def on_start(self):
        self.state = CustomerState(customer_id=unknown_customer_id())

    @task
    def first_update(self):
        self._update()

    @task
    def second_update(self):
        self._update()

    @task
    def third_update(self):
        self._update()

    @task
    def verify(self):
        with self.client.get(
            f"/customers/{self.state.customer_id}",
            catch_response=True,
            name="GET /customers/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["preferences"] != self.state.preferences:
                resp.failure("Last preference update was not applied")

    def _update(self):
        payload = preferences_data()
        with self.client.patch(
            f"/customers/{self.state.customer_id}/preferences",
            json=payload,
            catch_response=True,
            name="PATCH /customers/{id}/preferences",
        ) as resp:
            if resp.status_code == 200:
                self.state.preferences = payload
                self.state.update_count += 1
            else:
                resp.failure(f"Preference update failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def done(self):
        self.interrupt()


class SynthesizedReadJourney(SequentialTaskSet):
    """Read customers that were never stored, plus the reserved id."""

    @task
    def read_unknown_customer(self):
        customer_id = unknown_customer_id()
        with self.client.get(
            f"/customers/{customer_id}",
            catch_response=True,
            name="GET /customers/{id} (synthesized)",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["tier"] != "STANDARD":
                resp.failure(f"Synthesized customer has tier {resp.json()['tier']}")

    @task
    def read_reserved_customer(self):
        with self.client.get(
            "/customers/missing",
            catch_response=True,
            name="GET /customers/missing",
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Reserved id returned {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class InvalidPayloadJourney(SequentialTaskSet):
    """Send payloads the API must reject, checking the rejection shape."""

    @task
    def invalid_customer(self):
        with self.client.post(
            "/customers",
            json=invalid_customer_data(),
            catch_response=True,
            name="POST /customers (invalid)",
        ) as resp:
            self._expect_rejection(resp, "Invalid customer payload")

    @task
    def invalid_preferences(self):
        with self.client.patch(
            f"/customers/{unknown_customer_id()}/preferences",
            json=invalid_preferences_data(),
            catch_response=True,
            name="PATCH /customers/{id}/preferences (invalid)",
        ) as resp:
            self._expect_rejection(resp, "Invalid preferences payload")

    @staticmethod
    def _expect_rejection(resp, message: str):
        if resp.status_code == 400 and extract_error_detail(resp) == message:
            resp.success()
        else:
            resp.failure(f"Expected 400 '{message}', got {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CustomerUser(HttpUser):
    """Locust user simulating customer profile traffic.

    Weighted task distribution:
    - 33% New Customer Journey
    - 33% Preference Churn
    - 20% Synthesized Reads
    - 13% Invalid Payloads
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        NewCustomerJourney: 5,
        PreferenceChurnJourney: 5,
        SynthesizedReadJourney: 3,
        InvalidPayloadJourney: 2,
    }
