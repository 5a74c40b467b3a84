"""Integration tests for the customer FastAPI endpoints."""

from uuid import UUID

import pytest
from customers.api import register_exception_handlers, router
from customers.customer.customer import CustomerPreferences, CustomerTier
from fastapi import FastAPI
from fastapi.testclient import TestClient

VALID_CUSTOMER = {
    "email": "a@b.com",
    "tier": "GOLD",
    "preferences": {"newsletter": False, "language": "fr-FR"},
}

# Well under the size limit, but too deep for the JSON decoder
DEEPLY_NESTED = b"[" * 100_000 + b"]" * 100_000


@pytest.fixture()
def client(publisher):
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


class TestGetCustomerEndpoint:
    def test_unknown_customer_is_synthesized(self, client, store):
        response = client.get("/customers/c-42")

        assert response.status_code == 200
        assert response.json() == {
            "id": "c-42",
            "email": "c-42@example.com",
            "tier": "STANDARD",
            "preferences": {"newsletter": True, "language": "en-US"},
        }
        assert not store.contains("c-42")

    def test_reserved_id_is_not_found(self, client):
        response = client.get("/customers/missing")

        assert response.status_code == 404
        assert response.content == b""

    def test_reserved_id_is_not_found_even_after_update(self, client):
        client.patch("/customers/missing/preferences", json={"newsletter": False, "language": "fr-FR"})

        assert client.get("/customers/missing").status_code == 404
        assert client.get("/customers/missing/preferences").status_code == 404

    def test_created_customer_is_returned(self, client):
        created = client.post("/customers", json=VALID_CUSTOMER).json()

        response = client.get(f"/customers/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created


class TestCreateCustomerEndpoint:
    def test_create_customer(self, client, store):
        response = client.post("/customers", json=VALID_CUSTOMER)

        assert response.status_code == 201
        data = response.json()
        assert UUID(data["id"])
        assert data == {
            "id": data["id"],
            "email": "a@b.com",
            "tier": "GOLD",
            "preferences": {"newsletter": False, "language": "fr-FR"},
        }
        assert store.get(data["id"]).tier == CustomerTier.GOLD.value

    def test_duplicate_emails_are_allowed(self, client):
        first = client.post("/customers", json=VALID_CUSTOMER).json()
        second = client.post("/customers", json=VALID_CUSTOMER).json()

        assert first["id"] != second["id"]

    def test_publishes_analytics_notification(self, client, notifier, broker):
        data = client.post("/customers", json=VALID_CUSTOMER).json()

        assert len(notifier.published) == 1
        message = notifier.published[0]
        assert message["topic"] == "notification/user"
        assert message["key"] == data["id"]
        assert message["payload"]["requestId"] == data["id"]
        assert message["payload"]["title"] == "CustomerCreated"
        assert message["payload"]["body"] == f"Customer {data['id']} created"
        assert message["payload"]["priority"] == "NORMAL"
        assert broker.published == []

    def test_notification_failure_does_not_fail_request(self, client, notifier, store):
        notifier.configure(should_succeed=False)

        response = client.post("/customers", json=VALID_CUSTOMER)

        assert response.status_code == 201
        assert store.contains(response.json()["id"])

    @pytest.mark.parametrize(
        "payload",
        [
            {**VALID_CUSTOMER, "email": "not-an-email"},
            {**VALID_CUSTOMER, "email": 42},
            {**VALID_CUSTOMER, "tier": "DIAMOND"},
            {**VALID_CUSTOMER, "tier": "gold"},
            {**VALID_CUSTOMER, "preferences": {"newsletter": "yes", "language": "fr-FR"}},
            {**VALID_CUSTOMER, "preferences": {"newsletter": 1, "language": "fr-FR"}},
            {**VALID_CUSTOMER, "preferences": {"newsletter": False, "language": 7}},
            {**VALID_CUSTOMER, "preferences": {"newsletter": False}},
            {"email": "a@b.com", "tier": "GOLD"},
            [],
        ],
    )
    def test_invalid_payload_rejected(self, client, store, notifier, payload):
        response = client.post("/customers", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid customer payload"}
        assert store.count() == 0
        assert notifier.published == []

    def test_malformed_json_rejected(self, client):
        response = client.post("/customers", content=b"{not json", headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid customer payload"}

    def test_empty_body_rejected(self, client):
        response = client.post("/customers")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid customer payload"}

    def test_non_json_body_rejected(self, client, store):
        response = client.post("/customers", content=b"email=a@b.com", headers={"content-type": "text/plain"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid customer payload"}
        assert store.count() == 0

    def test_deeply_nested_body_rejected(self, client, store):
        response = client.post("/customers", content=DEEPLY_NESTED, headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid customer payload"}
        assert store.count() == 0


class TestGetPreferencesEndpoint:
    def test_unknown_customer_has_default_preferences(self, client):
        response = client.get("/customers/c-1/preferences")

        assert response.status_code == 200
        assert response.json() == {"newsletter": True, "language": "en-US"}

    def test_stored_preferences(self, client, store):
        customer = store.create("a@b.com", CustomerTier.GOLD, CustomerPreferences(newsletter=False, language="fr-FR"))

        response = client.get(f"/customers/{customer.id}/preferences")

        assert response.json() == {"newsletter": False, "language": "fr-FR"}


class TestUpdatePreferencesEndpoint:
    def test_update_replaces_preferences(self, client, store):
        customer = store.create(
            "a@b.com", CustomerTier.PLATINUM, CustomerPreferences(newsletter=False, language="fr-FR")
        )

        response = client.patch(
            f"/customers/{customer.id}/preferences",
            json={"newsletter": True, "language": "de-DE"},
        )

        assert response.status_code == 200
        assert response.json() == {"newsletter": True, "language": "de-DE"}
        assert client.get(f"/customers/{customer.id}/preferences").json() == {"newsletter": True, "language": "de-DE"}
        assert store.get(customer.id).tier == CustomerTier.PLATINUM.value

    def test_update_of_unknown_customer_stores_it(self, client, store):
        response = client.patch("/customers/c-9/preferences", json={"newsletter": False, "language": "it-IT"})

        assert response.status_code == 200
        assert store.contains("c-9")
        assert client.get("/customers/c-9").json()["tier"] == "STANDARD"

    def test_publishes_profile_updated_event(self, client, store, broker):
        customer = store.create("a@b.com", CustomerTier.GOLD, CustomerPreferences(newsletter=False, language="fr-FR"))

        client.patch(f"/customers/{customer.id}/preferences", json={"newsletter": True, "language": "de-DE"})

        assert len(broker.published) == 1
        message = broker.published[0]
        assert message["topic"] == "customer.profile.updated"
        assert message["key"] == customer.id
        assert message["payload"]["customerId"] == customer.id
        assert message["payload"]["tier"] == "GOLD"
        assert set(message["payload"]) == {"eventId", "customerId", "updatedAt", "tier"}

    def test_publishes_analytics_notification(self, client, notifier):
        client.patch("/customers/c-3/preferences", json={"newsletter": True, "language": "de-DE"})

        assert len(notifier.published) == 1
        payload = notifier.published[0]["payload"]
        assert payload["title"] == "CustomerPreferencesUpdated"
        assert payload["body"] == "Preferences updated for customer c-3"
        assert payload["requestId"] == "c-3"

    def test_each_update_gets_a_fresh_event_id(self, client, broker):
        client.patch("/customers/c-3/preferences", json={"newsletter": True, "language": "de-DE"})
        client.patch("/customers/c-3/preferences", json={"newsletter": False, "language": "de-DE"})

        event_ids = {message["payload"]["eventId"] for message in broker.published}
        assert len(event_ids) == 2

    def test_broker_failure_does_not_fail_request(self, client, store, broker, notifier):
        broker.configure(should_succeed=False)

        response = client.patch("/customers/c-5/preferences", json={"newsletter": False, "language": "pt-BR"})

        assert response.status_code == 200
        assert store.get("c-5").preferences == CustomerPreferences(newsletter=False, language="pt-BR")
        assert broker.published == []
        assert len(notifier.published) == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"newsletter": "yes", "language": "fr-FR"},
            {"newsletter": None, "language": "fr-FR"},
            {"newsletter": True, "language": 5},
            {"newsletter": True},
            {"language": "fr-FR"},
            "true",
        ],
    )
    def test_invalid_payload_leaves_preferences_unchanged(self, client, store, broker, notifier, payload):
        customer = store.create("a@b.com", CustomerTier.GOLD, CustomerPreferences(newsletter=False, language="fr-FR"))

        response = client.patch(f"/customers/{customer.id}/preferences", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid preferences payload"}
        assert store.get(customer.id).preferences == CustomerPreferences(newsletter=False, language="fr-FR")
        assert broker.published == []
        assert notifier.published == []

    def test_deeply_nested_body_rejected(self, client):
        response = client.patch(
            "/customers/c-1/preferences", content=DEEPLY_NESTED, headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid preferences payload"}

    def test_empty_language_is_accepted(self, client):
        response = client.patch("/customers/c-1/preferences", json={"newsletter": True, "language": ""})

        assert response.status_code == 200
        assert client.get("/customers/c-1/preferences").json() == {"newsletter": True, "language": ""}

    def test_extra_fields_are_ignored(self, client):
        response = client.patch(
            "/customers/c-1/preferences", json={"newsletter": False, "language": "fr-FR", "theme": "dark"}
        )

        assert response.status_code == 200
        assert response.json() == {"newsletter": False, "language": "fr-FR"}


class TestOpenApi:
    def test_request_bodies_are_documented(self, client):
        schema = client.get("/openapi.json").json()

        create_body = schema["paths"]["/customers"]["post"]["requestBody"]["content"]["application/json"]["schema"]
        update_body = schema["paths"]["/customers/{customer_id}/preferences"]["patch"]["requestBody"]["content"][
            "application/json"
        ]["schema"]
        assert create_body["$ref"].endswith("/CreateCustomerRequest")
        assert update_body["$ref"].endswith("/PreferencesPayload")
        assert schema["components"]["schemas"]["PreferencesPayload"]["examples"] == [
            {"newsletter": False, "language": "fr-FR"}
        ]
