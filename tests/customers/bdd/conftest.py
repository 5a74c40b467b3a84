"""Shared BDD fixtures and step definitions for customer preferences."""

import pytest
from customers.api import register_exception_handlers, router
from customers.customer.customer import CustomerPreferences, CustomerTier
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def client(publisher):
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a stored {tier} customer"), target_fixture="customer")
def stored_customer(store, tier):
    return store.create(
        email="bdd@example.com",
        tier=CustomerTier(tier),
        preferences=CustomerPreferences(newsletter=True, language="en-US"),
    )


@given(parsers.cfparse('a stored customer with id "{customer_id}"'))
def stored_customer_with_id(store, customer_id):
    store.set_preferences(customer_id, CustomerPreferences(newsletter=False, language="fr-FR"))


@given(parsers.cfparse('no customer with id "{customer_id}" is stored'))
def no_customer_stored(store, customer_id):
    assert not store.contains(customer_id)


@given("the broker is unavailable")
def broker_unavailable(broker):
    broker.configure(should_succeed=False, failure_reason="Broker unavailable")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('a profile updated event is published with tier "{tier}"'))
def profile_updated_published(broker, settings, tier):
    events = broker.messages_on(settings.profile_updated_topic)
    assert len(events) == 1
    assert events[0]["payload"]["tier"] == tier


@then("no events are published")
def no_events_published(broker, notifier):
    assert broker.published == []
    assert notifier.published == []
