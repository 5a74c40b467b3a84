import os
from pathlib import Path

import pytest
from customers.config import Settings
from customers.customer.service import CustomerService
from customers.messaging import reset_event_publisher, set_event_publisher
from customers.messaging.fake_adapter import FakeMessagePublisher
from customers.messaging.publisher import EventPublisher
from customers.store import get_store, reset_store


def pytest_sessionstart(session):
    """Initialize the customers domain and push its context for the whole session.

    The activated domain can then be referred to elsewhere as `current_domain`.
    """
    os.environ.setdefault("PROTEAN_ENV", "test")

    from customers.domain import customers

    customers.init()
    customers.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path) or "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/messaging/" in str(test_path):
            item.add_marker(pytest.mark.messaging)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Start every test with an empty store and no publisher singleton."""
    reset_store()
    reset_event_publisher()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    reset_store()
    reset_event_publisher()


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def store():
    return get_store()


@pytest.fixture()
def broker():
    """Fake primary broker (profile updates, sync replies)."""
    return FakeMessagePublisher()


@pytest.fixture()
def notifier():
    """Fake analytics notifier."""
    return FakeMessagePublisher()


@pytest.fixture()
def publisher(broker, notifier, settings):
    event_publisher = EventPublisher(broker=broker, notifier=notifier, settings=settings)
    set_event_publisher(event_publisher)
    return event_publisher


@pytest.fixture()
def service(store, publisher):
    return CustomerService(store=store, publisher=publisher)
