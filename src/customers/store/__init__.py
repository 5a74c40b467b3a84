"""Customer store factory.

Provides get_store() / set_store() to swap implementations. The in-memory
store is the only adapter shipped; tests may install their own.
"""

from customers.store.memory import InMemoryCustomerStore
from customers.store.port import CustomerStore

_current_store: CustomerStore | None = None


def get_store() -> CustomerStore:
    """Return the current customer store. Defaults to InMemoryCustomerStore."""
    global _current_store
    if _current_store is None:
        _current_store = InMemoryCustomerStore()
    return _current_store


def set_store(store: CustomerStore) -> None:
    """Override the active customer store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to a fresh default store."""
    global _current_store
    _current_store = None
