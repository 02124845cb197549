"""Shared fixtures for the docstore test suite.

The application package root (`app/`) is put on sys.path by the pytest
configuration, so `docstore` and `tests.factories` import directly.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from docstore.clients.store.memory import InMemoryDocumentStore
from docstore.driver import Driver
from docstore.services.providers import get_settings
from tests.factories.docstore import (
    make_exists_error,
    make_multi_get_response,
    make_node_data,
    make_not_found_error,
    make_temporary_error,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; tests that touch env vars need a reset."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def memory_store():
    """Fresh in-memory store with the default lock time."""
    return InMemoryDocumentStore()


@pytest.fixture
def driver(memory_store):
    """Driver over a fresh in-memory store with default options."""
    return Driver.create(memory_store)


@pytest.fixture
def mock_store():
    """Store double whose coroutines are AsyncMocks.

    Unconfigured calls return None; set `return_value`/`side_effect` per test.
    """
    store = MagicMock()
    for name in (
        "get",
        "get_and_lock",
        "get_multi",
        "insert",
        "upsert",
        "remove",
        "unlock",
        "replace",
    ):
        setattr(store, name, AsyncMock(name=name))
    return store


@pytest.fixture
def not_found_error_factory():
    return make_not_found_error


@pytest.fixture
def temporary_error_factory():
    return make_temporary_error


@pytest.fixture
def exists_error_factory():
    return make_exists_error


@pytest.fixture
def multi_get_response_factory():
    return make_multi_get_response


@pytest.fixture
def node_data_factory():
    return make_node_data
