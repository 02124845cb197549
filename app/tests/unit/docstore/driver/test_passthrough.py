"""Unit tests for the passthrough descriptors."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from docstore.driver.passthrough import AsyncPassthrough, SyncPassthrough

pytestmark = pytest.mark.unit


class Proxy:
    counter = AsyncPassthrough()
    manager = SyncPassthrough()

    def __init__(self, store):
        self.store = store


class TestAsyncPassthrough:
    @pytest.mark.asyncio
    async def test_awaits_async_store_method(self):
        store = MagicMock()
        store.counter = AsyncMock(return_value=3)

        assert await Proxy(store).counter("hits", delta=1) == 3
        store.counter.assert_awaited_once_with("hits", delta=1)

    @pytest.mark.asyncio
    async def test_wraps_sync_store_method(self):
        store = MagicMock()
        store.counter = MagicMock(return_value=4)

        assert await Proxy(store).counter("hits") == 4

    def test_keeps_operation_name(self):
        store = MagicMock()
        assert Proxy(store).counter.__name__ == "counter"

    def test_class_access_returns_descriptor(self):
        assert isinstance(Proxy.counter, AsyncPassthrough)


class TestSyncPassthrough:
    def test_returns_store_method(self):
        store = MagicMock()
        assert Proxy(store).manager is store.manager

    def test_missing_method(self):
        with pytest.raises(AttributeError, match="manager"):
            Proxy(object()).manager
