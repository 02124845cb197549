"""Unit tests for the public Driver."""

from unittest.mock import MagicMock

import pytest
import structlog

from docstore.clients.cluster import ClusterInfoClient
from docstore.configuration import DriverSettings, Settings, StoreSettings
from docstore.driver import Driver
from docstore.errors import DriverError, StoreError
from docstore.models import OPERATIONS, BatchGetResult, DocumentHandle
from docstore.operations.result import OperationResult

pytestmark = pytest.mark.unit


class TestDriverConstruction:
    def test_create_applies_options(self, memory_store):
        driver = Driver.create(memory_store, missing=False, atomic_retry_times=2)
        assert driver.options.missing is False
        assert driver.options.atomic_retry_times == 2
        assert driver.store is memory_store

    def test_settings_then_options(self, memory_store):
        driver = Driver(
            memory_store,
            options={"atomic_lock": True},
            settings=DriverSettings(atomic_lock=False, missing=False),
        )
        assert driver.options.atomic_lock is True
        assert driver.options.missing is False

    def test_from_settings_builds_store_and_cluster_client(self):
        settings = Settings(
            driver=DriverSettings(atomic_lock=False),
            store=StoreSettings(backend="memory", cluster_url="http://db:8091"),
        )

        driver = Driver.from_settings(settings)

        assert driver.options.atomic_lock is False
        assert isinstance(driver._cluster_client, ClusterInfoClient)

    def test_static_utilities(self, not_found_error_factory, temporary_error_factory):
        assert Driver.OPERATIONS is OPERATIONS
        assert Driver.is_key_not_found(not_found_error_factory())
        assert Driver.is_temporary_error(temporary_error_factory())


class TestDriverGet:
    @pytest.mark.asyncio
    async def test_single_key(self, driver, memory_store):
        await memory_store.insert("a", {"n": 1})

        handle = await driver.get("a")

        assert handle.value == {"n": 1}

    @pytest.mark.asyncio
    async def test_single_missing_key_is_none(self, driver):
        assert await driver.get("missing") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keys", [None, "", []])
    async def test_empty_keys(self, driver, keys):
        assert await driver.get(keys) is None

    @pytest.mark.asyncio
    async def test_multiple_keys_with_misses(self, driver, memory_store):
        await memory_store.insert("a", 1)

        result = await driver.get(["a", "b"])

        assert isinstance(result, BatchGetResult)
        assert result.values == [1]
        assert result.misses == ["b"]
        assert result.errors is None

    @pytest.mark.asyncio
    async def test_driver_default_hides_misses(self, memory_store):
        driver = Driver.create(memory_store, missing=False)

        result = await driver.get(["a", "b"])

        assert result.misses is None

    @pytest.mark.asyncio
    async def test_call_can_show_misses(self, memory_store):
        driver = Driver.create(memory_store, missing=False)

        result = await driver.get(["a"], {"missing": True})

        assert result.misses == ["a"]

    @pytest.mark.asyncio
    async def test_call_can_hide_misses(self, driver):
        result = await driver.get(["a"], {"missing": False})

        assert result.misses is None


class TestDriverWrites:
    @pytest.mark.asyncio
    async def test_insert_upsert_remove(self, driver, memory_store):
        await driver.insert("a", 1)
        await driver.upsert("a", 2)
        assert (await memory_store.get("a")).value == 2

        await driver.remove("a")
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_remove_missing_is_not_an_error(self, driver):
        assert await driver.remove("missing") is None

    @pytest.mark.asyncio
    async def test_get_and_lock_missing_is_none(self, driver):
        assert await driver.get_and_lock("missing") is None

    @pytest.mark.asyncio
    async def test_per_call_retry_options(self, mock_store, temporary_error_factory):
        mock_store.insert.side_effect = [temporary_error_factory(), None]
        driver = Driver.create(mock_store)

        await driver.insert(
            "a", 1, {"retry_temporary_errors": True, "temp_retry_interval": 0}
        )

        assert mock_store.insert.await_count == 2

    @pytest.mark.asyncio
    async def test_store_options_are_forwarded(self, mock_store):
        driver = Driver.create(mock_store)

        await driver.upsert("a", 1, {"expiry": 30, "temp_retry_times": 2})

        mock_store.upsert.assert_awaited_once_with("a", 1, expiry=30)


class TestDriverAtomic:
    @pytest.mark.asyncio
    async def test_atomic_creates_document(self, driver, memory_store):
        await driver.atomic(
            "a", lambda doc: {"action": OPERATIONS.UPSERT, "value": doc or {"count": 0}}
        )

        assert (await memory_store.get("a")).value == {"count": 0}

    @pytest.mark.asyncio
    async def test_atomic_clears_logging_context(self, driver):
        await driver.atomic("a", lambda doc: {"action": OPERATIONS.NOOP, "value": doc})

        assert "correlation_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_save_options_reach_the_write(self, mock_store, not_found_error_factory):
        mock_store.get_and_lock.side_effect = not_found_error_factory()
        driver = Driver.create(mock_store, save_options={"expiry": 10})

        await driver.atomic(
            "a",
            lambda doc: {"action": OPERATIONS.UPSERT, "value": 1},
            {"save_options": {"expiry": 20}, "lock_time": 3},
        )

        mock_store.get_and_lock.assert_awaited_once_with("a", lock_time=3)
        mock_store.insert.assert_awaited_once_with("a", 1, expiry=20)


class TestServerVersion:
    @pytest.mark.asyncio
    async def test_returns_lowest_version(self, memory_store, node_data_factory):
        cluster = MagicMock()
        cluster.get_node_data.return_value = OperationResult.success(
            data=node_data_factory(["7.2.0-5325-enterprise", "7.1.4-3601-enterprise"])
        )
        driver = Driver(memory_store, cluster_client=cluster)

        assert await driver.get_server_version() == "7.1.4"

    @pytest.mark.asyncio
    async def test_request_failure(self, memory_store):
        cluster = MagicMock()
        cluster.get_node_data.return_value = OperationResult.transient_error(
            "Request timeout after 10s", error_code="TIMEOUT"
        )
        driver = Driver(memory_store, cluster_client=cluster)

        with pytest.raises(DriverError, match="timeout"):
            await driver.get_server_version()

    @pytest.mark.asyncio
    async def test_no_node_data(self, memory_store):
        cluster = MagicMock()
        cluster.get_node_data.return_value = OperationResult.success(data={"nodes": []})
        driver = Driver(memory_store, cluster_client=cluster)

        with pytest.raises(DriverError, match="No server node data"):
            await driver.get_server_version()

    @pytest.mark.asyncio
    async def test_no_cluster_client(self, driver):
        with pytest.raises(DriverError):
            await driver.get_server_version()


class TestPassthroughs:
    @pytest.mark.asyncio
    async def test_async_passthrough(self, driver, memory_store):
        inserted = await memory_store.insert("a", 1)

        await driver.replace("a", 2, cas=inserted.cas)

        assert (await memory_store.get("a")).value == 2

    @pytest.mark.asyncio
    async def test_unlock_passthrough(self, driver):
        await driver.insert("a", 1)
        locked = await driver.get_and_lock("a")

        await driver.unlock("a", locked.cas)

        assert (await driver.get("a")).cas == locked.cas

    @pytest.mark.asyncio
    async def test_sync_passthrough(self, driver, memory_store):
        await memory_store.insert("a", 1)

        result = driver.touch("a", 30)

        assert result.cas is not None

    def test_sync_passthrough_is_store_method(self, driver, memory_store):
        assert driver.disconnect == memory_store.disconnect

    def test_unsupported_passthrough(self, driver):
        with pytest.raises(AttributeError, match="append"):
            driver.append

    @pytest.mark.asyncio
    async def test_passthrough_errors_are_not_suppressed(self, driver):
        with pytest.raises(StoreError):
            await driver.replace("missing", 1)

    def test_undeclared_store_methods_are_not_exposed(self, driver):
        assert not hasattr(driver, "_live_entry")
