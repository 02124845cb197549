"""End-to-end behavior of the driver over the in-memory store."""

import asyncio
from typing import Any

import pytest

from docstore import (
    OPERATIONS,
    Driver,
    InMemoryDocumentStore,
    MutationResult,
    StoreError,
)
from docstore.errors import ErrorCode

pytestmark = pytest.mark.integration


class ConflictingStore(InMemoryDocumentStore):
    """Store that rejects every write as a CAS conflict."""

    def __init__(self):
        super().__init__()
        self.write_attempts = 0

    async def _conflict(self, key: str) -> Any:
        self.write_attempts += 1
        raise StoreError("cas mismatch", code=ErrorCode.KEY_ALREADY_EXISTS, key=key)

    async def insert(self, key, value, **options):
        await self._conflict(key)

    async def upsert(self, key, value, cas=None, **options):
        await self._conflict(key)


def append_marker(marker):
    def transform(doc):
        doc = doc or {"keys": []}
        return {"action": OPERATIONS.UPSERT, "value": {"keys": doc["keys"] + [marker]}}

    return transform


@pytest.fixture
def store():
    return InMemoryDocumentStore()


class TestDriverProperties:
    @pytest.mark.asyncio
    async def test_missing_key_yields_nothing(self, store):
        driver = Driver.create(store)

        assert await driver.get("absent") is None

    @pytest.mark.asyncio
    async def test_batch_partition(self, store):
        driver = Driver.create(store)
        await store.insert("k1", {"v": 1})
        await store.insert("k3", {"v": 3})
        keys = ["k1", "k2", "k3", "k4"]

        result = await driver.get(keys)

        assert sorted(result.misses) == ["k2", "k4"]
        assert result.errors is None
        assert len(result.found) == len(keys) - len(result.misses)

    @pytest.mark.asyncio
    async def test_missing_visibility(self, store):
        await store.insert("k1", 1)

        shown = await Driver.create(store).get(["k1", "k2"])
        hidden = await Driver.create(store, missing=False).get(["k1", "k2"])

        assert shown.misses == ["k2"]
        assert hidden.misses is None

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, store):
        driver = Driver.create(store)

        assert await driver.remove("absent") is None

    @pytest.mark.asyncio
    async def test_atomic_create_if_absent(self, store):
        driver = Driver.create(store)

        await driver.atomic(
            "new", lambda doc: {"action": OPERATIONS.UPSERT, "value": doc or {"count": 0}}
        )

        assert (await driver.get("new")).value == {"count": 0}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("atomic_lock", [True, False])
    async def test_concurrent_atomic_calls_lose_no_update(self, store, atomic_lock):
        driver = Driver.create(store, atomic_lock=atomic_lock)

        await asyncio.gather(
            driver.atomic("k", append_marker("data1")),
            driver.atomic("k", append_marker("data2")),
        )

        assert sorted((await driver.get("k")).value["keys"]) == ["data1", "data2"]

    @pytest.mark.asyncio
    async def test_atomic_exhausts_retries_on_conflict(self):
        store = ConflictingStore()
        driver = Driver.create(store, atomic_retry_times=3)

        with pytest.raises(StoreError) as exc_info:
            await driver.atomic("k", append_marker("x"))

        assert exc_info.value.code == ErrorCode.KEY_ALREADY_EXISTS
        assert store.write_attempts == 3

    @pytest.mark.asyncio
    async def test_noop_leaves_document_unchanged(self, store):
        driver = Driver.create(store)
        await store.insert("k", {"v": 1})
        before = await store.get("k")

        result = await driver.atomic(
            "k", lambda doc: {"action": OPERATIONS.NOOP, "value": "X"}
        )

        assert result == "X"
        after = await store.get("k")
        assert after.value == before.value

    @pytest.mark.asyncio
    async def test_atomic_remove(self, store):
        driver = Driver.create(store)
        await store.insert("k", {"v": 1})

        result = await driver.atomic("k", lambda doc: {"action": OPERATIONS.REMOVE})

        assert isinstance(result, MutationResult)
        assert await driver.get("k") is None

    @pytest.mark.asyncio
    async def test_atomic_counter_under_contention(self, store):
        driver = Driver.create(store, atomic_lock=False, atomic_retry_times=20)

        def bump(doc):
            count = (doc or {"count": 0})["count"]
            return {"action": OPERATIONS.UPSERT, "value": {"count": count + 1}}

        await asyncio.gather(*(driver.atomic("counter", bump) for _ in range(5)))

        assert (await driver.get("counter")).value == {"count": 5}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("atomic_lock", [True, False])
    async def test_atomic_upsert_of_empty_body_keeps_document(self, store, atomic_lock):
        driver = Driver.create(store, atomic_lock=atomic_lock)
        await store.insert("k", {"a": 1})

        await driver.atomic("k", lambda doc: {"action": OPERATIONS.UPSERT, "value": {}})

        assert (await driver.get("k")).value == {}

    @pytest.mark.asyncio
    async def test_batch_get_returns_empty_documents(self, store):
        driver = Driver.create(store)
        await store.insert("empty", {})
        await store.insert("zero", 0)

        result = await driver.get(["empty", "zero", "absent"])

        assert result.values == [{}, 0]
        assert result.misses == ["absent"]
        assert result.errors is None
