"""Public driver.

`Driver` wraps a document store client with not-found normalization,
multi-key gets with miss tracking, temporary-error backoff and the
CAS-based `atomic` read-modify-write primitive.

Usage:
    from docstore import Driver, OPERATIONS, InMemoryDocumentStore

    driver = Driver.create(InMemoryDocumentStore(), missing=False)

    def bump(doc):
        doc = doc or {"count": 0}
        return {"action": OPERATIONS.UPSERT, "value": {"count": doc["count"] + 1}}

    await driver.atomic("counter::1", bump)
    handle = await driver.get("counter::1")

Every wrapped coroutine also takes `callback=` (see `supports_callback`).
"""

import asyncio
from typing import Any, Mapping, Optional, Sequence, Union

from docstore.clients.cluster import ClusterInfoClient, lowest_node_version
from docstore.configuration import DriverOptions, DriverSettings, Settings
from docstore.driver.atomic import AtomicEngine, Transform
from docstore.driver.callbacks import get_callback_args, supports_callback
from docstore.driver.facade import WriteFacade
from docstore.driver.passthrough import AsyncPassthrough, SyncPassthrough
from docstore.driver.reads import get_document, get_documents
from docstore.errors import DriverError
from docstore.logging import bind_operation_context, get_module_logger
from docstore.models import OPERATIONS, BatchGetResult, DocumentHandle
from docstore.operations.classifiers import is_key_not_found, is_temporary_error

logger = get_module_logger()

Options = Optional[Mapping[str, Any]]


class Driver:
    """Resilience and convenience layer over a document store client.

    The store client is shared read-only by every call; concurrent calls on
    the same key are serialized only by the store's CAS and locks.

    Attributes:
        store: Underlying DocumentStore client
        options: Driver-wide options, the base every call's options layer on
    """

    OPERATIONS = OPERATIONS

    is_key_not_found = staticmethod(is_key_not_found)
    is_temporary_error = staticmethod(is_temporary_error)

    # Forwarded unchanged; awaitable.
    get_multi = AsyncPassthrough()
    replace = AsyncPassthrough()
    append = AsyncPassthrough()
    prepend = AsyncPassthrough()
    counter = AsyncPassthrough()
    get_and_touch = AsyncPassthrough()
    get_replica = AsyncPassthrough()
    unlock = AsyncPassthrough()

    # Forwarded unchanged; synchronous.
    disconnect = SyncPassthrough()
    invalidate_query_cache = SyncPassthrough()
    lookup_in = SyncPassthrough()
    manager = SyncPassthrough()
    mutate_in = SyncPassthrough()
    query = SyncPassthrough()
    set_transcoder = SyncPassthrough()
    touch = SyncPassthrough()

    def __init__(
        self,
        store: Any,
        options: Options = None,
        settings: Optional[DriverSettings] = None,
        cluster_client: Optional[ClusterInfoClient] = None,
    ) -> None:
        self.store = store
        self.options = DriverOptions.from_settings(settings, options)
        self._facade = WriteFacade(store)
        self._atomic = AtomicEngine(store, self._facade)
        self._cluster_client = cluster_client

        logger.debug(
            "driver_initialized",
            store=type(store).__name__,
            atomic_lock=self.options.atomic_lock,
            retry_temporary_errors=self.options.retry_temporary_errors,
        )

    @classmethod
    def create(cls, store: Any, **options: Any) -> "Driver":
        """Build a driver over `store` with driver-wide option overrides."""
        return cls(store, options=options)

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, store: Any = None
    ) -> "Driver":
        """Build a driver, its store and its cluster client from settings.

        Args:
            settings: Settings to use. Loaded from the environment if None.
            store: Store client to wrap. Built by the store factory if None.
        """
        if settings is None:
            from docstore.services.providers import get_settings

            settings = get_settings()

        if store is None:
            from docstore.clients.store.factory import create_document_store

            store = create_document_store(settings.store)

        cluster_client = None
        if settings.store.cluster_url:
            cluster_client = ClusterInfoClient(
                settings.store.cluster_url,
                settings.store.cluster_username,
                settings.store.cluster_password,
            )

        return cls(store, settings=settings.driver, cluster_client=cluster_client)

    def _resolve(self, options: Options):
        return self.options.merged(options)

    # -- reads -----------------------------------------------------------

    @supports_callback(get_callback_args)
    async def get(
        self,
        keys: Union[str, Sequence[str], None],
        options: Options = None,
        callback=None,
    ) -> Union[DocumentHandle, BatchGetResult, None]:
        """Read one document or many.

        Args:
            keys: A key, or a list/tuple of keys
            options: Per-call options (`missing`, store options)

        Returns:
            For a single key, the DocumentHandle or None when absent. For a
            list of keys, a BatchGetResult whose `misses` is None unless
            misses are visible for this call. None for empty keys.

        Raises:
            StoreError: Any error other than not-found (single key), or a
                failure of the whole multi-get
        """
        resolved, store_options = self._resolve(options)
        if not keys:
            return None

        if isinstance(keys, (list, tuple)):
            return await get_documents(
                self.store, keys, return_misses=resolved.missing
            )
        return await get_document(self.store, keys, **store_options)

    @supports_callback()
    async def get_and_lock(
        self, key: str, options: Options = None, callback=None
    ) -> Optional[DocumentHandle]:
        resolved, store_options = self._resolve(options)
        return await self._facade.get_and_lock(key, resolved, store_options)

    # -- writes ----------------------------------------------------------

    @supports_callback()
    async def remove(self, key: str, options: Options = None, callback=None) -> Any:
        resolved, store_options = self._resolve(options)
        return await self._facade.remove(key, resolved, store_options)

    @supports_callback()
    async def insert(
        self, key: str, value: Any, options: Options = None, callback=None
    ) -> Any:
        resolved, store_options = self._resolve(options)
        return await self._facade.insert(key, value, resolved, store_options)

    @supports_callback()
    async def upsert(
        self, key: str, value: Any, options: Options = None, callback=None
    ) -> Any:
        resolved, store_options = self._resolve(options)
        return await self._facade.upsert(key, value, resolved, store_options)

    @supports_callback()
    async def atomic(
        self,
        key: str,
        transform: Transform,
        options: Options = None,
        callback=None,
    ) -> Any:
        """Read-modify-write `key` through `transform`.

        `transform` receives the current value (None when the document does
        not exist) and returns an OperationDirective, or a mapping with
        `action` (one of OPERATIONS) and `value`.

        Args:
            key: Document key
            transform: Synchronous function of the current value
            options: Per-call options (`atomic_retry_times`,
                `atomic_retry_interval`, `atomic_lock`, `save_options`, and
                store options for the read such as `lock_time`)

        Returns:
            The NOOP value, or the store's result of the final write/remove.

        Raises:
            Exception: The last attempt's error once retries are exhausted
        """
        resolved, read_options = self._resolve(options)
        with bind_operation_context(operation="atomic", key=key):
            logger.debug(
                "atomic_started",
                atomic_lock=resolved.atomic_lock,
                max_attempts=resolved.atomic_retry_times,
            )
            return await self._atomic.run(key, transform, resolved, read_options)

    # -- cluster ---------------------------------------------------------

    @supports_callback()
    async def get_server_version(self, callback=None) -> str:
        """Return the lowest server version running in the cluster.

        Raises:
            DriverError: No cluster client configured, the request failed,
                or the response carried no node versions
        """
        if self._cluster_client is None:
            raise DriverError("No cluster management client configured")

        result = await asyncio.to_thread(self._cluster_client.get_node_data)
        if not result.is_success:
            raise DriverError(result.message)

        version = lowest_node_version(result.data)
        if version is None:
            raise DriverError("No server node data")
        return version

