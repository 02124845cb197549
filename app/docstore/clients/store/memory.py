"""In-memory document store.

Process-local implementation of `DocumentStore` with real CAS and lock
semantics. Every call yields to the event loop before touching state, so
concurrent tasks interleave at the same points they would against a remote
store. Suitable for development and tests; for multi-instance deployments
use the DynamoDB backend.
"""

import asyncio
import copy
import itertools
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from docstore.errors import ErrorCode, StoreError
from docstore.logging import get_module_logger
from docstore.models import DocumentHandle, MultiGetEntry, MutationResult

logger = get_module_logger()

# CAS reported to plain readers of a locked document; never matches a write.
LOCKED_CAS = -1


def _monotonic() -> float:
    return time.monotonic()


@dataclass
class _Entry:
    value: Any
    cas: int
    expires_at: Optional[float] = None
    lock_cas: Optional[int] = None
    lock_expires_at: Optional[float] = None


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore.

    Attributes:
        default_lock_time: Lock duration (seconds) when get_and_lock gets none
    """

    def __init__(self, default_lock_time: int = 15) -> None:
        self._documents: Dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._cas_counter = itertools.count(1)
        self._connected = True
        self.default_lock_time = default_lock_time

    # -- helpers ---------------------------------------------------------

    def _next_cas(self) -> int:
        return next(self._cas_counter)

    def _check_connected(self) -> None:
        if not self._connected:
            raise StoreError("store is disconnected")

    def _live_entry(self, key: str) -> Optional[_Entry]:
        """Return the entry for `key`, dropping expired documents and locks."""
        entry = self._documents.get(key)
        if entry is None:
            return None

        now = _monotonic()
        if entry.expires_at is not None and entry.expires_at <= now:
            del self._documents[key]
            return None
        if entry.lock_expires_at is not None and entry.lock_expires_at <= now:
            entry.lock_cas = None
            entry.lock_expires_at = None
        return entry

    @staticmethod
    def _not_found(key: str) -> StoreError:
        return StoreError("key not found", code=ErrorCode.KEY_NOT_FOUND, key=key)

    @staticmethod
    def _exists(key: str, message: str = "key already exists") -> StoreError:
        return StoreError(message, code=ErrorCode.KEY_ALREADY_EXISTS, key=key)

    @staticmethod
    def _locked(key: str) -> StoreError:
        return StoreError(
            "Temporary failure: key is locked",
            code=ErrorCode.TEMPORARY_FAILURE,
            key=key,
        )

    @staticmethod
    def _expiry(options: Dict[str, Any]) -> Optional[float]:
        expiry = options.get("expiry")
        if not expiry:
            return None
        return _monotonic() + float(expiry)

    def _check_write(self, key: str, entry: _Entry, cas: Any) -> None:
        """Raise unless a write carrying `cas` may replace `entry`."""
        if entry.lock_cas is not None:
            if cas is None:
                raise self._locked(key)
            if cas != entry.lock_cas:
                raise self._exists(key, "cas mismatch: key is locked")
            return
        if cas is not None and cas != entry.cas:
            raise self._exists(key, "cas mismatch")

    # -- reads -----------------------------------------------------------

    async def get(self, key: str, **options: Any) -> DocumentHandle:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            cas = LOCKED_CAS if entry.lock_cas is not None else entry.cas
            return DocumentHandle(value=copy.deepcopy(entry.value), cas=cas)

    async def get_and_lock(
        self, key: str, lock_time: Optional[int] = None, **options: Any
    ) -> DocumentHandle:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            if entry.lock_cas is not None:
                raise self._locked(key)

            entry.cas = self._next_cas()
            entry.lock_cas = entry.cas
            entry.lock_expires_at = _monotonic() + (
                lock_time or self.default_lock_time
            )
            logger.debug("document_locked", key=key, cas=entry.cas)
            return DocumentHandle(value=copy.deepcopy(entry.value), cas=entry.cas)

    async def get_multi(
        self, keys: Sequence[str], **options: Any
    ) -> Dict[str, MultiGetEntry]:
        await asyncio.sleep(0)
        response: Dict[str, MultiGetEntry] = {}
        with self._lock:
            self._check_connected()
            for key in keys:
                entry = self._live_entry(key)
                if entry is None:
                    response[key] = MultiGetEntry(error=self._not_found(key))
                    continue
                cas = LOCKED_CAS if entry.lock_cas is not None else entry.cas
                response[key] = MultiGetEntry(
                    value=copy.deepcopy(entry.value), cas=cas
                )
        return response

    # -- writes ----------------------------------------------------------

    async def insert(self, key: str, value: Any, **options: Any) -> MutationResult:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            if self._live_entry(key) is not None:
                raise self._exists(key)
            cas = self._next_cas()
            self._documents[key] = _Entry(
                value=copy.deepcopy(value), cas=cas, expires_at=self._expiry(options)
            )
            return MutationResult(cas=cas)

    async def upsert(
        self, key: str, value: Any, cas: Any = None, **options: Any
    ) -> MutationResult:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None and cas is not None:
                raise self._not_found(key)
            if entry is not None:
                self._check_write(key, entry, cas)

            new_cas = self._next_cas()
            self._documents[key] = _Entry(
                value=copy.deepcopy(value),
                cas=new_cas,
                expires_at=self._expiry(options),
            )
            return MutationResult(cas=new_cas)

    async def replace(
        self, key: str, value: Any, cas: Any = None, **options: Any
    ) -> MutationResult:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            self._check_write(key, entry, cas)

            new_cas = self._next_cas()
            self._documents[key] = _Entry(
                value=copy.deepcopy(value),
                cas=new_cas,
                expires_at=self._expiry(options),
            )
            return MutationResult(cas=new_cas)

    async def remove(self, key: str, cas: Any = None, **options: Any) -> MutationResult:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            self._check_write(key, entry, cas)
            del self._documents[key]
            return MutationResult(cas=self._next_cas())

    async def unlock(self, key: str, cas: Any) -> Optional[MutationResult]:
        await asyncio.sleep(0)
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            if entry.lock_cas is None:
                raise StoreError(
                    "Temporary failure: key is not locked",
                    code=ErrorCode.TEMPORARY_FAILURE,
                    key=key,
                )
            if cas != entry.lock_cas:
                raise self._exists(key, "cas mismatch: lock held with another cas")

            entry.lock_cas = None
            entry.lock_expires_at = None
            logger.debug("document_unlocked", key=key, cas=entry.cas)
            return MutationResult(cas=entry.cas)

    # -- synchronous administration ---------------------------------------

    def touch(self, key: str, expiry: int) -> MutationResult:
        """Reset a document's expiry (seconds; 0 removes the expiry)."""
        with self._lock:
            self._check_connected()
            entry = self._live_entry(key)
            if entry is None:
                raise self._not_found(key)
            entry.expires_at = self._expiry({"expiry": expiry})
            return MutationResult(cas=entry.cas)

    def disconnect(self) -> None:
        with self._lock:
            self._connected = False
        logger.info("in_memory_store_disconnected", documents=len(self._documents))

    def __len__(self) -> int:
        return len(self._documents)
