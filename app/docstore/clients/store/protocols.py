"""Document store client contract.

The driver treats the store as an external collaborator. Any object providing
these coroutines can be wrapped: the in-memory and DynamoDB backends in this
package, or an adapter over a vendor SDK.

Failures are raised as exceptions (normally `StoreError`) that the
classifiers in `docstore.operations.classifiers` can inspect.
"""

from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable

from docstore.models import DocumentHandle, MultiGetEntry, MutationResult


@runtime_checkable
class DocumentStore(Protocol):
    """Async key-value document store with CAS tokens and pessimistic locks.

    Methods:
        get: Read a document
        get_and_lock: Read a document and lock it for `lock_time` seconds
        get_multi: Read many documents, reporting per-key errors in-band
        insert: Create a document; fails if the key exists
        upsert: Create or replace a document, CAS-guarded when `cas` is given
        remove: Delete a document, CAS-guarded when `cas` is given
        unlock: Release a lock taken by get_and_lock
    """

    async def get(self, key: str, **options: Any) -> DocumentHandle:
        ...

    async def get_and_lock(
        self, key: str, lock_time: Optional[int] = None, **options: Any
    ) -> DocumentHandle:
        ...

    async def get_multi(
        self, keys: Sequence[str], **options: Any
    ) -> Dict[str, MultiGetEntry]:
        ...

    async def insert(self, key: str, value: Any, **options: Any) -> MutationResult:
        ...

    async def upsert(
        self, key: str, value: Any, cas: Any = None, **options: Any
    ) -> MutationResult:
        ...

    async def remove(self, key: str, cas: Any = None, **options: Any) -> MutationResult:
        ...

    async def unlock(self, key: str, cas: Any) -> Optional[MutationResult]:
        ...
