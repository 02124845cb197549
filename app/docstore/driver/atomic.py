"""Atomic read-modify-write engine.

Each attempt runs the full cycle:

    READ (get or get_and_lock)
      -> TRANSFORM (user callback, synchronous)
      -> DISPATCH on the directive:
           NOOP            -> unlock if locked -> value
           UPSERT + value  -> CAS-guarded upsert if the document existed,
                              plain insert otherwise
           anything else   -> unlock if locked -> remove (CAS-guarded when
                              a token is available)

Any failure fails the whole attempt and the retry executor re-runs it from
READ, so the transform always sees a fresh snapshot: a CAS token from a stale
read is guaranteed to be rejected. Correctness across callers, in this
process or others, comes only from the store's CAS and locks; nothing here
serializes concurrent calls.

With locking, the upsert/insert itself clears the lock on the store side, so
no unlock is issued before it.
"""

from typing import Any, Callable, Dict, Optional

from docstore.configuration.options import DriverOptions
from docstore.driver.facade import WriteFacade
from docstore.driver.reads import get_document
from docstore.logging import get_module_logger
from docstore.models import DocumentHandle, OperationDirective
from docstore.resilience.retry import retry

logger = get_module_logger()

Transform = Callable[[Any], Any]


class AtomicEngine:
    """Runs CAS-guarded read-modify-write cycles against one store.

    Args:
        store: DocumentStore implementation, shared read-only
        facade: WriteFacade over the same store
    """

    def __init__(self, store: Any, facade: WriteFacade) -> None:
        self._store = store
        self._facade = facade

    async def run(
        self,
        key: str,
        transform: Transform,
        options: DriverOptions,
        read_options: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Apply `transform` to the document at `key`.

        Args:
            key: Document key
            transform: Called with the current value (None when absent);
                returns an OperationDirective or a mapping with
                `action`/`value`
            options: Resolved driver options (atomic_* and save_options)
            read_options: Extra options for the read step (e.g. lock_time)

        Returns:
            The directive's value for NOOP, otherwise the store's result of
            the final write or remove.

        Raises:
            Exception: The last attempt's error once `atomic_retry_times`
                attempts have failed.
        """
        read_options = dict(read_options or {})
        attempt_fn = self._attempt_locked if options.atomic_lock else self._attempt_unlocked
        attempts = 0

        async def attempt() -> Any:
            nonlocal attempts
            attempts += 1
            return await attempt_fn(key, transform, options, read_options, attempts)

        return await retry(options.atomic_retry(), attempt, operation_name="atomic")

    # -- steps -----------------------------------------------------------

    def _apply(self, transform: Transform, doc: Optional[DocumentHandle]) -> OperationDirective:
        return OperationDirective.coerce(transform(doc.value if doc else None))

    @staticmethod
    def _write_options(doc: Optional[DocumentHandle], options: DriverOptions) -> Dict[str, Any]:
        write_options: Dict[str, Any] = {"cas": doc.cas} if doc else {}
        write_options.update(options.save_options or {})
        return write_options

    async def _write(
        self,
        key: str,
        directive: OperationDirective,
        doc: Optional[DocumentHandle],
        options: DriverOptions,
    ) -> Any:
        write_options = self._write_options(doc, options)
        if doc:
            return await self._facade.upsert(
                key, directive.value, options, store_options=write_options
            )
        # Insert fails if a concurrent caller created the key meanwhile,
        # which sends this attempt back to READ.
        return await self._facade.insert(
            key, directive.value, options, store_options=write_options
        )

    async def _release(self, key: str, doc: DocumentHandle) -> None:
        try:
            await self._store.unlock(key, doc.cas)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("atomic_unlock_failed", key=key, error=str(exc))

    # -- attempts --------------------------------------------------------

    async def _attempt_locked(
        self,
        key: str,
        transform: Transform,
        options: DriverOptions,
        read_options: Dict[str, Any],
        attempt: int,
    ) -> Any:
        doc = await self._facade.get_and_lock(key, options, store_options=read_options)

        try:
            directive = self._apply(transform, doc)
        except Exception:
            if doc:
                await self._release(key, doc)
            raise

        logger.debug(
            "atomic_dispatch",
            key=key,
            action=str(directive.action),
            locked=True,
            existed=doc is not None,
            attempt=attempt,
        )

        if directive.is_noop:
            if doc:
                await self._store.unlock(key, doc.cas)
            return directive.value

        if directive.is_upsert:
            return await self._write(key, directive, doc, options)

        remove_options: Dict[str, Any] = {}
        if doc:
            unlocked = await self._store.unlock(key, doc.cas)
            if unlocked is not None and getattr(unlocked, "cas", None) is not None:
                remove_options["cas"] = unlocked.cas
        return await self._facade.remove(key, options, store_options=remove_options)

    async def _attempt_unlocked(
        self,
        key: str,
        transform: Transform,
        options: DriverOptions,
        read_options: Dict[str, Any],
        attempt: int,
    ) -> Any:
        doc = await get_document(self._store, key, **read_options)
        directive = self._apply(transform, doc)

        logger.debug(
            "atomic_dispatch",
            key=key,
            action=str(directive.action),
            locked=False,
            existed=doc is not None,
            attempt=attempt,
        )

        if directive.is_noop:
            return directive.value

        if directive.is_upsert:
            return await self._write(key, directive, doc, options)

        remove_options = {"cas": doc.cas} if doc else {}
        return await self._facade.remove(key, options, store_options=remove_options)
