"""Not-found-aware reads.

A single-key get suppresses "key not found" and yields no document; a
multi-key get is reconciled into found documents, misses and errors.
"""

from typing import Any, Optional, Sequence

from docstore.logging import get_module_logger
from docstore.models import BatchGetResult, DocumentHandle
from docstore.operations.batch import reconcile
from docstore.operations.classifiers import is_key_not_found

logger = get_module_logger()


async def get_document(store: Any, key: str, **options: Any) -> Optional[DocumentHandle]:
    """Read one document, returning None when the key does not exist.

    Any error other than not-found propagates unchanged.
    """
    logger.debug("store_get", key=key)
    try:
        return await store.get(key, **options)
    except Exception as exc:  # pylint: disable=broad-except
        if is_key_not_found(exc):
            return None
        raise


async def get_documents(
    store: Any, keys: Sequence[str], return_misses: bool = True
) -> BatchGetResult:
    """Read many documents and partition the response.

    A failure of the whole `get_multi` call propagates; per-key failures are
    reported in the result's `errors`.
    """
    logger.debug("store_get_multi", keys=len(keys))
    raw_response = await store.get_multi(list(keys))
    return reconcile(keys, raw_response, return_misses=return_misses)
