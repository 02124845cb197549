"""Multi-key get reconciliation.

Turns the raw per-key response of a store's `get_multi` into found
documents, missing keys and genuine errors.
"""

from typing import List, Mapping, Optional, Sequence

import structlog

from docstore.models import BatchGetResult, DocumentHandle, MultiGetEntry
from docstore.operations.classifiers import is_key_not_found

logger = structlog.get_logger()


def reconcile(
    keys: Sequence[str],
    raw_response: Mapping[str, Optional[MultiGetEntry]],
    return_misses: bool = True,
) -> BatchGetResult:
    """Partition a raw multi-get response, walking the keys in request order.

    Per key:
    1. Absent from the response, or a falsy entry: skipped entirely. This is
       a transport anomaly, not a miss.
    2. No error: appended to `found`, whatever the body (`{}` and `0` are
       stored documents too).
    3. Error classified as not found: appended to `misses`.
    4. Any other error: appended to `errors`.

    Args:
        keys: Requested keys
        raw_response: Mapping of key to MultiGetEntry as returned by the store
        return_misses: When False, `misses` is `None` in the result

    Returns:
        BatchGetResult. `errors` is `None` when no key produced an error.
    """
    found: List[DocumentHandle] = []
    misses: List[str] = []
    errors: List[BaseException] = []
    skipped = 0

    for key in keys:
        entry = raw_response.get(key)
        if not entry:
            skipped += 1
            continue

        if entry.error is None:
            found.append(DocumentHandle(value=entry.value, cas=entry.cas))
        elif is_key_not_found(entry.error):
            misses.append(key)
        else:
            errors.append(entry.error)

    logger.debug(
        "batch_get_reconciled",
        requested=len(keys),
        found=len(found),
        misses=len(misses),
        errors=len(errors),
        skipped=skipped,
    )

    return BatchGetResult(
        found=found,
        misses=misses if return_misses else None,
        errors=errors or None,
    )
