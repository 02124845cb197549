"""Value types exchanged between the driver and the store.

All of these are ephemeral: they live for the duration of a single call (or a
single atomic attempt) and are never mutated after creation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Union


class OPERATIONS(str, Enum):
    """Actions a transform can request from `Driver.atomic`.

    Attributes:
        UPSERT: Write the returned value back to the document
        REMOVE: Delete the document
        NOOP: Leave the document untouched and return the value
    """

    UPSERT = "upsert"
    REMOVE = "remove"
    NOOP = "noop"


def has_body(value: Any) -> bool:
    """Whether a transform value counts as a document body.

    None, False, zero, NaN and the empty string do not; anything else does,
    including empty mappings and lists.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


@dataclass(frozen=True)
class DocumentHandle:
    """A retrieved document and the CAS token it was read with.

    The token is opaque: it is only ever compared by the store or forwarded
    with a paired write.
    """

    value: Any
    cas: Any = None


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a successful write, remove or unlock."""

    cas: Any = None


@dataclass(frozen=True)
class MultiGetEntry:
    """Raw per-key entry returned by a store's `get_multi`."""

    value: Any = None
    cas: Any = None
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class OperationDirective:
    """What a transform asks the atomic engine to do with the document.

    Attributes:
        action: One of `OPERATIONS`
        value: New document body (ignored for `REMOVE`)
    """

    action: Union[OPERATIONS, str]
    value: Any = None

    @classmethod
    def coerce(cls, raw: Any) -> "OperationDirective":
        """Accept either a directive or a mapping with `action`/`value` keys."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Mapping):
            return cls(action=raw.get("action"), value=raw.get("value"))
        raise TypeError(
            f"transform must return an OperationDirective or a mapping, got {type(raw).__name__}"
        )

    @property
    def is_noop(self) -> bool:
        return self.action == OPERATIONS.NOOP

    @property
    def is_upsert(self) -> bool:
        return self.action == OPERATIONS.UPSERT and has_body(self.value)


@dataclass
class BatchGetResult:
    """Partitioned response of a multi-key get.

    Attributes:
        found: Documents with a value, in request-key order
        misses: Keys the store reported as not found. `None` when the caller
            asked not to see them.
        errors: Genuine per-key errors, or `None` when there were none
    """

    found: List[DocumentHandle] = field(default_factory=list)
    misses: Optional[List[str]] = field(default_factory=list)
    errors: Optional[List[BaseException]] = None

    @property
    def is_success(self) -> bool:
        return not self.errors

    @property
    def values(self) -> List[Any]:
        return [doc.value for doc in self.found]
