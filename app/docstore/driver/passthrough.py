"""Explicit passthroughs from the driver to the store client.

Store operations the driver does not wrap are declared on the `Driver` class
one by one, each marked async or sync. Nothing is discovered reflectively:
an operation not declared on the class is not reachable through the driver.
"""

import inspect
from typing import Any


class _Passthrough:
    """Descriptor resolving a store method by the attribute name it is bound to."""

    def __init__(self) -> None:
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def _target(self, instance: Any):
        store = instance.store
        target = getattr(store, self.name, None)
        if not callable(target):
            raise AttributeError(
                f"{type(store).__name__} does not support '{self.name}'"
            )
        return target


class AsyncPassthrough(_Passthrough):
    """Forward to the store and always hand back an awaitable.

    No retry, not-found suppression or callback support is added.
    """

    def __get__(self, instance: Any, owner: type = None):
        if instance is None:
            return self
        target = self._target(instance)

        async def passthrough(*args: Any, **kwargs: Any) -> Any:
            result = target(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        passthrough.__name__ = self.name
        passthrough.__doc__ = getattr(target, "__doc__", None)
        return passthrough


class SyncPassthrough(_Passthrough):
    """Forward to the store unchanged; the store's method is returned as is."""

    def __get__(self, instance: Any, owner: type = None):
        if instance is None:
            return self
        return self._target(instance)
