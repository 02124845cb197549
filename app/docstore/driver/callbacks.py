"""Callback adapter for the driver's public coroutines.

The core only speaks one convention: coroutines that return a value or
raise. `supports_callback` layers the `callback(error, *results)` style on
top without touching the wrapped method.

Usage:
    result = await driver.get("doc::1")            # awaitable style

    def on_done(err, doc):
        ...

    driver.get("doc::1", callback=on_done)         # callback style
    driver.get("doc::1", on_done)                  # options omitted, shifted

In callback style the call schedules an asyncio Task on the running loop and
returns it; the outcome goes to the callback and is never raised.
"""

import asyncio
import functools
import inspect
from typing import Any, Callable, Optional, Set, Tuple

from docstore.logging import get_module_logger
from docstore.models import BatchGetResult

logger = get_module_logger()

Callback = Callable[..., Any]
ArgsAdapter = Callable[[Any], Tuple[Any, ...]]

# Strong references to in-flight callback tasks until they finish.
_pending: Set["asyncio.Task[Any]"] = set()


def default_callback_args(result: Any) -> Tuple[Any, ...]:
    return (None, result)


def get_callback_args(result: Any) -> Tuple[Any, ...]:
    """Map a get result onto `(error, doc)` or `(errors, found[, misses])`."""
    if isinstance(result, BatchGetResult):
        args: Tuple[Any, ...] = (result.errors, result.found)
        if result.misses is not None:
            args += (result.misses,)
        return args
    return (None, result)


async def _deliver(
    coro: Any, callback: Callback, to_args: ArgsAdapter, name: str
) -> None:
    try:
        result = await coro
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("callback_error_delivered", operation=name, error=str(exc))
        args: Tuple[Any, ...] = (exc,)
    else:
        args = to_args(result)

    try:
        callback(*args)
    except Exception as exc:  # pylint: disable=broad-except
        # The task is never awaited.
        logger.exception("callback_failed", operation=name, error=str(exc))


def supports_callback(to_args: Optional[ArgsAdapter] = None):
    """Decorate a coroutine method so it also accepts `callback=`.

    If the method's `options` argument receives a callable and no callback
    was given, it is treated as the callback and `options` becomes None.

    Args:
        to_args: Maps the coroutine's result to the callback arguments,
            error slot included. Defaults to `(None, result)`.
    """
    adapter = to_args or default_callback_args

    def decorator(method):
        signature = inspect.signature(method)

        @functools.wraps(method)
        def wrapper(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            callback = bound.arguments.get("callback")
            options = bound.arguments.get("options")

            if callback is None and callable(options):
                callback = options
                bound.arguments["options"] = None
            if "callback" in bound.arguments:
                bound.arguments["callback"] = None

            coro = method(*bound.args, **bound.kwargs)
            if callback is None:
                return coro

            delivery = _deliver(coro, callback, adapter, method.__name__)
            try:
                task = asyncio.create_task(delivery)
            except RuntimeError:
                # No running loop.
                delivery.close()
                coro.close()
                raise
            _pending.add(task)
            task.add_done_callback(_pending.discard)
            return task

        return wrapper

    return decorator
