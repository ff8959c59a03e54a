"""Invoke helpers — call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``. The router calls them through
this module so the sync/async check lives in exactly one place.

Usage::

    from rtr._internal.invoke import invoke

    await invoke(handler, writer, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, threaded: bool = False) -> Any:
    """Call a handler and await the result if it's awaitable.

    With ``threaded=True``, plain (non-coroutine) handlers run in an
    anyio worker thread so they may block freely::

        def slow(w, r):
            time.sleep(1)  # does not stall the event loop
            w.write("done")
    """
    if threaded and not _is_async_callable(handler):
        result = await anyio.to_thread.run_sync(functools.partial(handler, *args))
    else:
        result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_async_callable(obj: Any) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or inspect.iscoroutinefunction(
        getattr(obj, "__call__", None)
    )
