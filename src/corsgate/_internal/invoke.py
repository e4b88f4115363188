"""Invoke helpers — call sync or async inner handlers uniformly.

Inner handlers can be ``def`` or ``async def``. Any code that calls a
user-provided handler must handle both cases. This module keeps the
sync/async check in exactly one place.

Plain functions run on a worker thread (``anyio.to_thread``) so a
blocking handler never stalls the event loop.

Usage::

    from corsgate._internal.invoke import invoke

    response = await invoke(handler, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


def is_async_callable(obj: Any) -> bool:
    """True for coroutine functions, partials of them and async ``__call__`` objects."""
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or inspect.iscoroutinefunction(
        getattr(obj, "__call__", None)
    )


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and return its result, awaiting it if necessary.

    Works with both sync and async callables::

        # async: awaited on the current event loop
        async def handler(request):
            return Response("ok")

        # sync: run on a worker thread, result returned
        def handler(request):
            return Response("ok")
    """
    if is_async_callable(handler):
        return await handler(*args, **kwargs)
    result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
