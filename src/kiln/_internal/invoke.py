"""Invoke helpers — call sync or async callables uniformly.

Compile hooks can be ``def`` or ``async def``. Any code that calls a
user-provided hook must handle both cases. This module provides a single
helper so the sync/async check lives in exactly one place.

Usage::

    from kiln._internal.invoke import invoke

    result = await invoke(hook, context)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync, returns immediately
        def stamp(ctx):
            log.info("compiling %s", ctx.name)

        # async, awaited
        async def notify(ctx):
            await bus.publish("compiled", ctx.name)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
