"""Invoke helpers — call sync or async callables uniformly.

Handlers, middleware, validators and error handlers can be ``def`` or
``async def``. Any code that calls user-provided code goes through
``invoke`` so the sync/async check lives in exactly one place.

Usage::

    from xebec._internal.invoke import invoke

    result = await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
