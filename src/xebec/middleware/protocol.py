"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(ctx: RequestContext, next: Next) -> Response: ...

No base class required. Plain ``def`` middleware works too; the pipeline
awaits whatever is awaitable.

A middleware may pass through (``return await next()``), rewrite the
response ``next()`` returns, short-circuit by returning its own response
without calling ``next``, or raise. ``next`` may be called at most once.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from xebec.context import RequestContext
from xebec.http.response import Response

# The rest of the chain, as seen from one middleware
type Next = Callable[[], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for xebec middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: RequestContext, next: Next) -> Response:
            start = time.monotonic()
            response = await next()
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimit:
            async def __call__(self, ctx: RequestContext, next: Next) -> Response:
                ...
    """

    def __call__(self, ctx: RequestContext, next: Next) -> Response | Awaitable[Response]: ...
