"""Onion-model middleware execution.

A ``Pipeline`` wraps an ordered middleware tuple around a terminal step.
The first middleware is outermost: it runs first on the way in and sees
the response last on the way out::

    mw1 -> mw2 -> terminal
    mw1 <- mw2 <- response

The dispatcher runs two pipelines per request: the app's global chain,
whose terminal resolves the route, and the matched route's own chain,
whose terminal is the handler.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from xebec._internal.invoke import invoke
from xebec.context import RequestContext
from xebec.errors import MiddlewareError
from xebec.http.response import Response
from xebec.middleware.protocol import Middleware
from xebec.server.negotiation import negotiate

type Terminal = Callable[[RequestContext], Response | Awaitable[Response]]


def _describe(middleware: Any) -> str:
    return getattr(middleware, "__qualname__", None) or type(middleware).__qualname__


class Pipeline:
    """An immutable middleware chain.

    Each layer's ``next`` continuation is guarded: calling it a second
    time raises ``MiddlewareError``. A layer returning ``None`` instead
    of a response raises ``MiddlewareError`` as well. Any other plain
    value is negotiated like a handler result.

    Example::

        pipeline = Pipeline([log_requests, require_auth])
        response = await pipeline.run(ctx, handler)
    """

    __slots__ = ("_middleware",)

    def __init__(self, middleware: Iterable[Middleware] = ()) -> None:
        self._middleware: tuple[Middleware, ...] = tuple(middleware)

    def __len__(self) -> int:
        return len(self._middleware)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return self._middleware

    async def run(self, ctx: RequestContext, terminal: Terminal) -> Response:
        """Run *ctx* through every layer, then *terminal*."""
        return await self._call(0, ctx, terminal)

    async def _call(self, index: int, ctx: RequestContext, terminal: Terminal) -> Response:
        if index == len(self._middleware):
            return await invoke(terminal, ctx)

        middleware = self._middleware[index]
        called = False

        async def next_() -> Response:
            nonlocal called
            if called:
                msg = f"Middleware {_describe(middleware)} called next() more than once."
                raise MiddlewareError(msg)
            called = True
            return await self._call(index + 1, ctx, terminal)

        response = await invoke(middleware, ctx, next_)
        if response is None:
            msg = f"Middleware {_describe(middleware)} returned None instead of a Response."
            raise MiddlewareError(msg)
        if not isinstance(response, Response):
            response = negotiate(response)
        return response
