"""Request dispatch — from a Request to a Response.

The dispatcher is the error boundary of an app. Per request it:

1. rejects a declared Content-Length above ``max_body_size`` with 413,
   before any middleware runs;
2. builds the ``RequestContext`` and publishes it on ``request_var``;
3. runs the global middleware pipeline, whose terminal step resolves
   the route, applies the route's options, and runs the route's own
   middleware around the handler;
4. converts faults to responses through ``handle_fault``;
5. adds the configured default headers.

Nothing here is mutated after construction, so one dispatcher serves
any number of concurrent requests.
"""

import logging
import time
from collections.abc import Iterable
from contextvars import Token

from xebec._internal.invoke import invoke
from xebec._internal.types import Handler
from xebec.config import ServerOptions
from xebec.context import RequestContext, request_var
from xebec.http.request import Request
from xebec.http.response import Response
from xebec.middleware.pipeline import Pipeline
from xebec.middleware.protocol import Middleware
from xebec.routing.route import Route
from xebec.routing.table import RouteTable
from xebec.server.errors import (
    handle_fault,
    not_found_response,
    payload_too_large_response,
    validation_failed_response,
)
from xebec.server.negotiation import negotiate

logger = logging.getLogger("xebec.server")

_JSON = "application/json"
_URLENCODED = "application/x-www-form-urlencoded"


async def call_handler(handler: Handler, ctx: RequestContext) -> Response:
    """Invoke *handler* and negotiate its return value."""
    return negotiate(await invoke(handler, ctx))


class Dispatcher:
    """Runs requests through a frozen route table and middleware chain."""

    __slots__ = ("_options", "_pipeline", "_route_pipelines", "_table")

    def __init__(
        self,
        table: RouteTable,
        middleware: Iterable[Middleware],
        options: ServerOptions,
    ) -> None:
        self._table = table
        self._pipeline = Pipeline(middleware)
        self._options = options
        # One pipeline per route with local middleware, built up front
        self._route_pipelines: dict[int, Pipeline] = {
            id(route): Pipeline(route.middleware) for route in table.routes if route.middleware
        }

    @property
    def options(self) -> ServerOptions:
        return self._options

    async def dispatch(self, request: Request, *, propagate: bool = False) -> Response:
        """Produce the response for *request*.

        With ``propagate=False`` every fault becomes a response; only an
        exception raised by the error handler itself escapes. With
        ``propagate=True`` faults escape unless an error handler is
        configured, so a parent app can handle a mounted child's faults.
        """
        start = time.perf_counter()
        response = await self._dispatch(request, propagate=propagate)
        response = self._with_default_headers(response)
        if self._options.debug:
            elapsed = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %d %.1fms", request.method, request.url, response.status, elapsed
            )
        return response

    async def _dispatch(self, request: Request, *, propagate: bool) -> Response:
        length = request.content_length
        if length is not None and length > self._options.max_body_size:
            logger.debug(
                "413 %s %s: content-length %d exceeds %d",
                request.method,
                request.path,
                length,
                self._options.max_body_size,
            )
            return payload_too_large_response()

        ctx = RequestContext(request)
        token: Token[RequestContext] = request_var.set(ctx)
        try:
            return await self._pipeline.run(ctx, self._resolve)
        except Exception as exc:
            if propagate and self._options.error_handler is None:
                raise
            return await handle_fault(exc, ctx, self._options)
        finally:
            request_var.reset(token)

    async def _resolve(self, ctx: RequestContext) -> Response:
        """Terminal step of the global pipeline."""
        match = self._table.resolve(ctx.method, ctx.path)
        if match is None:
            logger.debug("404 %s %s", ctx.method, ctx.path)
            return not_found_response()

        ctx.params = match.params
        ctx.query = ctx.request.query.last_values()

        if match.route is None:
            return await call_handler(match.handler, ctx)
        return await self._run_route(match.route, ctx)

    async def _run_route(self, route: Route, ctx: RequestContext) -> Response:
        options = route.options
        content_type = ctx.content_type or ""

        if options.parse_json and _JSON in content_type:
            ctx.body = await ctx.json()
        if options.parse_urlencoded and _URLENCODED in content_type:
            ctx.body = (await ctx.form()).last_values()

        if options.validate is not None and not await invoke(options.validate, ctx):
            logger.debug("400 %s %s: validation failed", ctx.method, ctx.path)
            return validation_failed_response()

        pipeline = self._route_pipelines.get(id(route))
        if pipeline is None:
            return await call_handler(route.handler, ctx)

        async def terminal(inner: RequestContext) -> Response:
            return await call_handler(route.handler, inner)

        return await pipeline.run(ctx, terminal)

    def _with_default_headers(self, response: Response) -> Response:
        for name, value in self._options.default_headers.items():
            if not response.has_header(name):
                response = response.with_header(name, value)
        return response
