"""Error handling policy for dispatched requests.

Maps the fixed outcomes (404, 413, 400) and faults raised by middleware
or handlers to Response objects, using the configured error handler or
JSON defaults.
"""

import logging

from xebec._internal.invoke import invoke
from xebec._internal.types import ErrorHandler
from xebec.config import ServerOptions
from xebec.context import RequestContext
from xebec.errors import HTTPError, NotFound, PayloadTooLarge, ValidationFailed
from xebec.http.response import Response, error_response, json_response
from xebec.server.negotiation import negotiate

logger = logging.getLogger("xebec.server")


def http_error_response(exc: HTTPError) -> Response:
    """JSON ``{"error": detail}`` carrying the error's status and headers."""
    response = error_response(exc.detail or f"Error {exc.status}", exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def not_found_response() -> Response:
    return http_error_response(NotFound())


def payload_too_large_response() -> Response:
    return http_error_response(PayloadTooLarge())


def validation_failed_response() -> Response:
    return http_error_response(ValidationFailed())


async def call_error_handler(
    handler: ErrorHandler,
    exc: Exception,
    ctx: RequestContext,
) -> Response:
    """Invoke a user error handler as ``handler(exc, ctx)``.

    Supports both sync and async handlers. Plain return values are
    negotiated like handler results. Whatever the handler raises
    propagates to the caller.
    """
    result = await invoke(handler, exc, ctx)
    return negotiate(result)


async def handle_fault(
    exc: Exception,
    ctx: RequestContext,
    options: ServerOptions,
) -> Response:
    """Turn a fault raised during the pipeline into a response."""
    if isinstance(exc, HTTPError):
        logger.debug("%d %s %s: %s", exc.status, ctx.method, ctx.path, exc.detail)
    else:
        logger.exception("500 %s %s", ctx.method, ctx.path, exc_info=exc)

    if options.error_handler is not None:
        return await call_error_handler(options.error_handler, exc, ctx)

    if isinstance(exc, HTTPError):
        return http_error_response(exc)

    body: dict[str, str] = {"error": "Internal Server Error"}
    if options.debug:
        body["detail"] = f"{type(exc).__name__}: {exc}"
    return json_response(body, status=500)
