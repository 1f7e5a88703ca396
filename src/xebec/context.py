"""Per-request context.

``RequestContext`` is the mutable carrier that travels through the
middleware pipeline to the handler: the immutable ``Request``, a clone
whose body stays readable, the matched route parameters, the parsed
query, and an eagerly parsed body when the route asks for one.

``request_var`` publishes the context of the request being dispatched.
It is set by the dispatcher and reset after each request.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from xebec.http.headers import Headers
from xebec.http.request import Request

if TYPE_CHECKING:
    from xebec.http.forms import FormData


class RequestContext:
    """The per-request state handed to middleware and handlers.

    ``params`` and ``query`` start empty and are filled once, by the
    dispatcher, after route resolution. ``body`` is only populated when
    the matched route enables ``parse_json`` or ``parse_urlencoded``.
    ``state`` is free for middleware to share data with later layers.
    """

    __slots__ = ("body", "original", "params", "query", "request", "state")

    def __init__(self, request: Request) -> None:
        self.request: Request = request
        self.original: Request = request.clone()
        self.params: dict[str, str] = {}
        self.query: dict[str, str] = {}
        self.body: Any = None
        self.state: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<RequestContext {self.method} {self.url} params={self.params!r}>"

    # -- Request metadata --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def content_type(self) -> str | None:
        return self.request.content_type

    # -- Body access (reads go through the preserved clone) --

    async def read(self) -> bytes:
        """Raw request body bytes."""
        return await self.original.body()

    async def text(self) -> str:
        return await self.original.text()

    async def json(self) -> Any:
        return await self.original.json()

    async def form(self) -> FormData:
        return await self.original.form()


request_var: ContextVar[RequestContext] = ContextVar("xebec_request")
"""The context of the request being dispatched."""


def get_context() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a dispatch.
    """
    return request_var.get()
