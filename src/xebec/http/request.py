"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.

The body is read from the transport once and cached in a dict shared by
every clone of the request, so the engine, a middleware, a parent mount
and finally the handler can all read it.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from xebec._internal.asgi import Receive
from xebec.http.headers import Headers
from xebec.http.query import QueryParams

if TYPE_CHECKING:
    from xebec.http.forms import FormData


def _receive_bytes(body: bytes) -> Receive:
    """A receive callable that delivers *body* as a single message."""
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: transport receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for body and parsed form data, shared by clones
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int, ``None`` if absent or malformed."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def query_string(self) -> str:
        """The raw query string, without the leading ``?``."""
        return self.query.raw.decode("latin-1")

    @property
    def url(self) -> str:
        """Request target (path + query string)."""
        qs = self.query_string
        if qs:
            return f"{self.path}?{qs}"
        return self.path

    # -- Derived requests --

    def clone(self) -> Request:
        """Return a copy sharing the transport stream and body cache."""
        return replace(self)

    def with_path(self, path: str) -> Request:
        """Return a copy addressed to *path*, keeping query, headers and body."""
        return replace(self, path=path)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the transport stream is consumed once, then
        the same bytes are returned on subsequent calls and by clones.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self._read_transport()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks.

        Replays the cached body when it has already been read.
        """
        if "_body" in self._cache:
            if self._cache["_body"]:
                yield self._cache["_body"]
            return
        chunks: list[bytes] = []
        async for chunk in self._read_transport():
            chunks.append(chunk)
            yield chunk
        self._cache["_body"] = b"".join(chunks)

    async def _read_transport(self) -> AsyncGenerator[bytes]:
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Result is cached — the body is read and parsed once, then
        the same ``FormData`` is returned on subsequent calls.

        Raises:
            ValueError: If Content-Type is not a form encoding.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        from xebec.http.forms import parse_form_data

        ct = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        result = await parse_form_data(raw, ct)
        self._cache["_form"] = result
        return result

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a Request from a method, a URL and an in-memory body.

        *url* may be absolute (``http://host/path?q=1``) or a bare request
        target (``/path?q=1``); only its path and query are kept.
        """
        parts = urlsplit(url)
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            headers=Headers.build(headers),
            query=QueryParams(parts.query.encode("latin-1")),
            _receive=_receive_bytes(body),
        )

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(tuple(pair) for pair in scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
