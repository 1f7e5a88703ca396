"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set status
    and headers. Each call returns a new ``Response``, so a middleware
    rewriting the response on its way out never mutates what an inner
    layer produced.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def without_header(self, name: str) -> Response:
        """Return a new Response with every *name* header removed."""
        lower = name.lower()
        return replace(self, headers=tuple(h for h in self.headers if h[0].lower() != lower))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Header access --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        lower = name.lower()
        if lower == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    def has_header(self, name: str) -> bool:
        """True if header *name* is set (case-insensitive)."""
        return self.header(name) is not None

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Body decoded as JSON."""
        return json_module.loads(self.body_bytes)


# -- Helpers --


def json_response(
    data: Any,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """A JSON response with ``Content-Type: application/json``."""
    return Response(
        body=json_module.dumps(data),
        status=status,
        content_type="application/json",
        headers=tuple((headers or {}).items()),
    )


def text_response(
    text: str,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """A plain-text response."""
    return Response(
        body=text,
        status=status,
        content_type="text/plain; charset=utf-8",
        headers=tuple((headers or {}).items()),
    )


def error_response(
    message: str,
    status: int = 500,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """A JSON error response: ``{"error": message}``."""
    return json_response({"error": message}, status, headers)


def redirect(url: str, status: int = 302) -> Response:
    """An empty response pointing the client at *url*."""
    return Response(body=b"", status=status, headers=(("Location", url),))
