"""Prefix mounting of child apps.

``Mount`` is an ordinary global middleware on the parent app, so it takes
part in the parent's onion ordering at the point ``mount()`` was called.
"""

from typing import Protocol

from xebec.context import RequestContext
from xebec.errors import HTTPError
from xebec.http.request import Request
from xebec.http.response import Response
from xebec.middleware.protocol import Next


class Mountable(Protocol):
    """Anything that can serve a request and let unhandled faults escape."""

    async def handle(self, request: Request) -> Response: ...


def normalize_prefix(prefix: str) -> str:
    """Ensure a leading ``/`` and drop trailing ones.

    The root prefix ``/`` normalises to ``""`` and matches every path.
    """
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix.rstrip("/")


class Mount:
    """Delegates prefixed paths to a child app.

    Paths starting with the prefix are rewritten with the prefix removed
    (an exact match becomes ``/``) and handed to the child with the same
    method, headers, query and body. A 404 from the child counts as no
    match and the parent's chain continues, whether the child returned
    it or raised an ``HTTPError`` with status 404. Any other response is
    returned as-is. Other faults the child does not handle itself
    propagate into the parent's error boundary.
    """

    __slots__ = ("_app", "_prefix")

    def __init__(self, prefix: str, app: Mountable) -> None:
        self._prefix = normalize_prefix(prefix)
        self._app = app

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def app(self) -> Mountable:
        return self._app

    def __repr__(self) -> str:
        return f"Mount({self._prefix or '/'!r}, {self._app!r})"

    def child_path(self, path: str) -> str | None:
        """The path the child sees, or ``None`` if *path* is outside the prefix."""
        if not path.startswith(self._prefix):
            return None
        rest = path[len(self._prefix) :]
        if not rest.startswith("/"):
            rest = "/" + rest
        return rest

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        child_path = self.child_path(ctx.path)
        if child_path is None:
            return await next()

        try:
            response = await self._app.handle(ctx.request.with_path(child_path))
            status = response.status
        except HTTPError as exc:
            if exc.status != 404:
                raise
            status = 404
        if status == 404:
            return await next()
        return response
