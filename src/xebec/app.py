"""Xebec application class.

Mutable during setup (routes, middleware, mounts).
Frozen at runtime when ``dispatch()`` or ``__call__()`` is first invoked.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from http import HTTPMethod
from typing import Any, overload

from xebec._internal.asgi import Receive, Scope, Send
from xebec._internal.types import Handler, Validator
from xebec.config import ServerOptions
from xebec.errors import ConfigurationError
from xebec.http.request import Request
from xebec.http.response import Response
from xebec.middleware.protocol import Middleware
from xebec.routing.route import Route, RouteOptions
from xebec.routing.table import RouteTable
from xebec.server.dispatch import Dispatcher
from xebec.server.handler import handle_request
from xebec.server.mount import Mount

type _Decorator = Callable[[Handler], Handler]


class App:
    """The xebec application.

    Register middleware and routes, mount child apps, then serve through
    ``dispatch()`` or as an ASGI app::

        app = App()

        @app.get("/user/:id")
        def show_user(ctx):
            return {"id": ctx.params["id"]}

        app.post("/submit", submit, parse_json=True)
        app.mount("/admin", admin_app)

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the dispatcher, even when several workers receive
        their first request concurrently. After freezing, dispatch only
        reads shared state.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_table",
        "config",
    )

    def __init__(self, options: ServerOptions | None = None) -> None:
        self.config: ServerOptions = options or ServerOptions()
        self._table = RouteTable()
        self._middleware: list[Middleware] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._dispatcher: Dispatcher | None = None

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "setup"
        return f"<App routes={len(self._table.routes)} middleware={len(self._middleware)} {state}>"

    # -- Middleware --

    def use(self, middleware: Middleware) -> Middleware:
        """Append *middleware* to the global chain.

        Returns the middleware unchanged, so ``use`` also works as a
        decorator.
        """
        self._check_not_frozen()
        if not callable(middleware):
            msg = f"Middleware must be callable, got {type(middleware).__name__}."
            raise ConfigurationError(msg)
        self._middleware.append(middleware)
        return middleware

    def mount(self, prefix: str, child: App) -> Mount:
        """Serve *child* under *prefix*.

        Adds a ``Mount`` to the global chain at this point in the
        middleware order. The child freezes on its own first request.
        """
        if child is self:
            msg = "An app cannot be mounted on itself."
            raise ConfigurationError(msg)
        mount = Mount(prefix, child)
        self.use(mount)
        return mount

    # -- Route registration --

    @overload
    def route(
        self,
        method: str | HTTPMethod,
        path: str,
        handler: None = None,
        *,
        middleware: Iterable[Middleware] = (),
        parse_json: bool = False,
        parse_urlencoded: bool = False,
        validate: Validator | None = None,
    ) -> _Decorator: ...

    @overload
    def route(
        self,
        method: str | HTTPMethod,
        path: str,
        handler: Handler,
        *,
        middleware: Iterable[Middleware] = (),
        parse_json: bool = False,
        parse_urlencoded: bool = False,
        validate: Validator | None = None,
    ) -> Handler: ...

    def route(
        self,
        method: str | HTTPMethod,
        path: str,
        handler: Handler | None = None,
        *,
        middleware: Iterable[Middleware] = (),
        parse_json: bool = False,
        parse_urlencoded: bool = False,
        validate: Validator | None = None,
    ) -> Handler | _Decorator:
        """Register *handler* for *method* and *path*.

        Without *handler*, returns a decorator that registers the
        decorated function.

        Args:
            method: HTTP verb, case-insensitive.
            path: Route pattern. ``:name`` captures one segment; the whole
                pattern ``*`` sets the method's wildcard handler.
            middleware: Route-local middleware, run inside the global chain.
            parse_json: Decode a JSON body into ``ctx.body``.
            parse_urlencoded: Decode a form-encoded body into ``ctx.body``.
            validate: Predicate called with the context; falsy answers 400.
        """
        options = RouteOptions(
            parse_json=parse_json,
            parse_urlencoded=parse_urlencoded,
            validate=validate,
        )
        local = tuple(middleware)

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._table.register(method, path, func, local, options)
            return func

        if handler is None:
            return decorator
        return decorator(handler)

    def get(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register a GET route. See ``route``."""
        return self.route(HTTPMethod.GET, path, handler, **config)

    def post(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register a POST route. See ``route``."""
        return self.route(HTTPMethod.POST, path, handler, **config)

    def put(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register a PUT route. See ``route``."""
        return self.route(HTTPMethod.PUT, path, handler, **config)

    def delete(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register a DELETE route. See ``route``."""
        return self.route(HTTPMethod.DELETE, path, handler, **config)

    def patch(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register a PATCH route. See ``route``."""
        return self.route(HTTPMethod.PATCH, path, handler, **config)

    def options(self, path: str, handler: Handler | None = None, **config: Any) -> Any:
        """Register an OPTIONS route. See ``route``."""
        return self.route(HTTPMethod.OPTIONS, path, handler, **config)

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered concrete routes, grouped by method in registration order."""
        return tuple(self._table.routes)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """The global middleware chain, mounts included."""
        return tuple(self._middleware)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Serving --

    async def dispatch(self, request: Request) -> Response:
        """Produce the response for *request*.

        Never raises, except when a configured error handler itself
        raises.
        """
        return await self._ensure_frozen().dispatch(request)

    async def handle(self, request: Request) -> Response:
        """Like ``dispatch``, but faults escape unless an error handler is set.

        Used by ``Mount`` so a parent app handles a child's faults.
        """
        return await self._ensure_frozen().dispatch(request, propagate=True)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        await handle_request(scope, receive, send, dispatcher=self._ensure_frozen())

    # -- Internal --

    def _ensure_frozen(self) -> Dispatcher:
        """Thread-safe freeze with double-check locking."""
        if self._dispatcher is not None:
            return self._dispatcher
        with self._freeze_lock:
            if self._dispatcher is None:
                self._freeze()
            assert self._dispatcher is not None
            return self._dispatcher

    def _freeze(self) -> None:
        """Build the dispatcher. MUST only be called while holding _freeze_lock."""
        self._frozen = True
        self._table.freeze()
        self._dispatcher = Dispatcher(self._table, self._middleware, self.config)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and mounts before the first dispatch."
            )
            raise RuntimeError(msg)
