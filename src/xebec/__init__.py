"""Xebec — request dispatch for ASGI applications.

Routes, onion-model middleware, and prefix-mounted child apps.

Basic usage::

    from xebec import App

    app = App()

    @app.get("/user/:id")
    def show_user(ctx):
        return {"id": ctx.params["id"]}

Serve ``app`` with any ASGI server, or call ``await app.dispatch(request)``
directly.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "HTTPError",
    "Middleware",
    "MiddlewareError",
    "Mount",
    "Next",
    "NotFound",
    "Request",
    "RequestContext",
    "Response",
    "ServerOptions",
    "XebecError",
    "error_response",
    "get_context",
    "json_response",
    "redirect",
    "text_response",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import xebec`` fast while providing a clean top-level API.
    """
    if name == "App":
        from xebec.app import App

        return App

    if name == "Mount":
        from xebec.server.mount import Mount

        return Mount

    if name == "ServerOptions":
        from xebec.config import ServerOptions

        return ServerOptions

    if name == "Request":
        from xebec.http.request import Request

        return Request

    if name in ("Response", "error_response", "json_response", "redirect", "text_response"):
        from xebec.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from xebec.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("RequestContext", "get_context"):
        from xebec import context as _ctx

        return getattr(_ctx, name)

    if name in ("ConfigurationError", "HTTPError", "MiddlewareError", "NotFound", "XebecError"):
        from xebec import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
