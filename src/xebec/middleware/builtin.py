"""Built-in middleware: CORS.

Answers preflight requests and adds CORS headers to responses for
allowed origins.
"""

from collections.abc import Callable
from dataclasses import dataclass

from xebec.context import RequestContext
from xebec.http.response import Response
from xebec.middleware.protocol import Next

type OriginRule = str | tuple[str, ...] | Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    ``allow_origin`` is either a fixed value (``"*"`` or one origin), a
    tuple allow-list, or a predicate called with the request's origin.
    With ``None`` (the default) no origin is allowed::

        CORSConfig(
            allow_origin=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origin: OriginRule | None = None
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int | None = 600  # 10 minutes


class CORSMiddleware:
    """Cross-Origin Resource Sharing.

    Handles:
    - Preflight ``OPTIONS`` requests (returns 204 with CORS headers)
    - Simple and actual requests (adds CORS headers to the response)
    - Credential support (``Access-Control-Allow-Credentials``)

    Requests without an ``Origin`` header, or from an origin that is not
    allowed, pass through untouched.

    Usage::

        app.use(CORSMiddleware(CORSConfig(
            allow_origin=("https://example.com",),
            allow_methods=("GET", "POST", "PUT"),
            allow_headers=("Content-Type", "Authorization"),
        )))
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _allowed_origin(self, origin: str) -> str | None:
        """The ``Access-Control-Allow-Origin`` value for *origin*, if allowed."""
        rule = self.config.allow_origin
        if rule is None:
            return None
        if callable(rule):
            return origin if rule(origin) else None
        if isinstance(rule, tuple):
            if "*" in rule:
                return self._star(origin)
            return origin if origin in rule else None
        if rule == "*":
            return self._star(origin)
        return rule

    def _star(self, origin: str) -> str:
        # Browsers reject "*" together with credentials
        return origin if self.config.allow_credentials else "*"

    def _add_cors_headers(self, response: Response, allowed: str) -> Response:
        cfg = self.config
        response = response.without_header("Access-Control-Allow-Origin").with_header(
            "Access-Control-Allow-Origin", allowed
        )
        if allowed != "*":
            response = response.with_header("Vary", "Origin")
        if cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Credentials", "true")
        if cfg.expose_headers:
            response = response.with_header(
                "Access-Control-Expose-Headers", ", ".join(cfg.expose_headers)
            )
        return response

    def _preflight_response(self, allowed: str) -> Response:
        cfg = self.config
        response = self._add_cors_headers(Response(body="", status=204), allowed)
        if cfg.allow_methods:
            response = response.with_header(
                "Access-Control-Allow-Methods", ", ".join(cfg.allow_methods)
            )
        if cfg.allow_headers:
            response = response.with_header(
                "Access-Control-Allow-Headers", ", ".join(cfg.allow_headers)
            )
        if cfg.max_age is not None:
            response = response.with_header("Access-Control-Max-Age", str(cfg.max_age))
        return response

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        origin = ctx.headers.get("origin")
        if origin is None:
            return await next()

        allowed = self._allowed_origin(origin)
        if allowed is None:
            return await next()

        if ctx.method == "OPTIONS":
            return self._preflight_response(allowed)

        response = await next()
        return self._add_cors_headers(response, allowed)
