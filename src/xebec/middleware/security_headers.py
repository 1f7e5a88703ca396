"""Security headers middleware.

Sets clickjacking, MIME-sniffing, XSS-filter, referrer and content
security headers on every response.
"""

from dataclasses import dataclass

from xebec.context import RequestContext
from xebec.http.response import Response
from xebec.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    Values are applied as-is; ``None`` leaves a header out.
    """

    x_content_type_options: str | None = "nosniff"
    x_frame_options: str | None = "DENY"
    x_xss_protection: str | None = "1; mode=block"
    referrer_policy: str | None = "strict-origin-when-cross-origin"
    content_security_policy: str | None = "default-src 'self'"
    strict_transport_security: str | None = None

    def items(self) -> list[tuple[str, str]]:
        pairs = [
            ("X-Content-Type-Options", self.x_content_type_options),
            ("X-Frame-Options", self.x_frame_options),
            ("X-XSS-Protection", self.x_xss_protection),
            ("Referrer-Policy", self.referrer_policy),
            ("Content-Security-Policy", self.content_security_policy),
            ("Strict-Transport-Security", self.strict_transport_security),
        ]
        return [(name, value) for name, value in pairs if value is not None]


class SecurityHeadersMiddleware:
    """Add security headers to every response, replacing existing values.

    Usage::

        from xebec.middleware import SecurityHeadersMiddleware

        app.use(SecurityHeadersMiddleware())

    Or with custom config::

        app.use(SecurityHeadersMiddleware(SecurityHeadersConfig(
            x_frame_options="SAMEORIGIN",
        )))
    """

    __slots__ = ("config",)

    def __init__(self, config: SecurityHeadersConfig | None = None) -> None:
        self.config = config or SecurityHeadersConfig()

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        response = await next()
        for name, value in self.config.items():
            response = response.without_header(name).with_header(name, value)
        return response
