"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: RequestContext, next: Next) -> Response

Built-in middleware:
    CORSMiddleware -- Cross-Origin Resource Sharing
    RateLimitMiddleware -- Fixed-window per-client request limiting
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, CSP, ...
"""

from xebec.middleware.builtin import CORSConfig, CORSMiddleware
from xebec.middleware.pipeline import Pipeline
from xebec.middleware.protocol import Middleware, Next
from xebec.middleware.rate_limit import RateLimitConfig, RateLimitMiddleware
from xebec.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "Middleware",
    "Next",
    "Pipeline",
    "RateLimitConfig",
    "RateLimitMiddleware",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
]
