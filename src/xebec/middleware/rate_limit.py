"""Fixed-window rate limiting middleware.

Counts requests per client inside a time window and answers 429 once a
client exceeds the limit. State lives in the middleware instance and is
guarded by its own lock, so one instance may serve concurrent requests.
"""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from xebec.context import RequestContext
from xebec.http.response import Response, text_response
from xebec.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for the rate limiter."""

    max_requests: int = 100
    window_seconds: float = 60.0
    key_header: str | None = "x-forwarded-for"


class RateLimitMiddleware:
    """In-memory, per-client fixed-window limiter."""

    __slots__ = ("_clock", "_config", "_lock", "_state")

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.Lock()
        # client key -> (count, window reset time)
        self._state: dict[str, tuple[int, float]] = {}

    def _identity_key(self, ctx: RequestContext) -> str:
        header_name = self._config.key_header
        if header_name:
            raw = ctx.headers.get(header_name)
            if raw:
                # Comma-separated proxy chain, first hop is the client
                forwarded = raw.split(",")[0].strip()
                if forwarded:
                    return forwarded
        if ctx.request.client:
            return ctx.request.client[0]
        return "unknown"

    def _check_and_update(self, key: str, now: float) -> tuple[bool, int]:
        cfg = self._config
        with self._lock:
            count, reset_at = self._state.get(key, (0, 0.0))
            if now >= reset_at:
                self._state[key] = (1, now + cfg.window_seconds)
                return True, 0
            if count >= cfg.max_requests:
                return False, max(1, math.ceil(reset_at - now))
            self._state[key] = (count + 1, reset_at)
            return True, 0

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        allowed, retry_after = self._check_and_update(self._identity_key(ctx), self._clock())
        if not allowed:
            return text_response(
                "Too Many Requests", 429, headers={"Retry-After": str(retry_after)}
            )
        return await next()
