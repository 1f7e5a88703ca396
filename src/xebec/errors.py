"""Xebec exception hierarchy.

Shared across the route table, pipeline, dispatcher, and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class XebecError(Exception):
    """Base for all xebec-specific errors."""


class ConfigurationError(XebecError):
    """Raised when a route, mount, or option is invalid.

    Always raised at registration time, never while serving.
    """


class MiddlewareError(XebecError, RuntimeError):
    """Raised when a middleware misuses its ``next`` continuation."""


@dataclass(frozen=True, slots=True)
class HTTPError(XebecError):
    """An error that maps directly to an HTTP status code.

    Handlers and middleware may raise these. Without a configured error
    handler the dispatcher turns them into a JSON error response carrying
    this status, detail and headers.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — declared content length exceeds the configured maximum."""

    def __init__(self, detail: str = "Request entity too large") -> None:
        super().__init__(status=413, detail=detail)


class ValidationFailed(HTTPError):  # noqa: N818
    """400 — a route's ``validate`` predicate rejected the request."""

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status=400, detail=detail)
