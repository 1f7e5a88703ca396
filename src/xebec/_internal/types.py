"""Shared type aliases used across xebec modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from xebec.context import RequestContext
    from xebec.http.response import Response

# Route handler: receives the request context, returns a Response
Handler: TypeAlias = Callable[["RequestContext"], "Response | Awaitable[Response]"]

# Route-level validation predicate
Validator: TypeAlias = Callable[["RequestContext"], "bool | Awaitable[bool]"]

# Error handler: receives (error, context) and returns a Response
ErrorHandler: TypeAlias = Callable[[Exception, "RequestContext"], Any]
