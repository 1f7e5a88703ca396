"""Route, RouteOptions and RouteMatch frozen dataclasses."""

from dataclasses import dataclass, field
from http import HTTPMethod

from xebec._internal.types import Handler, Validator
from xebec.middleware.protocol import Middleware
from xebec.routing.pattern import CompiledPattern


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Per-route request preparation, applied after the route matches.

    ``parse_json`` and ``parse_urlencoded`` eagerly decode the body into
    ``ctx.body`` when the request's content type agrees. ``validate`` is
    called with the context; a falsy result rejects the request with 400.
    """

    parse_json: bool = False
    parse_urlencoded: bool = False
    validate: Validator | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Immutable once registered."""

    method: HTTPMethod
    pattern: str
    matcher: CompiledPattern
    handler: Handler
    middleware: tuple[Middleware, ...] = ()
    options: RouteOptions = field(default_factory=RouteOptions)

    @property
    def param_names(self) -> tuple[str, ...]:
        return self.matcher.param_names


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful resolution.

    ``route`` is ``None`` when the method's wildcard handler matched;
    wildcard matches carry no parameters, middleware, or options.
    """

    handler: Handler
    params: dict[str, str]
    route: Route | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.route is None
