"""Per-method route table with first-match-wins resolution.

Routes are registered during setup and frozen before serving begins.
For each HTTP method the table keeps an ordered list of concrete routes
and at most one wildcard handler, which only answers when no concrete
route for that method matches.
"""

import logging
from collections.abc import Iterable
from http import HTTPMethod

from xebec._internal.types import Handler
from xebec.errors import ConfigurationError
from xebec.middleware.protocol import Middleware
from xebec.routing.pattern import WILDCARD, compile_pattern
from xebec.routing.route import Route, RouteMatch, RouteOptions

logger = logging.getLogger("xebec.routing")


def parse_method(method: str | HTTPMethod) -> HTTPMethod:
    """Normalise a verb to ``HTTPMethod``.

    Raises ``ConfigurationError`` for verbs outside the enumeration.
    """
    if isinstance(method, HTTPMethod):
        return method
    try:
        return HTTPMethod(method.upper())
    except ValueError:
        msg = f"Unknown HTTP method {method!r}."
        raise ConfigurationError(msg) from None


class RouteTable:
    """Ordered route lists and wildcard slots, keyed by HTTP method.

    Usage::

        table = RouteTable()
        table.register("GET", "/users/:id", show_user)
        table.register("GET", "*", fallback)
        table.freeze()
        match = table.resolve("GET", "/users/42")
    """

    __slots__ = ("_frozen", "_routes", "_wildcards")

    def __init__(self) -> None:
        self._routes: dict[HTTPMethod, list[Route]] = {}
        self._wildcards: dict[HTTPMethod, Handler] = {}
        self._frozen = False

    def register(
        self,
        method: str | HTTPMethod,
        pattern: str,
        handler: Handler,
        middleware: Iterable[Middleware] = (),
        options: RouteOptions | None = None,
    ) -> Route | None:
        """Compile *pattern* and append a route for *method*.

        The pattern ``*`` fills the method's wildcard slot instead,
        replacing any earlier wildcard, and returns ``None``. Wildcards
        take no route middleware or options; passing either raises
        ``ConfigurationError``.
        """
        if self._frozen:
            msg = "Cannot add routes after the route table is frozen."
            raise RuntimeError(msg)

        verb = parse_method(method)
        matcher = compile_pattern(pattern)

        if pattern == WILDCARD:
            middleware = tuple(middleware)
            if middleware or (options is not None and options != RouteOptions()):
                msg = (
                    f"Wildcard route for {verb} cannot take middleware or route "
                    "options. Use global middleware instead."
                )
                raise ConfigurationError(msg)
            if verb in self._wildcards:
                logger.debug("Replacing wildcard handler for %s", verb)
            self._wildcards[verb] = handler
            return None

        route = Route(
            method=verb,
            pattern=pattern,
            matcher=matcher,
            handler=handler,
            middleware=tuple(middleware),
            options=options or RouteOptions(),
        )
        self._routes.setdefault(verb, []).append(route)
        logger.debug("Registered %s %s", verb, pattern)
        return route

    def freeze(self) -> None:
        """Reject further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, method: str, path: str) -> RouteMatch | None:
        """Find the handler for *method* and *path*.

        Concrete routes are tried in registration order and the first
        structural match wins. Otherwise the method's wildcard answers
        with empty params. Returns ``None`` if neither matches, including
        for verbs the table has never seen.
        """
        try:
            verb = HTTPMethod(method.upper())
        except ValueError:
            return None

        for route in self._routes.get(verb, ()):
            params = route.matcher.match(path)
            if params is not None:
                return RouteMatch(handler=route.handler, params=params, route=route)

        wildcard = self._wildcards.get(verb)
        if wildcard is not None:
            return RouteMatch(handler=wildcard, params={})
        return None

    @property
    def routes(self) -> list[Route]:
        """All concrete routes, grouped by method in registration order."""
        return [route for routes in self._routes.values() for route in routes]

    def wildcard(self, method: str | HTTPMethod) -> Handler | None:
        """The wildcard handler registered for *method*, if any."""
        return self._wildcards.get(parse_method(method))
