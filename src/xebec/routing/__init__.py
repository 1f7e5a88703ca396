"""Routing — path templates, routes, and the per-method route table.

Routes are registered during setup and frozen before serving begins.
"""

from xebec.routing.pattern import WILDCARD, CompiledPattern, compile_pattern
from xebec.routing.route import Route, RouteMatch, RouteOptions
from xebec.routing.table import RouteTable, parse_method

__all__ = [
    "WILDCARD",
    "CompiledPattern",
    "Route",
    "RouteMatch",
    "RouteOptions",
    "RouteTable",
    "compile_pattern",
    "parse_method",
]
