"""Routing: per-method parser slots built from composable path patterns.

Routes are registered during setup and frozen into an immutable route
table on the first request.
"""

from switchyard.routing.methods import Method, parse_method
from switchyard.routing.pattern import (
    Match,
    RoutePath,
    end,
    float_param,
    int_param,
    lit,
    param,
    path_param,
    pattern,
    str_param,
    zero,
)
from switchyard.routing.router import RouteInfo, Router, RouteTable, allowed_methods_for

__all__ = [
    "Match",
    "Method",
    "RouteInfo",
    "RoutePath",
    "RouteTable",
    "Router",
    "allowed_methods_for",
    "end",
    "float_param",
    "int_param",
    "lit",
    "param",
    "parse_method",
    "path_param",
    "pattern",
    "str_param",
    "zero",
]
