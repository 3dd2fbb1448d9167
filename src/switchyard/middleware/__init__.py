"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

``compose`` sequences several of them into one.
"""

from switchyard.middleware.compose import compose
from switchyard.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next", "compose"]
