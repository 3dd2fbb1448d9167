"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
Route handlers registered on a ``Router`` are middleware too: the
matched handler is simply the last stage of the chain.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from switchyard.http.request import Request
from switchyard.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for switchyard middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimiter:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...

    A stage may call ``next`` to continue, return its own response to
    short-circuit, or raise.
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
