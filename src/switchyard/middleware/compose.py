"""Chain an ordered list of middleware into a single middleware."""

from collections.abc import Iterable

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Middleware, Next


def compose(middleware: Iterable[Middleware]) -> Middleware:
    """Compose *middleware* into one middleware, first stage outermost.

    Each stage receives the request and a ``next`` that runs the rest of
    the chain. The ``next`` given to the composed middleware is what the
    last stage's ``next`` calls, so an unanswered chain falls through to
    the surrounding pipeline::

        chain = compose([log_requests, require_user, handler])
        response = await chain(request, downstream)

    Exceptions raised by any stage propagate to the caller unchanged.
    """
    stages = tuple(middleware)

    async def composed(request: Request, next: Next) -> Response:
        handler: Next = next
        for mw in reversed(stages):
            outer = handler

            async def make_next(req: Request, _mw: Middleware = mw, _next: Next = outer) -> Response:
                return await _mw(req, _next)

            handler = make_next
        return await handler(request)

    return composed
