"""ASGI handler: translates ASGI scope/messages to switchyard types.

The only component that touches raw HTTP ASGI messages directly.
Converts the scope to a Request, runs the middleware pipeline, maps
errors to responses, and sends the Response back through ASGI send().
"""

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import ErrorHandler
from switchyard.errors import HTTPError, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.compose import compose
from switchyard.middleware.protocol import Middleware
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.sender import send_response


async def _not_found(request: Request) -> Response:
    """End of the pipeline: nothing answered the request."""
    raise NotFound(f"No route matches {request.method} {request.path!r}")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    middleware: tuple[Middleware, ...],
    error_handlers: dict[int | type, ErrorHandler],
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await compose(middleware)(request, _not_found)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    await send_response(response, send, head=request.method == "HEAD")
