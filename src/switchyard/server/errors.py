"""Error handling pipeline for switchyard requests.

Maps HTTPError exceptions and unexpected failures to appropriate
Response objects, using registered error handlers or plain defaults.
"""

import logging
from collections.abc import Callable
from typing import Any

from switchyard._internal.invoke import invoke, positional_arity
from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.server.negotiation import negotiate

logger = logging.getLogger("switchyard.server")

_PLAIN = "text/plain; charset=utf-8"


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    arity = positional_arity(handler)
    if arity >= 2:
        result = await invoke(handler, request, exc)
    elif arity == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)
    return negotiate(result)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers.

    The error's own headers (``Allow`` on a 405) are always kept, even
    when a custom handler builds the body.
    """
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Try exact exception type, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Preserve the HTTP status from the exception unless the handler
        # explicitly returned a Response with its own status
        if response.status == 200:
            response = response.with_status(exc.status)
    else:
        detail = exc.detail or f"Error {exc.status}"
        if debug and exc.detail:
            detail = f"{exc.status}: {exc.detail}"
        response = Response(body=detail, status=exc.status, content_type=_PLAIN)

    for name, value in exc.headers:
        if response.get_header(name) is None:
            response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        if response.status == 200:
            response = response.with_status(500)
        return response

    body = f"Internal Server Error\n\n{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return Response(body=body, status=500, content_type=_PLAIN)
