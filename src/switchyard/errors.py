"""Switchyard exception hierarchy.

Shared across Router, App, handler, and middleware so every module
raises and catches the same types.
"""

from collections.abc import Iterable
from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a router, pattern, or app is configured incorrectly.

    Typically surfaces while routes are being registered, before the
    first request is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by the allowed-methods resolver, middleware, or handlers. The
    ASGI handler catches these and dispatches to the matching
    ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing in the pipeline answered the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the path has routes, but not for this HTTP method.

    Carries an ``Allow`` header listing the methods that do match, in the
    order given (the router passes them in canonical order).
    """

    def __init__(self, allowed: Iterable[str], detail: str = "") -> None:
        allow_value = ", ".join(allowed)
        super().__init__(
            status=405,
            detail=detail or "Method Not Allowed",
            headers=(("Allow", allow_value),),
        )


class NotImplementedMethod(HTTPError):  # noqa: N818
    """501: the request used a method token the router does not implement."""

    def __init__(self, method: str, detail: str = "") -> None:
        super().__init__(
            status=501,
            detail=detail or f"Method {method!r} is not implemented",
        )
