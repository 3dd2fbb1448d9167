"""HTTP methods known to the router."""

from enum import StrEnum


class Method(StrEnum):
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"


# One parser slot per entry, in the order used for the Allow header.
# OPTIONS has no slot: it is answered from the other slots.
ROUTABLE_METHODS: tuple[Method, ...] = (
    Method.DELETE,
    Method.GET,
    Method.HEAD,
    Method.PATCH,
    Method.POST,
    Method.PUT,
)

# Methods a route can be registered under directly. HEAD comes with GET.
REGISTRABLE_METHODS: tuple[Method, ...] = (
    Method.DELETE,
    Method.GET,
    Method.PATCH,
    Method.POST,
    Method.PUT,
)


def parse_method(token: str) -> Method | None:
    """Return the ``Method`` for *token*, or ``None`` if it is not one.

    Matching is exact: HTTP method tokens are case-sensitive.
    """
    try:
        return Method(token)
    except ValueError:
        return None
