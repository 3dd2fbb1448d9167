"""Immutable HTTP request.

Frozen metadata with async body access. Route parameters are attached
by producing a new request with ``with_params()``, never by mutation.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from switchyard._internal.asgi import Receive, Scope


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``params`` holds the values extracted by the pattern that matched
    this request. Its shape belongs to that pattern, so only the handler
    registered alongside the pattern should rely on it; everywhere else
    it is ``None`` or opaque.

    ``state`` is a per-request dict middleware can use to hand data to
    later stages. It is created fresh for every request and never shared.
    """

    method: str
    path: str
    headers: tuple[tuple[bytes, bytes], ...] = ()
    query_string: bytes = b""
    params: Any = None
    state: dict[str, Any] = field(default_factory=dict, compare=False)

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for header *name* (case-insensitive)."""
        key = name.lower().encode("latin-1")
        for raw_name, raw_value in self.headers:
            if raw_name.lower() == key:
                return raw_value.decode("latin-1")
        return default

    def with_params(self, params: Any) -> Request:
        """Return a copy of this request carrying matched route *params*.

        ``state`` and the body cache are shared with the copy, so data set
        by earlier middleware and an already-read body stay visible.
        """
        return replace(self, params=params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=tuple((bytes(k), bytes(v)) for k, v in scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            _receive=receive,
        )
