"""Invoke helpers: call sync or async handlers uniformly.

Route handlers, error handlers, and lifespan hooks can be ``def`` or
``async def``. This module keeps the sync/async check in one place.

Usage::

    from switchyard._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import inspect
from collections.abc import Callable
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def positional_arity(func: Callable[..., Any]) -> int:
    """Count the positional parameters *func* accepts.

    ``*args`` counts as unbounded and is reported as a large number so
    callers can simply compare against the number of arguments they have.
    """
    count = 0
    for param in inspect.signature(func).parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 1 << 16
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count
