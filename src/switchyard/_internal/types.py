"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: ``(request)`` or ``(request, next)``, sync or async
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (request, error?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]

# Startup / shutdown hook: sync or async, no arguments
LifecycleHook: TypeAlias = Callable[[], Any]
