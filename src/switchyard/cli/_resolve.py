"""Import resolution: resolves ``"module:attribute"`` strings to objects.

Shared by ``switchyard run`` and ``switchyard routes``.
"""

import importlib

from switchyard.app import App
from switchyard.routing.router import Router


def resolve_target(import_string: str, default_attr: str = "app") -> object:
    """Resolve an import string to the object it names.

    Accepts ``"module:attribute"``. When the attribute is omitted,
    *default_attr* is used (``"myapp"`` resolves to ``myapp.app``).

    Factory functions are supported: a callable that is not an App or a
    Router is called with no arguments and its result is returned.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If a factory function raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name or default_attr)

    if callable(obj) and not isinstance(obj, (App, Router)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    return obj


def resolve_app(import_string: str) -> App:
    """Resolve an import string to a switchyard ``App``."""
    obj = resolve_target(import_string)
    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a switchyard.App instance"
        raise TypeError(msg)
    return obj


def resolve_routers(import_string: str) -> tuple[Router, ...]:
    """Resolve an import string to the routers it names.

    A ``Router`` resolves to itself; an ``App`` to the routers mounted
    on it.
    """
    obj = resolve_target(import_string)
    if isinstance(obj, Router):
        return (obj,)
    if isinstance(obj, App):
        return obj.routers
    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a Router or App"
    raise TypeError(msg)
