"""Switchyard: method and path routing for ASGI applications.

Routes are declared with composable path patterns; each request is
dispatched to at most one handler, after the router-wide middleware.

Basic usage::

    from switchyard import App, Router, end, lit, str_param

    router = Router()

    @router.get(lit("users").then(str_param("id")).then(end))
    def show_user(request):
        return f"Hello, {request.params['id']}!"

    app = App()
    app.mount(router)
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "Match",
    "Method",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "NotImplementedMethod",
    "Redirect",
    "Request",
    "Response",
    "Router",
    "RouterConfig",
    "SwitchyardError",
    "end",
    "float_param",
    "int_param",
    "lit",
    "param",
    "path_param",
    "pattern",
    "str_param",
]

_ROUTING_NAMES = frozenset(
    {
        "Match",
        "Method",
        "Router",
        "end",
        "float_param",
        "int_param",
        "lit",
        "param",
        "path_param",
        "pattern",
        "str_param",
    }
)

_ERROR_NAMES = frozenset(
    {
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "NotImplementedMethod",
        "SwitchyardError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "App":
        from switchyard.app import App

        return App

    if name in ("AppConfig", "RouterConfig"):
        from switchyard import config as _config

        return getattr(_config, name)

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from switchyard.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from switchyard.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in _ROUTING_NAMES:
        from switchyard import routing as _routing

        return getattr(_routing, name)

    if name in _ERROR_NAMES:
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
