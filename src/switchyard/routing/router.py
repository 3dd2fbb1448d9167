"""Method table, route registry, and the pipeline stages built on them.

Routes and router-wide middleware are registered during setup. The
first request that reaches ``routes()`` or ``allowed_methods()`` freezes
them into an immutable ``RouteTable``; registering afterwards raises
``ConfigurationError``.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from switchyard._internal.invoke import invoke, positional_arity
from switchyard._internal.types import Handler
from switchyard.config import RouterConfig
from switchyard.errors import ConfigurationError, MethodNotAllowed, NotImplementedMethod
from switchyard.http.request import Request
from switchyard.http.response import Redirect, Response
from switchyard.middleware.compose import compose
from switchyard.middleware.protocol import Middleware, Next
from switchyard.routing.methods import (
    REGISTRABLE_METHODS,
    ROUTABLE_METHODS,
    Method,
    parse_method,
)
from switchyard.routing.pattern import Match, Params, Parser, RoutePath, zero
from switchyard.server.negotiation import negotiate

logger = logging.getLogger("switchyard.routing")

# Maps the params of a redirect source onto the params of its destination
type ParamMapper = Callable[[Any], Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """One registration, as listed by ``switchyard routes``."""

    method: Method
    template: str
    handler: Handler


@dataclass(frozen=True, slots=True)
class RouteTable:
    """The frozen method table and router-wide middleware.

    Read-only at request time: evaluating it never changes it, so the
    same path always resolves the same way.
    """

    parsers: Mapping[Method, Parser[Middleware]]
    middleware: tuple[Middleware, ...]

    def resolve(self, method: Method, path: RoutePath) -> Middleware | None:
        """Return the bound handler stage for *method* and *path*, if any."""
        result = self.parsers[method].run(path)
        if result is None:
            return None
        return result[0]

    def allowed(self, path: RoutePath) -> tuple[Method, ...]:
        """Every routable method with a route at *path*, in canonical order."""
        return tuple(
            method for method in ROUTABLE_METHODS if self.parsers[method].run(path) is not None
        )


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__name__


def _binder(handler: Handler) -> Callable[[Params], Middleware]:
    """Turn *handler* into a function from matched params to a middleware stage.

    The stage passes a request carrying the params to the handler and
    converts whatever it returns into a ``Response``.
    """
    takes_next = positional_arity(handler) >= 2

    def bind(params: Params) -> Middleware:
        async def route_stage(request: Request, next: Next) -> Response:
            routed = request.with_params(params)
            if takes_next:
                result = await invoke(handler, routed, next)
            else:
                result = await invoke(handler, routed)
            return negotiate(result)

        return route_stage

    return bind


class Router:
    """Routes requests by method and path to a single handler.

    Usage::

        router = Router()

        @router.get(lit("users").then(int_param("id")).then(end))
        def show_user(request):
            return f"user {request.params['id']}"

        router.use(log_requests)

        app = App()
        app.add_middleware(router.routes())
        app.add_middleware(router.allowed_methods())

    For every routable method the router keeps one parser slot: the
    ordered alternation of every pattern registered under that method.
    The first registered pattern that matches wins; overlapping patterns
    are allowed and resolved purely by registration order.
    """

    __slots__ = (
        "_freeze_lock",
        "_middleware_list",
        "_parsers",
        "_registrations",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._parsers: dict[Method, Parser[Middleware]] = {
            method: zero() for method in ROUTABLE_METHODS
        }
        self._middleware_list: list[Middleware] = []
        self._registrations: list[RouteInfo] = []
        self._table: RouteTable | None = None
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def register(self, method: str, match: Match, handler: Handler) -> None:
        """Register *handler* for *method* requests whose path satisfies *match*.

        *method* is one of ``DELETE``, ``GET``, ``PATCH``, ``POST`` or
        ``PUT``. ``GET`` routes answer ``HEAD`` too; the server drops the
        body of ``HEAD`` responses.

        The handler receives the request with ``params`` set to what
        *match* extracted, and optionally the ``next`` continuation.
        """
        parsed = parse_method(method)
        if parsed not in REGISTRABLE_METHODS:
            allowed = ", ".join(REGISTRABLE_METHODS)
            msg = f"Cannot register routes for {method!r}. Use one of: {allowed}"
            raise ConfigurationError(msg)

        self._add(parsed, match, handler)
        if parsed is Method.GET:
            self._add(Method.HEAD, match, handler)

    def delete(self, match: Match, handler: Handler | None = None) -> Callable[..., Any]:
        """Add a route for DELETE. Without *handler*, acts as a decorator."""
        return self._shortcut(Method.DELETE, match, handler)

    def get(self, match: Match, handler: Handler | None = None) -> Callable[..., Any]:
        """Add a route for GET (and HEAD). Without *handler*, acts as a decorator."""
        return self._shortcut(Method.GET, match, handler)

    def patch(self, match: Match, handler: Handler | None = None) -> Callable[..., Any]:
        """Add a route for PATCH. Without *handler*, acts as a decorator."""
        return self._shortcut(Method.PATCH, match, handler)

    def post(self, match: Match, handler: Handler | None = None) -> Callable[..., Any]:
        """Add a route for POST. Without *handler*, acts as a decorator."""
        return self._shortcut(Method.POST, match, handler)

    def put(self, match: Match, handler: Handler | None = None) -> Callable[..., Any]:
        """Add a route for PUT. Without *handler*, acts as a decorator."""
        return self._shortcut(Method.PUT, match, handler)

    def redirect(
        self,
        src: Match,
        dest: Match,
        map_params: ParamMapper,
        code: int = 302,
    ) -> None:
        """Redirect requests matching *src* to the path *dest* formats.

        Registered under DELETE, GET, PATCH, POST and PUT alike.
        *map_params* must be a pure, total function from the params *src*
        extracts to the params *dest* needs. The formatted path is
        prefixed with the router's base path::

            router = Router(RouterConfig(base_path="/admin/"))
            router.redirect(
                str_param("userID"),
                lit("users").then(str_param("id")),
                lambda p: {"id": p["userID"]},
            )
            # GET /john -> 302, Location: /admin/users/john
        """
        self._check_not_frozen()
        prefix = self.config.prefix

        def redirect_handler(request: Request) -> Redirect:
            path = dest.format(map_params(request.params))
            return Redirect(prefix(path), status=code)

        for method in REGISTRABLE_METHODS:
            self._add(method, src, redirect_handler)

    def use(self, middleware: Middleware) -> None:
        """Run *middleware* before the handler of every matched request.

        Router-wide middleware runs in registration order, once per
        matched request, and never for requests no route matches.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)
        logger.debug("router middleware added: %s", _handler_name(middleware))

    @property
    def registrations(self) -> tuple[RouteInfo, ...]:
        """Every (method, pattern, handler) registered, in order."""
        return tuple(self._registrations)

    # -- Pipeline stages --

    def routes(self) -> Middleware:
        """Return the dispatching middleware.

        Unknown methods, ``OPTIONS``, and requests no route matches are
        passed to ``next`` untouched. A match runs the router-wide
        middleware followed by the matched handler, with the incoming
        ``next`` as the fallback at the end of the chain.
        """

        async def dispatch(request: Request, next: Next) -> Response:
            table = self.freeze()
            method = parse_method(request.method)
            if method is None or method is Method.OPTIONS:
                return await next(request)

            stage = table.resolve(method, RoutePath.parse(request.path))
            if stage is None:
                return await next(request)

            chain = compose((*table.middleware, stage))
            return await chain(request, next)

        return dispatch

    def allowed_methods(self) -> Middleware:
        """Return the middleware answering ``OPTIONS``, 405, and 501.

        Mount it after ``routes()``. It only decides whether the request
        may proceed; it never dispatches to a route itself. See
        ``allowed_methods_for`` for the rules.
        """
        return allowed_methods_for((self,))

    # -- Freezing --

    def freeze(self) -> RouteTable:
        """Snapshot the registrations into a ``RouteTable``.

        Idempotent and thread-safe (double-checked lock). Called on the
        first request; call it yourself to fail fast at startup.
        """
        table = self._table
        if table is not None:
            return table
        with self._freeze_lock:
            if self._table is None:
                self._table = RouteTable(
                    parsers=MappingProxyType(dict(self._parsers)),
                    middleware=tuple(self._middleware_list),
                )
                logger.debug(
                    "router frozen: %d routes, %d middleware",
                    len(self._registrations),
                    len(self._middleware_list),
                )
            return self._table

    # -- Internal --

    def _shortcut(self, method: Method, match: Match, handler: Handler | None) -> Callable[..., Any]:
        if handler is not None:
            self.register(method, match, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self.register(method, match, func)
            return func

        return decorator

    def _add(self, method: Method, match: Match, handler: Handler) -> None:
        self._check_not_frozen()
        stage = match.parser.map(_binder(handler))
        self._parsers[method] = self._parsers[method].alt(stage)
        self._registrations.append(RouteInfo(method, str(match), handler))
        logger.debug("route registered: %s %s -> %s", method, match, _handler_name(handler))

    def _check_not_frozen(self) -> None:
        if self._table is not None:
            msg = (
                "Cannot modify the router after it has started serving requests. "
                "Register routes and middleware before the first request."
            )
            raise ConfigurationError(msg)


def allowed_methods_for(routers: Iterable[Router]) -> Middleware:
    """Return one middleware answering ``OPTIONS``, 405, and 501 for *routers*.

    The methods allowed at a path are the union of what every router has
    routed there, in canonical order. Mount it after all of the routers'
    ``routes()`` stages.

    - Unknown method: raises ``NotImplementedMethod`` (501).
    - ``OPTIONS``: 200, empty body, ``Allow`` listing the methods
      with a route at this path.
    - Method allowed here, or no route at this path at all: ``next``.
    - Otherwise: raises ``MethodNotAllowed`` (405) with ``Allow``.
    """
    routers = tuple(routers)

    async def resolve_allowed(request: Request, next: Next) -> Response:
        tables = [router.freeze() for router in routers]
        method = parse_method(request.method)
        if method is None:
            raise NotImplementedMethod(request.method)

        path = RoutePath.parse(request.path)
        found = {m for table in tables for m in table.allowed(path)}
        allowed = tuple(m for m in ROUTABLE_METHODS if m in found)

        if method is Method.OPTIONS:
            return Response(body="", content_type="").with_header("Allow", ", ".join(allowed))

        if method in allowed or not allowed:
            return await next(request)

        raise MethodNotAllowed(allowed)

    return resolve_allowed
