"""Switchyard application class: the ASGI host for routers.

Mutable during setup (middleware, routers, error handlers, hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Callable

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.invoke import invoke
from switchyard._internal.types import ErrorHandler, LifecycleHook
from switchyard.config import AppConfig
from switchyard.middleware.protocol import Middleware
from switchyard.routing.router import Router, allowed_methods_for
from switchyard.server.handler import handle_request

logger = logging.getLogger("switchyard.server")


class App:
    """The switchyard host application.

    Runs an ordered middleware pipeline for every HTTP request. Requests
    that fall off the end of the pipeline get a 404; ``HTTPError``
    exceptions become their status; anything else is logged and becomes
    a 500::

        router = Router()
        router.get(pattern("/"), lambda request: "hello")

        app = App()
        app.mount(router)

    Thread safety:
        The setup phase is single-threaded (module import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread captures the pipeline, even if several workers receive
        their first request at once.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_method_routers",
        "_middleware_list",
        "_routers",
        "_routes_end",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._middleware_list: list[Middleware] = []
        self._routers: list[Router] = []
        self._method_routers: list[Router] = []
        self._routes_end: int = 0
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[LifecycleHook] = []
        self._shutdown_hooks: list[LifecycleHook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state: set during _freeze()
        self._middleware: tuple[Middleware, ...] = ()

    # -- Registration --

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware* to the request pipeline."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def mount(self, router: Router, *, allowed_methods: bool = True) -> None:
        """Add *router* to the pipeline.

        Adds ``router.routes()`` in place. When the app freezes, a single
        allowed-methods stage covering every router mounted with
        *allowed_methods* is placed right after the last mounted router,
        so ``OPTIONS`` and 405 answers reflect all of them together.
        """
        self._check_not_frozen()
        self._routers.append(router)
        self._middleware_list.append(router.routes())
        if allowed_methods:
            self._method_routers.append(router)
        self._routes_end = len(self._middleware_list)

    @property
    def routers(self) -> tuple[Router, ...]:
        """Routers added with ``mount()``, in order."""
        return tuple(self._routers)

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        Handlers may take ``()``, ``(request)`` or ``(request, exc)`` and
        return anything a route handler can::

            @app.error(404)
            def not_found(request):
                return "Nothing here", 404
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def on_startup(self, func: LifecycleHook) -> LifecycleHook:
        """Register a hook to run during ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: LifecycleHook) -> LifecycleHook:
        """Register a hook to run during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._ensure_frozen()

        from switchyard.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        match scope["type"]:
            case "lifespan":
                await self._serve_lifespan(receive, send)
            case "http":
                self._ensure_frozen()
                await handle_request(
                    scope,
                    receive,
                    send,
                    middleware=self._middleware,
                    error_handlers=self._error_handlers,
                    debug=self.config.debug,
                )

    async def startup(self) -> None:
        """Freeze the app and its routers, then run the startup hooks.

        Called by lifespan startup and by ``TestClient``. Freezing here
        surfaces configuration errors before the first request.
        """
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run the shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)

    async def _serve_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self.startup()
                    except Exception as exc:
                        logger.exception("lifespan startup failed")
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Capture the pipeline and freeze every mounted router.

        MUST only be called while holding _freeze_lock.
        """
        for router in self._routers:
            router.freeze()
        stages = list(self._middleware_list)
        if self._method_routers:
            stages.insert(self._routes_end, allowed_methods_for(self._method_routers))
        self._middleware = tuple(stages)
        self._frozen = True
        logger.debug(
            "app frozen: %d middleware, %d routers",
            len(self._middleware),
            len(self._routers),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot change the app once it is serving. "
                "Mount routers and add middleware, error handlers, and hooks first."
            )
            raise RuntimeError(msg)
