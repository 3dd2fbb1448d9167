"""Local server for a switchyard App.

Starts a pounce ASGI server with the live App object. pounce is an
optional dependency (``pip install switchyard[server]``); any ASGI
server can host the App instead.
"""

from switchyard.errors import ConfigurationError


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Serve *app* on *host*:*port* until interrupted.

    Args:
        app: ASGI callable (switchyard App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (development only).
        app_path: Optional ``"module:attribute"`` import string.  When
            provided, pounce reimports the app on each reload cycle so
            that code changes on disk take effect immediately.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = (
            "Running a server requires 'pounce'. "
            "Install it with: pip install switchyard[server]"
        )
        raise ConfigurationError(msg) from exc

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    server = Server(config, app, app_path=app_path)
    server.run()
