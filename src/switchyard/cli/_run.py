"""``switchyard run``: serve an App."""

import argparse
import sys

from switchyard.cli._resolve import resolve_app
from switchyard.errors import ConfigurationError
from switchyard.server.dev import run_server


def run(args: argparse.Namespace) -> None:
    """Resolve ``args.target`` to an App and serve it.

    ``--host`` and ``--port`` override the app's config. Reload is on
    when the app runs with ``debug=True``.
    """
    try:
        app = resolve_app(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()

    try:
        run_server(
            app,
            args.host or app.config.host,
            args.port or app.config.port,
            reload=app.config.debug,
            app_path=args.target,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
