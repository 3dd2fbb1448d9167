"""Switchyard CLI: route listing and a local server.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard: method and path routing for ASGI apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "target",
        help="Import string of a Router or App (e.g. myapp:router)",
    )

    # -- switchyard run ----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an App")
    run_parser.add_argument("target", help="Import string (e.g. myapp:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from switchyard.cli._run import run

        run(args)
