"""``switchyard routes``: list registered routes."""

import argparse
import sys

from switchyard.cli._resolve import resolve_routers


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / PATH / HANDLER table for ``args.target``.

    Rows appear in registration order, which is also match order.
    """
    try:
        routers = resolve_routers(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = []
    for router in routers:
        for info in router.registrations:
            handler_name = getattr(info.handler, "__qualname__", type(info.handler).__name__)
            rows.append((str(info.method), router.config.prefix(info.template), handler_name))

    if not rows:
        print("No routes registered.")
        return

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
