"""``docsite routes``: list registered routes."""

import argparse

from docsite.cli._run import build_site, load_config


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH, and handler for the configured site."""
    site = build_site(load_config(args))

    rows: list[tuple[str, str, str]] = []
    for route in site.routes:
        handler_name = getattr(route.handler, "__qualname__", str(route.handler))
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((", ".join(sorted(route.methods)), route.path, handler_name))

    width_methods = max([6, *(len(r[0]) for r in rows)])
    width_path = max([4, *(len(r[1]) for r in rows)])
    fmt = f"{{:<{width_methods}}}  {{:<{width_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    print("-" * min(width_methods + width_path + 4 + max(len(r[2]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
