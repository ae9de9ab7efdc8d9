"""Docsite CLI: run the server and inspect the route table.

Entry point registered as ``docsite`` in ``pyproject.toml``::

    [project.scripts]
    docsite = "docsite.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``docsite`` command."""
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Server-rendered documentation site.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- docsite serve ----------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the dev or production server")
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument("--root", default=None, help="Project root (default: cwd)")
    serve_parser.add_argument(
        "--production",
        action="store_true",
        help="Run in production mode (multi-worker, long-lived static caching)",
    )
    serve_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect, production only)",
    )
    serve_parser.add_argument(
        "--no-micro-cache",
        action="store_true",
        help="Disable the rendered-page micro-cache",
    )
    serve_parser.add_argument(
        "--translate",
        action="store_true",
        help="Mount the translation API under /api/translation",
    )

    # -- docsite routes ---------------------------------------------------
    subparsers.add_parser("routes", help="List registered routes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from docsite.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from docsite.cli._routes import run_routes

        run_routes(args)
