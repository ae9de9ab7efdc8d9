"""``docsite serve`` and the config/logging setup shared by commands.

Loads ``.env``, builds a ``SiteConfig`` from the environment, applies
CLI overrides, and builds the site. Startup problems (missing catalog,
broken redirect table, no client build in production) end the process.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from docsite.app import Site
from docsite.config import SiteConfig
from docsite.errors import ConfigurationError


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def load_config(args: argparse.Namespace) -> SiteConfig:
    """Environment first, then command-line overrides."""
    load_dotenv(find_dotenv(usecwd=True))
    config = SiteConfig.from_env()

    overrides: dict[str, object] = {}
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None):
        overrides["port"] = args.port
    if getattr(args, "root", None):
        overrides["root"] = Path(args.root)
    if getattr(args, "production", False):
        overrides["production"] = True
    if getattr(args, "workers", None) is not None:
        overrides["workers"] = args.workers
    if getattr(args, "no_micro_cache", False):
        overrides["micro_cache"] = False
    if getattr(args, "translate", False):
        overrides["translate"] = True
    return dataclasses.replace(config, **overrides) if overrides else config


def build_site(config: SiteConfig, *, app_path: str | None = None) -> Site:
    from docsite.site.factory import create_site

    try:
        return create_site(config, app_path=app_path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def run_server(args: argparse.Namespace) -> None:
    """Start the server in the mode the config selects."""
    config = load_config(args)
    configure_logging(config.log_level)
    # The reloader re-imports the site from the environment, so only
    # hand it the import string when no CLI override would be lost.
    overridden = config != SiteConfig.from_env()
    site = build_site(config, app_path=None if overridden else "docsite.asgi:app")
    logging.getLogger("docsite.server").info(
        "server started at %s:%d", config.host, config.port
    )
    site.run()
