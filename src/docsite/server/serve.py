"""Run a site under pounce.

Development runs a single reloading worker that also watches the
template tree and the JSON tables. Production runs ``config.workers``
workers (0 means one per CPU). Those workers share the ``Site`` object,
so the caches it owns are lock-guarded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pounce.config import ServerConfig

    from docsite.app import Site
    from docsite.config import SiteConfig

logger = logging.getLogger("docsite.server")


def server_options(
    config: SiteConfig, *, host: str | None = None, port: int | None = None
) -> dict[str, Any]:
    """Keyword arguments for pounce's ``ServerConfig`` in the configured mode."""
    options: dict[str, Any] = {
        "host": host or config.host,
        "port": port or config.port,
        "log_level": config.log_level,
    }
    if config.production:
        options["workers"] = config.workers
    else:
        options.update(
            workers=1,
            reload=True,
            reload_include=config.reload_include,
            reload_dirs=(
                str(config.template_dir),
                str(config.redirects_file.parent),
                str(config.languages_file.parent),
            ),
        )
    return options


def build_server_config(config: SiteConfig, **overrides: Any) -> ServerConfig:
    from pounce.config import ServerConfig

    return ServerConfig(**server_options(config, **overrides))


def serve(site: Site, *, host: str | None = None, port: int | None = None) -> None:
    """Block serving *site* until the server is stopped."""
    from pounce.server import Server

    server_config = build_server_config(site.config, host=host, port=port)
    mode = "production" if site.config.production else "development"
    logger.info("serving %s on %s:%d", mode, server_config.host, server_config.port)
    # Only the dev reloader rebuilds the site from its import string
    app_path = None if site.config.production else site.app_path
    Server(server_config, site, app_path=app_path).run()
