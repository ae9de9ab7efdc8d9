"""Assemble the documentation site from a ``SiteConfig``.

Pipeline, outermost first::

    static mounts -> redirect table -> micro-cache -> router
                                                       |- /sitemap.xml, /releases/{release}
                                                       |- /api/translation/...   (TRANSLATE only)
                                                       |- /{lang}[/...]          render
                                                       '- everything else        302 to /{lang}/...
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version

from docsite import __version__
from docsite.app import Site
from docsite.config import SiteConfig
from docsite.errors import ConfigurationError
from docsite.http.request import Request
from docsite.middleware.microcache import MicroCache
from docsite.middleware.redirects import RedirectTableMiddleware
from docsite.middleware.static import StaticFiles
from docsite.rendering.manifest import ClientManifest, PrefetchPolicy, never_prefetch
from docsite.rendering.renderer import PageRenderer
from docsite.rendering.slot import BuildWatcher, RendererSlot
from docsite.site.catalog import LanguageCatalog, parse_language_path
from docsite.site.controller import LanguageController
from docsite.site.files import FileRoutes
from docsite.site.redirects import RedirectTable
from docsite.site.translation import PREFIX as TRANSLATION_PREFIX
from docsite.site.translation import TranslationAPI
from docsite.templating.integration import create_environment

logger = logging.getLogger("docsite.site")


def server_info() -> str:
    """``Server`` header value: this package and the template engine."""
    try:
        kida_version = version("kida-templates")
    except PackageNotFoundError:
        kida_version = "unknown"
    return f"docsite/{__version__} kida/{kida_version}"


def micro_cache_key(enabled: bool) -> Callable[[Request], str | None]:
    """Cache key function: the URL of a localized page, unless bypassed.

    Bypassed when micro-caching is off, for anything but GET/HEAD, for
    paths without a language prefix or under the translation API, and
    for any page whose remainder mentions ``store``.
    """

    def key(request: Request) -> str | None:
        if not enabled or request.method not in ("GET", "HEAD"):
            return None
        if request.path.startswith(TRANSLATION_PREFIX + "/") or request.path == TRANSLATION_PREFIX:
            return None
        parsed = parse_language_path(request.path)
        if parsed is None or "store" in parsed.remainder:
            return None
        return request.url

    return key


def build_renderer(
    config: SiteConfig,
    catalog: LanguageCatalog,
    *,
    should_prefetch: PrefetchPolicy = never_prefetch,
) -> PageRenderer:
    """Build a renderer from what is on disk now.

    Production requires the client manifest and the layout template;
    development renders without bundle tags until a build exists.
    """
    layout = config.template_dir / config.layout_template
    if not layout.is_file():
        msg = f"Layout template not found: {layout}"
        raise ConfigurationError(msg)

    if config.production or config.client_manifest.exists():
        manifest = ClientManifest.load(config.client_manifest)
    else:
        manifest = ClientManifest()

    env = create_environment(
        config.template_dir,
        auto_reload=not config.production,
        globals_={"locales": catalog.locales},
    )
    return PageRenderer(
        env,
        config.template_dir,
        locales=catalog.locales,
        manifest=manifest,
        layout=config.layout_template,
        default_language=config.default_language,
        cache_max_entries=config.render_cache_max_entries,
        cache_max_age=config.render_cache_max_age,
        should_prefetch=should_prefetch,
    )


def create_site(
    config: SiteConfig | None = None,
    *,
    started: datetime | None = None,
    app_path: str | None = None,
) -> Site:
    """Build the ASGI site. Raises ``ConfigurationError`` on broken inputs."""
    config = config or SiteConfig()
    site = Site(config, app_path=app_path)

    catalog = LanguageCatalog.from_file(config.languages_file)
    redirects = RedirectTable.from_file(config.redirects_file)

    slot = RendererSlot()
    watcher: BuildWatcher | None = None
    slot.publish(build_renderer(config, catalog))
    if not config.production:

        def rebuild() -> PageRenderer:
            return build_renderer(config, catalog)

        watcher = BuildWatcher(slot, rebuild, config.client_manifest)

    # -- Static mounts --
    long_lived = config.static_max_age if config.production else 0
    site.add_middleware(
        StaticFiles(
            config.public_dir,
            prefix="/",
            max_age=long_lived,
            exclude=lambda relative: relative == "sitemap.xml",
        )
    )
    site.add_middleware(StaticFiles(config.dist_dir, prefix="/dist", max_age=long_lived))
    site.add_middleware(
        StaticFiles(
            config.releases_dir,
            prefix="/releases",
            exclude=lambda relative: "/" not in relative,
        )
    )
    site.add_middleware(StaticFiles(config.themes_dir, prefix="/themes"))

    # -- Redirects and micro-cache --
    site.add_middleware(RedirectTableMiddleware(redirects))
    micro_cache = MicroCache(
        micro_cache_key(config.micro_cache),
        ttl=config.micro_cache_ttl,
        max_entries=config.micro_cache_max_entries,
    )
    site.add_middleware(micro_cache)

    # -- Routes --
    files = FileRoutes(config.public_dir, config.releases_dir)
    site.add_route("/sitemap.xml", files.sitemap, name="sitemap")
    site.add_route("/releases/{release}", files.release, name="release")

    if config.translate:
        translation = TranslationAPI(catalog, config.messages_dir)
        for path, handler, methods in translation.routes():
            site.add_route(path, handler, methods=methods)

    controller = LanguageController(
        catalog,
        slot,
        server_info=server_info(),
        started=started or datetime.now(UTC),
        default_language=config.default_language,
        title=config.default_title,
        watcher=watcher,
        log_timing=not config.production,
    )
    site.add_route("/{lang:lang}", controller.render, name="page")
    site.add_route("/{lang:lang}/{rest:path}", controller.render)
    site.add_route("/", controller.negotiate, name="negotiate")
    site.add_route("/{path:path}", controller.negotiate)

    if config.micro_cache:

        async def log_cache_stats() -> None:
            micro_cache.log_stats()

        site.on_shutdown(log_cache_stats)

    logger.info(
        "Site ready: %d languages, %d redirects, micro-cache %s, %s mode",
        len(catalog),
        len(redirects),
        "on" if config.micro_cache else "off",
        "production" if config.production else "development",
    )
    return site
