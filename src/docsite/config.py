"""Site configuration.

SiteConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups. Build it from the process environment with
``SiteConfig.from_env()``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

# 10 minutes
MICRO_CACHE_TTL = 10 * 60

# 30 days
STATIC_MAX_AGE = 60 * 60 * 24 * 30

# 7 days
LANGUAGE_COOKIE_MAX_AGE = 60 * 60 * 24 * 7


def _env_flag(value: str | None) -> bool:
    return bool(value) and value.lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(production=True, port=3000, micro_cache=False)
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 8095
    production: bool = False
    workers: int = 0  # 0 = auto-detect from CPU count (production only)

    # Reload (development only)
    reload_include: tuple[str, ...] = (".html", ".json")

    # Project layout
    root: Path = field(default_factory=Path.cwd)

    # Caching
    micro_cache: bool = True
    micro_cache_ttl: int = MICRO_CACHE_TTL
    micro_cache_max_entries: int = 500
    render_cache_max_entries: int = 1000
    render_cache_max_age: int = 60 * 15
    static_max_age: int = STATIC_MAX_AGE

    # Rendering
    default_title: str = "Vuetify"
    default_language: str = "en"
    layout_template: str = "index.template.html"

    # Translation sub-API
    translate: bool = False

    # Logging
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SiteConfig:
        """Build a config from environment variables.

        ``DOCSITE_ENV=production`` selects production mode, ``MICRO_CACHE=false``
        disables the micro-cache, ``TRANSLATE`` enables the translation API,
        and ``PORT`` / ``HOST`` / ``DOCSITE_ROOT`` override the listener and
        project root.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {
            "production": env.get("DOCSITE_ENV", "") == "production",
            "micro_cache": env.get("MICRO_CACHE") != "false",
            "translate": _env_flag(env.get("TRANSLATE")),
        }
        if env.get("PORT"):
            kwargs["port"] = int(env["PORT"])
        if env.get("HOST"):
            kwargs["host"] = env["HOST"]
        if env.get("DOCSITE_ROOT"):
            kwargs["root"] = Path(env["DOCSITE_ROOT"])
        if env.get("LOG_LEVEL"):
            kwargs["log_level"] = env["LOG_LEVEL"].lower()
        return cls(**kwargs)  # type: ignore[arg-type]

    # -- Project paths --

    @property
    def public_dir(self) -> Path:
        return self.root / "src" / "public"

    @property
    def dist_dir(self) -> Path:
        return self.root / "dist"

    @property
    def releases_dir(self) -> Path:
        return self.root / "src" / "releases"

    @property
    def themes_dir(self) -> Path:
        return self.root / "src" / "themes"

    @property
    def template_dir(self) -> Path:
        return self.root / "src" / "templates"

    @property
    def redirects_file(self) -> Path:
        return self.root / "src" / "router" / "301.json"

    @property
    def languages_file(self) -> Path:
        return self.root / "src" / "data" / "i18n" / "languages.json"

    @property
    def messages_dir(self) -> Path:
        return self.root / "src" / "data" / "i18n" / "messages"

    @property
    def client_manifest(self) -> Path:
        return self.dist_dir / "client-manifest.json"
