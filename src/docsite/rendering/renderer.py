"""Page renderer.

Wraps a kida ``Environment``. A page lives at ``pages/<remainder>.html``
(or ``pages/<remainder>/index.html``) under the template directory and
is rendered into the site layout, which also receives the client
bundle's resource tags.

Page bodies see only ``lang`` (plus the environment globals), so they are kept in a cachetools ``TTLCache`` keyed by page and language,
bounded by entry count and age. The layout, which reads the host and
URL, is rendered for every request. Template work runs in a worker
thread; the cache is shared by production workers and guarded by a lock.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Any

import anyio.to_thread
from cachetools import TTLCache
from kida import Environment
from kida.utils.html import Markup

from docsite.rendering.context import RenderContext
from docsite.rendering.manifest import ClientManifest, PrefetchPolicy, never_prefetch
from docsite.rendering.result import PageNotFound, RedirectSignal, Rendered, RenderFailure, RenderResult

logger = logging.getLogger("docsite.site")

PAGES_DIR = "pages"

# {# title: Getting started #} on the first line of a page
_TITLE_COMMENT = re.compile(r"^\{#\s*title:\s*(.+?)\s*#\}")


class PageRenderer:
    """Render pages for a fixed set of languages.

    Usage::

        renderer = PageRenderer(env, template_dir, locales=("en", "fr"))
        result = await renderer.render_to_string(context)
    """

    __slots__ = (
        "_cache",
        "_default_language",
        "_env",
        "_layout",
        "_lock",
        "_locales",
        "_manifest",
        "_should_prefetch",
        "_template_dir",
    )

    def __init__(
        self,
        env: Environment,
        template_dir: Path,
        *,
        locales: tuple[str, ...],
        manifest: ClientManifest | None = None,
        layout: str = "index.template.html",
        default_language: str = "en",
        cache_max_entries: int = 1000,
        cache_max_age: float = 900,
        should_prefetch: PrefetchPolicy = never_prefetch,
    ) -> None:
        self._env = env
        self._template_dir = template_dir.resolve()
        self._locales = locales
        self._manifest = manifest or ClientManifest()
        self._layout = layout
        self._default_language = default_language
        self._should_prefetch = should_prefetch
        self._cache: TTLCache[str, tuple[str, str | None]] = TTLCache(
            maxsize=cache_max_entries, ttl=cache_max_age
        )
        self._lock = threading.Lock()

    @property
    def manifest(self) -> ClientManifest:
        return self._manifest

    @property
    def cached_pages(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)

    def resolve_page(self, remainder: str) -> str | None:
        """Template name for *remainder*, or ``None`` if no page exists."""
        relative = remainder.strip("/")
        if not relative:
            candidates = [f"{PAGES_DIR}/index.html"]
        else:
            parts = relative.split("/")
            if any(part in ("", ".", "..") or part.startswith(".") for part in parts):
                return None
            candidates = [f"{PAGES_DIR}/{relative}.html", f"{PAGES_DIR}/{relative}/index.html"]

        pages_root = self._template_dir / PAGES_DIR
        for name in candidates:
            path = (self._template_dir / name).resolve()
            if path.is_relative_to(pages_root) and path.is_file():
                return name
        return None

    async def render_to_string(self, context: RenderContext) -> RenderResult:
        """Render the page for *context*; never raises."""
        if context.lang not in self._locales:
            target = f"/{self._default_language}{context.remainder}"
            if context.query:
                target = f"{target}?{context.query}"
            return RedirectSignal(target)

        name = self.resolve_page(context.remainder)
        if name is None:
            return PageNotFound(context.remainder)

        key = f"{name}::{context.lang}"
        try:
            with self._lock:
                cached = self._cache.get(key)
            if cached is None:
                cached = await anyio.to_thread.run_sync(self._render_page, name, context.lang)
                with self._lock:
                    self._cache[key] = cached
            body, title = cached
            if title:
                context.meta["title"] = title
            html = await anyio.to_thread.run_sync(self._render_layout, body, context)
        except Exception as exc:
            return RenderFailure(exc)
        return Rendered(html)

    def _render_page(self, name: str, lang: str) -> tuple[str, str | None]:
        source = (self._template_dir / name).read_text(encoding="utf-8")
        match = _TITLE_COMMENT.match(source)
        title = match.group(1) if match else None
        body = self._env.get_template(name).render({"lang": lang})
        return body, title

    def _render_layout(self, body: str, context: RenderContext) -> str:
        values: dict[str, Any] = context.as_template_context()
        values.update(
            content=Markup(body),
            resource_hints=self._manifest.resource_hints(self._should_prefetch),
            styles=self._manifest.styles(),
            scripts=self._manifest.scripts(),
        )
        return self._env.get_template(self._layout).render(values)
