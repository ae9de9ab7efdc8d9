"""Language routing and page rendering.

Every page URL starts with a language code. Requests without one are
redirected to a negotiated language; requests with one are rendered,
with the chosen language remembered in a cookie.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

from docsite.config import LANGUAGE_COOKIE_MAX_AGE
from docsite.http.freshness import http_date
from docsite.http.request import Request
from docsite.http.response import HTML, Redirect, Response
from docsite.rendering.context import RenderContext, build_hreflangs
from docsite.rendering.result import Rendered
from docsite.rendering.slot import BuildWatcher, RendererSlot
from docsite.site.catalog import LanguageCatalog, is_language_code, parse_language_path
from docsite.site.presenter import ErrorPresenter

logger = logging.getLogger("docsite.site")

LANGUAGE_COOKIE = "currentLanguage"
REVALIDATE = "public, must-revalidate"


def is_store_path(remainder: str) -> bool:
    """Store pages are never answered 304."""
    return remainder.startswith("/store")


class LanguageController:
    """Route handlers for localized pages.

    Usage::

        controller = LanguageController(catalog, slot, server_info="docsite/1.0")
        site.add_route("/{lang:lang}/{rest:path}", controller.render)
        site.add_route("/{path:path}", controller.negotiate)
    """

    __slots__ = (
        "_catalog",
        "_default_language",
        "_last_modified",
        "_log_timing",
        "_presenter",
        "_server_info",
        "_slot",
        "_title",
        "_watcher",
    )

    def __init__(
        self,
        catalog: LanguageCatalog,
        slot: RendererSlot,
        *,
        server_info: str,
        started: datetime | None = None,
        default_language: str = "en",
        title: str = "Vuetify",
        presenter: ErrorPresenter | None = None,
        watcher: BuildWatcher | None = None,
        log_timing: bool = False,
    ) -> None:
        self._catalog = catalog
        self._slot = slot
        self._server_info = server_info
        self._last_modified = http_date(started or datetime.now(UTC))
        self._default_language = default_language
        self._title = title
        self._presenter = presenter or ErrorPresenter()
        self._watcher = watcher
        self._log_timing = log_timing

    @property
    def last_modified(self) -> str:
        return self._last_modified

    def negotiate_language(self, request: Request) -> str:
        """Pick a language for a request whose path carries none.

        Order: a usable ``currentLanguage`` cookie, then Accept-Language
        against the catalog, then the default. Anything that isn't a
        grammar-valid code falls back to the default.
        """
        cookie = request.cookies.get(LANGUAGE_COOKIE)
        if cookie and is_language_code(cookie) and cookie in self._catalog:
            lang = cookie
        else:
            lang = request.accepts_languages(self._catalog.locales) or self._default_language
        if not is_language_code(lang):
            lang = self._default_language
        return lang

    async def negotiate(self, request: Request) -> Redirect:
        """302 to the same URL under a negotiated language prefix."""
        return Redirect(f"/{self.negotiate_language(request)}{request.url}")

    async def render(self, request: Request) -> Response | Redirect:
        """Render the page for a language-prefixed path."""
        parsed = parse_language_path(request.path)
        if parsed is None:
            return await self.negotiate(request)

        started = time.perf_counter()
        lang, remainder = parsed

        validators: dict[str, str] = {}
        if not is_store_path(remainder):
            validators = {"Last-Modified": self._last_modified, "Cache-Control": REVALIDATE}
            if request.is_fresh(validators):
                return self._finish(Response(body="", status=304).with_headers(validators), lang)

        hostname = request.hostname
        context = RenderContext(
            hostname=hostname,
            url=request.url,
            lang=lang,
            remainder=remainder,
            hreflangs=build_hreflangs(self._catalog.locales, hostname, remainder),
            title=self._title,
        )

        if self._watcher is not None:
            await self._watcher.refresh()
        renderer = await self._slot.current()
        result = await renderer.render_to_string(context)

        if isinstance(result, Rendered):
            response = (
                Response(body=result.html, content_type=HTML)
                .with_header("Server", self._server_info)
                .with_headers(validators)
            )
            if self._log_timing:
                logger.info("whole request: %dms", (time.perf_counter() - started) * 1000)
            return self._finish(response, lang)

        response = self._presenter.present(result, request, context.as_template_context())
        return self._finish(response, lang)

    def _finish(self, response: Response, lang: str) -> Response:
        return response.with_cookie(
            LANGUAGE_COOKIE,
            lang,
            max_age=LANGUAGE_COOKIE_MAX_AGE,
            httponly=False,
            samesite=None,
        )
