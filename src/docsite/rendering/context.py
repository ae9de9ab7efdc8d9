"""Per-request data handed to the renderer."""

from dataclasses import dataclass, field
from html import escape
from typing import Any

from kida.utils.html import Markup


@dataclass(slots=True)
class RenderContext:
    """Everything a page render may read.

    ``meta`` is the one mutable part: templates and the renderer may
    record response metadata there (a page title, for instance).
    """

    hostname: str
    url: str
    lang: str
    remainder: str
    hreflangs: Markup
    title: str = "Vuetify"
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def query(self) -> str:
        return self.url.partition("?")[2]

    def as_template_context(self) -> dict[str, Any]:
        return {
            "title": self.meta.get("title", self.title),
            "hostname": self.hostname,
            "url": self.url,
            "lang": self.lang,
            "remainder": self.remainder,
            "hreflangs": self.hreflangs,
            "meta": self.meta,
        }


def build_hreflangs(locales: tuple[str, ...] | list[str], hostname: str, remainder: str) -> Markup:
    """Alternate-language ``<link>`` tags for every locale the site ships."""
    host = escape(hostname)
    rest = escape(remainder)
    return Markup(
        "".join(
            f'<link rel="alternate" hreflang="{lang}" href="https://{host}/{lang}{rest}" />'
            for lang in locales
        )
    )
