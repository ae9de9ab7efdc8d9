"""Client build manifest and the resource hints derived from it.

The bundler writes ``client-manifest.json``::

    {
        "publicPath": "/dist/",
        "initial": ["app.3f2a.js", "app.3f2a.css"],
        "async": ["0.9c1d.js", "1.77ab.js"]
    }

Initial files are loaded on every page (``preload`` hints plus the
actual ``<link>``/``<script>`` tags); async chunks only ever become
``prefetch`` hints, and only when the prefetch policy allows it.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from html import escape
from pathlib import Path

from kida.utils.html import Markup

from docsite.errors import ConfigurationError

# (file, kind) -> whether to emit a prefetch hint
type PrefetchPolicy = Callable[[str, str], bool]


def never_prefetch(file: str, kind: str) -> bool:
    return False


def resource_kind(file: str) -> str:
    """``as=`` value for a bundle file."""
    name = file.split("?", 1)[0]
    if name.endswith(".js"):
        return "script"
    if name.endswith(".css"):
        return "style"
    if name.endswith((".woff", ".woff2", ".ttf", ".otf")):
        return "font"
    if name.endswith((".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")):
        return "image"
    return ""


@dataclass(frozen=True, slots=True)
class ClientManifest:
    public_path: str = "/dist/"
    initial: tuple[str, ...] = ()
    async_files: tuple[str, ...] = ()

    @classmethod
    def load(cls, path: Path) -> ClientManifest:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            msg = f"Client manifest not found: {path} (run the client build first)"
            raise ConfigurationError(msg) from None
        except json.JSONDecodeError as exc:
            msg = f"Client manifest {path} is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Client manifest {path} must be a JSON object"
            raise ConfigurationError(msg)

        public_path = data.get("publicPath", "/dist/")
        if not public_path.endswith("/"):
            public_path += "/"
        return cls(
            public_path=public_path,
            initial=tuple(data.get("initial", ())),
            async_files=tuple(data.get("async", ())),
        )

    def url(self, file: str) -> str:
        return escape(self.public_path + file)

    def resource_hints(self, should_prefetch: PrefetchPolicy = never_prefetch) -> Markup:
        """``<link rel="preload">`` and ``<link rel="prefetch">`` tags."""
        tags: list[str] = []
        for file in self.initial:
            kind = resource_kind(file)
            if kind in ("script", "style"):
                tags.append(f'<link rel="preload" href="{self.url(file)}" as="{kind}">')
        for file in self.async_files:
            kind = resource_kind(file)
            if should_prefetch(file, kind):
                tags.append(f'<link rel="prefetch" href="{self.url(file)}">')
        return Markup("".join(tags))

    def styles(self) -> Markup:
        return Markup(
            "".join(
                f'<link rel="stylesheet" href="{self.url(file)}">'
                for file in self.initial
                if resource_kind(file) == "style"
            )
        )

    def scripts(self) -> Markup:
        return Markup(
            "".join(
                f'<script src="{self.url(file)}" defer></script>'
                for file in self.initial
                if resource_kind(file) == "script"
            )
        )
