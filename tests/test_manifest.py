"""Tests for the client build manifest."""

import json

import pytest

from docsite.errors import ConfigurationError
from docsite.rendering.manifest import ClientManifest, never_prefetch, resource_kind


class TestResourceKind:
    @pytest.mark.parametrize(
        ("file", "kind"),
        [
            ("app.js", "script"),
            ("app.js?v=1", "script"),
            ("app.css", "style"),
            ("font.woff2", "font"),
            ("logo.svg", "image"),
            ("data.json", ""),
        ],
    )
    def test_kinds(self, file, kind) -> None:
        assert resource_kind(file) == kind


class TestLoad:
    def test_loads_manifest(self, tmp_path) -> None:
        path = tmp_path / "client-manifest.json"
        path.write_text(json.dumps({"publicPath": "/assets", "initial": ["a.js"], "async": ["b.js"]}))
        manifest = ClientManifest.load(path)
        assert manifest.public_path == "/assets/"
        assert manifest.initial == ("a.js",)
        assert manifest.async_files == ("b.js",)

    def test_defaults(self, tmp_path) -> None:
        path = tmp_path / "client-manifest.json"
        path.write_text("{}")
        assert ClientManifest.load(path) == ClientManifest()

    def test_missing(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ClientManifest.load(tmp_path / "client-manifest.json")

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "client-manifest.json"
        path.write_text('{"initial": [')
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            ClientManifest.load(path)

    def test_not_an_object(self, tmp_path) -> None:
        path = tmp_path / "client-manifest.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError):
            ClientManifest.load(path)


class TestTags:
    manifest = ClientManifest(
        initial=("app.js", "app.css", "logo.png"), async_files=("lazy.js", "lazy.css")
    )

    def test_resource_hints_without_prefetch(self) -> None:
        hints = self.manifest.resource_hints(never_prefetch)
        assert hints == (
            '<link rel="preload" href="/dist/app.js" as="script">'
            '<link rel="preload" href="/dist/app.css" as="style">'
        )

    def test_resource_hints_with_prefetch(self) -> None:
        hints = self.manifest.resource_hints(lambda file, kind: True)
        assert '<link rel="prefetch" href="/dist/lazy.js">' in hints
        assert '<link rel="prefetch" href="/dist/lazy.css">' in hints

    def test_styles_and_scripts(self) -> None:
        assert self.manifest.styles() == '<link rel="stylesheet" href="/dist/app.css">'
        assert self.manifest.scripts() == '<script src="/dist/app.js" defer></script>'

    def test_urls_are_escaped(self) -> None:
        manifest = ClientManifest(public_path='/x"/')
        assert manifest.url("a.js") == "/x&quot;/a.js"
