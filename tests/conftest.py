"""Shared fixtures: a small documentation project on disk."""

import json
from datetime import UTC, datetime

import pytest

from docsite.config import SiteConfig
from docsite.site.factory import create_site

STARTED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

LAYOUT = """\
<!DOCTYPE html>
<html lang="{{ lang }}">
<head><title>{{ title }}</title>{{ hreflangs }}{{ resource_hints }}{{ styles }}</head>
<body>{{ content }}{{ scripts }}</body>
</html>
"""

PAGES = {
    "index.html": "{# title: Home #}\n<h1>Welcome {{ lang }}</h1>\n",
    "getting-started/installation.html": (
        "{# title: Installation #}\n<h1>Install</h1><p>{{ lang }}</p>\n"
    ),
    "about/index.html": "<h1>About</h1>\n",
    "store/index.html": "<h1>Store</h1>\n",
    "store/item.html": "<h1>Item</h1>\n",
    "broken.html": '<p>{{ "x" | localized }}</p>\n',
}

MANIFEST = {
    "publicPath": "/dist/",
    "initial": ["app.1234.js", "app.1234.css"],
    "async": ["chunk.5678.js"],
}


def write_project(root, *, locales=("en", "fr", "zh-Hans"), redirects=None) -> None:
    templates = root / "src" / "templates"
    (templates / "pages").mkdir(parents=True)
    (templates / "index.template.html").write_text(LAYOUT)
    for name, source in PAGES.items():
        page = templates / "pages" / name
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(source)

    i18n = root / "src" / "data" / "i18n"
    i18n.mkdir(parents=True)
    (i18n / "languages.json").write_text(
        json.dumps([{"locale": locale, "title": locale.upper()} for locale in locales])
    )

    router = root / "src" / "router"
    router.mkdir(parents=True)
    (router / "301.json").write_text(
        json.dumps(redirects if redirects is not None else {"/old": "/new", "/en/old": "/en/new"})
    )

    public = root / "src" / "public"
    public.mkdir(parents=True)
    (public / "robots.txt").write_text("User-agent: *\n")
    (public / "sitemap.xml").write_text('<?xml version="1.0"?><urlset></urlset>')

    releases = root / "src" / "releases"
    (releases / "assets").mkdir(parents=True)
    (releases / "v2.html").write_text("<h1>v2.0.0</h1>")
    (releases / "assets" / "notes.css").write_text("h1 { color: blue; }")

    (root / "src" / "themes").mkdir(parents=True)
    (root / "src" / "themes" / "dark.css").write_text("body { background: #000; }")

    dist = root / "dist"
    dist.mkdir()
    (dist / "client-manifest.json").write_text(json.dumps(MANIFEST))
    (dist / "app.1234.js").write_text("console.log('app');")


@pytest.fixture
def project(tmp_path):
    write_project(tmp_path)
    return tmp_path


@pytest.fixture
def make_site(project):
    """Build a site over the project; keyword arguments become config fields."""

    def factory(**overrides):
        config = SiteConfig(root=project, **overrides)
        return create_site(config, started=STARTED)

    return factory
