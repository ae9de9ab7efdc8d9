"""Tests for template filters and environment setup."""

from docsite.templating.filters import attr, localized
from docsite.templating.integration import create_environment


class TestFilters:
    def test_localized(self) -> None:
        assert localized("/getting-started", "fr") == "/fr/getting-started"
        assert localized("about", "en") == "/en/about"
        assert localized("/", "zh-Hans") == "/zh-Hans/"

    def test_attr(self) -> None:
        assert attr("fr", "lang") == ' lang="fr"'
        assert attr('a"b', "title") == ' title="a&quot;b"'
        assert attr("", "lang") == ""
        assert attr(None, "lang") == ""


class TestEnvironment:
    def test_filters_and_globals(self, tmp_path) -> None:
        (tmp_path / "link.html").write_text(
            '<a href="{{ path | localized(lang) }}">{{ name }}</a>{{ site }}'
        )
        env = create_environment(
            tmp_path,
            filters={"shout": str.upper},
            globals_={"site": "Docs"},
        )
        html = env.get_template("link.html").render({"path": "/x", "lang": "fr", "name": "<b>"})
        assert html == '<a href="/fr/x">&lt;b&gt;</a>Docs'
