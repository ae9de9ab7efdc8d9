"""Tests for the language catalog, the prefix grammar and the redirect table."""

import json

import pytest

from docsite.errors import ConfigurationError
from docsite.site.catalog import LanguageCatalog, is_language_code, parse_language_path
from docsite.site.redirects import RedirectTable


class TestParseLanguagePath:
    @pytest.mark.parametrize(
        ("path", "lang", "remainder"),
        [
            ("/en", "en", ""),
            ("/en/", "en", "/"),
            ("/fr/getting-started", "fr", "/getting-started"),
            ("/zh-Hans/a/b", "zh-Hans", "/a/b"),
            ("/pt-BR/store/1", "pt-BR", "/store/1"),
            ("/ast/", "ast", "/"),
        ],
    )
    def test_matches(self, path, lang, remainder) -> None:
        assert parse_language_path(path) == (lang, remainder)

    @pytest.mark.parametrize(
        "path", ["/", "", "/EN/", "/english/", "/getting-started", "/en-us/", "/e/"]
    )
    def test_no_prefix(self, path) -> None:
        assert parse_language_path(path) is None

    def test_is_language_code(self) -> None:
        assert is_language_code("sr-Latn")
        assert not is_language_code("en/")
        assert not is_language_code("")


class TestLanguageCatalog:
    def test_from_objects(self, tmp_path) -> None:
        path = tmp_path / "languages.json"
        path.write_text(json.dumps([{"locale": "en", "title": "English"}, {"locale": "fr"}]))
        catalog = LanguageCatalog.from_file(path)
        assert catalog.locales == ("en", "fr")
        assert "fr" in catalog
        assert "de" not in catalog
        assert list(catalog) == ["en", "fr"]
        assert len(catalog) == 2

    def test_from_strings(self, tmp_path) -> None:
        path = tmp_path / "languages.json"
        path.write_text('["en", "ja"]')
        assert LanguageCatalog.from_file(path).locales == ("en", "ja")

    def test_missing(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            LanguageCatalog.from_file(tmp_path / "languages.json")

    @pytest.mark.parametrize("content", ["{", '{"en": 1}', '[{"title": "x"}]', '[""]'])
    def test_invalid(self, tmp_path, content) -> None:
        path = tmp_path / "languages.json"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            LanguageCatalog.from_file(path)


class TestRedirectTable:
    def test_exact_path_lookup(self) -> None:
        table = RedirectTable.from_mapping({"/old": "/new"})
        assert table.lookup("/old") == "/new"
        assert table.lookup("/old/") is None
        assert table.lookup("/old?x=1") is None
        assert len(table) == 1

    def test_immutable(self) -> None:
        source = {"/old": "/new"}
        table = RedirectTable.from_mapping(source)
        source["/other"] = "/x"
        assert table.lookup("/other") is None
        with pytest.raises(TypeError):
            table.entries["/late"] = "/x"  # type: ignore[index]

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "301.json"
        path.write_text('{"/en/vuetify-loader": "/en/features/treeshaking/"}')
        table = RedirectTable.from_file(path)
        assert table.lookup("/en/vuetify-loader") == "/en/features/treeshaking/"

    def test_missing_file_is_empty(self, tmp_path) -> None:
        assert len(RedirectTable.from_file(tmp_path / "301.json")) == 0

    @pytest.mark.parametrize("content", ["{", "[]", '{"/a": 1}'])
    def test_invalid(self, tmp_path, content) -> None:
        path = tmp_path / "301.json"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            RedirectTable.from_file(path)
