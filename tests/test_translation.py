"""Tests for translation message editing."""

import pytest

from docsite.site.translation import set_nested


class TestSetNested:
    def test_creates_groups(self) -> None:
        assert set_nested({}, "Vuetify.AppToolbar.docs", "Docs") == {
            "Vuetify": {"AppToolbar": {"docs": "Docs"}}
        }

    def test_keeps_siblings(self) -> None:
        messages = {"Vuetify": {"a": "1"}}
        set_nested(messages, "Vuetify.b", "2")
        assert messages == {"Vuetify": {"a": "1", "b": "2"}}

    def test_overwrites_leaf(self) -> None:
        assert set_nested({"title": "old"}, "title", "new") == {"title": "new"}

    @pytest.mark.parametrize("key", ["", "a.", ".a", "a..b"])
    def test_empty_segment(self, key) -> None:
        with pytest.raises(ValueError, match="Invalid message key"):
            set_nested({}, key, "x")

    def test_leaf_cannot_become_group(self) -> None:
        with pytest.raises(ValueError, match="not a group"):
            set_nested({"title": "x"}, "title.sub", "y")
