"""Template filters registered on every docsite kida Environment."""

import html
from typing import Any

from kida.utils.html import Markup

from docsite.routing.params import LANGUAGE_CODE


def localized(path: str, lang: str) -> str:
    """Prefix a site-relative path with a language code.

    Example:
        <a href="{{ "/getting-started" | localized(lang) }}">
        → <a href="/fr/getting-started">
    """
    if not path.startswith("/"):
        path = "/" + path
    if path == "/":
        return f"/{lang}/"
    return f"/{lang}{path}"


def attr(value: Any, name: str) -> str | Markup:
    """Output an HTML attribute when value is truthy, else empty string.

    Example:
        <html{{ lang | attr("lang") }}>
        → <html lang="fr">
    """
    if not value:
        return ""
    return Markup(f' {name}="{html.escape(str(value))}"')


BUILTIN_FILTERS: dict[str, Any] = {
    "attr": attr,
    "localized": localized,
}

BUILTIN_GLOBALS: dict[str, Any] = {
    "language_code_pattern": LANGUAGE_CODE,
}
