"""Path parameter converters.

Each converter is a regex for one path segment (``path`` consumes the
rest of the path). ``lang`` is the language-prefix grammar used by the
site's localized routes.
"""

LANGUAGE_CODE = r"[a-z]{2,3}|[a-z]{2,3}-[a-zA-Z]{4}|[a-z]{2,3}-[A-Z]{2,3}"

CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "lang": LANGUAGE_CODE,
    "path": r".+",
}
