"""Language catalog and the language-prefix grammar.

The grammar decides whether a path is a localized page at all; the
catalog decides which of those languages the site actually ships.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from docsite.errors import ConfigurationError
from docsite.routing.params import LANGUAGE_CODE

LANGUAGE_PREFIX = re.compile(rf"^/({LANGUAGE_CODE})(/.*)?$")
_LANGUAGE_CODE = re.compile(rf"^(?:{LANGUAGE_CODE})$")


class LanguagePath(NamedTuple):
    """A path split into its language code and the rest (may be empty)."""

    lang: str
    remainder: str


def parse_language_path(path: str) -> LanguagePath | None:
    """Split ``/fr/getting-started`` into ``("fr", "/getting-started")``.

    Returns ``None`` when the path has no grammar-valid language prefix.
    """
    match = LANGUAGE_PREFIX.match(path)
    if match is None:
        return None
    return LanguagePath(match.group(1), match.group(2) or "")


def is_language_code(value: str) -> bool:
    """True if *value* is a grammar-valid language code."""
    return bool(_LANGUAGE_CODE.match(value))


@dataclass(frozen=True, slots=True)
class LanguageCatalog:
    """Ordered, immutable set of locales the site renders."""

    locales: tuple[str, ...]

    def __contains__(self, locale: object) -> bool:
        return locale in self.locales

    def __iter__(self) -> Iterator[str]:
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    @classmethod
    def from_file(cls, path: Path) -> LanguageCatalog:
        """Load the catalog from a JSON list.

        Entries are either locale strings or objects with a ``locale`` key
        (the shape the client bundle uses for its language menu).
        """
        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            msg = f"Language catalog not found: {path}"
            raise ConfigurationError(msg) from None
        except json.JSONDecodeError as exc:
            msg = f"Language catalog {path} is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc

        if not isinstance(entries, list):
            msg = f"Language catalog {path} must be a JSON list"
            raise ConfigurationError(msg)

        locales: list[str] = []
        for entry in entries:
            locale = entry.get("locale") if isinstance(entry, dict) else entry
            if not isinstance(locale, str) or not locale:
                msg = f"Language catalog {path} has an entry without a locale: {entry!r}"
                raise ConfigurationError(msg)
            locales.append(locale)
        return cls(tuple(locales))
