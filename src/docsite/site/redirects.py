"""Permanent redirect table for moved documentation pages."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from docsite.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RedirectTable:
    """Immutable ``old path -> new path`` mapping.

    Lookups match the request path exactly; the query string is never
    part of the key.
    """

    entries: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, path: str) -> str | None:
        """Return the redirect target for *path*, if any."""
        return self.entries.get(path)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_mapping(cls, entries: Mapping[str, str]) -> RedirectTable:
        return cls(MappingProxyType(dict(entries)))

    @classmethod
    def from_file(cls, path: Path) -> RedirectTable:
        """Load the table from a JSON object; a missing file is an empty table."""
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Redirect table {path} is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            msg = f"Redirect table {path} must map path strings to path strings"
            raise ConfigurationError(msg)
        return cls.from_mapping(data)
