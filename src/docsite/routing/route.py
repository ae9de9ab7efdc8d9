"""Route definitions and match results."""

from dataclasses import dataclass

from docsite._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """One path pattern bound to a handler for a set of methods.

    Patterns are ``/``-separated literals and ``{name}`` or
    ``{name:converter}`` placeholders; a ``path`` placeholder must come
    last and swallows the rest of the URL.
    """

    path: str
    handler: Handler
    methods: frozenset[str] = frozenset({"GET", "HEAD"})
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    path_params: dict[str, str]
