"""Segment trie over the site's routes.

Built once from the full route list. Lookup walks the request path one
segment at a time, trying a literal child first, then the parameter
child, then a trailing catch-all, and backs out of a branch that dead-ends
further down (``/api/foo`` falls through ``/api/translation`` to the
localized page route).
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from docsite.errors import MethodNotAllowed, NotFound
from docsite.routing.params import CONVERTERS
from docsite.routing.route import Route, RouteMatch

type MethodTable = dict[str, Route]


def split_pattern(pattern: str) -> list[tuple[str, str | None]]:
    """``(literal, None)`` or ``(name, converter)`` for each pattern segment.

    >>> split_pattern("/releases/{release}")
    [('releases', None), ('release', 'str')]
    """
    pieces: list[tuple[str, str | None]] = []
    for part in filter(None, pattern.strip("/").split("/")):
        if not (part.startswith("{") and part.endswith("}")):
            pieces.append((part, None))
            continue
        name, _, converter = part[1:-1].partition(":")
        converter = converter or "str"
        if converter not in CONVERTERS:
            msg = f"Unknown path converter {converter!r} in route {pattern!r}"
            raise ValueError(msg)
        pieces.append((name, converter))
    return pieces


class _Node:
    __slots__ = ("literals", "param", "rest", "methods")

    def __init__(self) -> None:
        self.literals: dict[str, _Node] = {}
        # (name, full-match regex, child)
        self.param: tuple[str, re.Pattern[str], _Node] | None = None
        # (name, methods) for a trailing {name:path}
        self.rest: tuple[str, MethodTable] | None = None
        self.methods: MethodTable = {}


class Router:
    """Immutable route table.

    Usage::

        router = Router([Route("/sitemap.xml", files.sitemap), Route("/{lang:lang}", page)])
        router.match("GET", "/en")
    """

    __slots__ = ("_root", "_routes")

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._root = _Node()
        self._routes = tuple(routes)
        for route in self._routes:
            self._insert(route)

    @property
    def routes(self) -> list[Route]:
        """Routes in registration order."""
        return list(self._routes)

    def _insert(self, route: Route) -> None:
        node = self._root
        for name, converter in split_pattern(route.path):
            if converter == "path":
                if node.rest is None:
                    node.rest = (name, {})
                node.rest[1].update(dict.fromkeys(route.methods, route))
                return
            if converter is None:
                node = node.literals.setdefault(name, _Node())
                continue
            if node.param is None:
                node.param = (name, re.compile(f"(?:{CONVERTERS[converter]})"), _Node())
            node = node.param[2]
        node.methods.update(dict.fromkeys(route.methods, route))

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path*.

        Raises ``NotFound`` when no pattern fits the path and
        ``MethodNotAllowed`` (carrying ``Allow``) when one fits but
        not for this method.
        """
        segments = [segment for segment in path.split("/") if segment]
        found = _lookup(self._root, segments, {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")
        table, params = found
        route = table.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(table))
        return RouteMatch(route=route, path_params=params)


def _lookup(
    node: _Node, segments: list[str], params: dict[str, str]
) -> tuple[MethodTable, dict[str, str]] | None:
    if not segments:
        return (node.methods, params) if node.methods else None

    head, tail = segments[0], segments[1:]
    literal = node.literals.get(head)
    if literal is not None and (found := _lookup(literal, tail, params)):
        return found
    if node.param is not None:
        name, regex, child = node.param
        if regex.fullmatch(head) and (found := _lookup(child, tail, {**params, name: head})):
            return found
    if node.rest is not None:
        name, table = node.rest
        return table, {**params, name: "/".join(segments)}
    return None
