"""Translation editing API.

Mounted under ``/api/translation`` only when translating is enabled.
Messages for a locale live in ``<messages_dir>/<locale>.json`` as nested
objects; keys are addressed with dots (``"Vuetify.AppToolbar.docs"``).
"""

import json
import logging
from pathlib import Path
from typing import Any

import anyio

from docsite.errors import BadRequest, NotFound
from docsite.http.request import Request
from docsite.http.response import Response
from docsite.site.catalog import LanguageCatalog

logger = logging.getLogger("docsite.site")

JSON = "application/json"
PREFIX = "/api/translation"


def json_response(data: Any, status: int = 200) -> Response:
    return Response(body=json.dumps(data, ensure_ascii=False), status=status, content_type=JSON)


def set_nested(messages: dict[str, Any], key: str, value: str) -> dict[str, Any]:
    """Set a dotted *key* in *messages*, creating intermediate objects.

    Raises ``ValueError`` when a path segment is empty or an existing
    leaf would have to become an object.
    """
    parts = key.split(".")
    if not all(parts):
        msg = f"Invalid message key: {key!r}"
        raise ValueError(msg)

    node = messages
    for part in parts[:-1]:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            msg = f"{part!r} in {key!r} is a message, not a group"
            raise ValueError(msg)
        node = child
    node[parts[-1]] = value
    return messages


class TranslationAPI:
    """Handlers for listing, reading and updating locale messages."""

    __slots__ = ("_catalog", "_messages_dir")

    def __init__(self, catalog: LanguageCatalog, messages_dir: Path) -> None:
        self._catalog = catalog
        self._messages_dir = messages_dir

    def routes(self) -> list[tuple[str, Any, list[str]]]:
        """``(path, handler, methods)`` triples for registration."""
        return [
            (PREFIX, self.index, ["GET", "HEAD"]),
            (f"{PREFIX}/{{locale}}", self.show, ["GET", "HEAD"]),
            (f"{PREFIX}/{{locale}}", self.update, ["POST"]),
        ]

    def _path(self, locale: str) -> anyio.Path:
        if locale not in self._catalog:
            raise NotFound(f"Unknown locale {locale!r}")
        return anyio.Path(self._messages_dir / f"{locale}.json")

    async def _load(self, path: anyio.Path) -> dict[str, Any]:
        if not await path.exists():
            return {}
        return json.loads(await path.read_text(encoding="utf-8"))

    async def index(self, request: Request) -> Response:
        return json_response({"locales": list(self._catalog.locales)})

    async def show(self, request: Request) -> Response:
        path = self._path(request.path_params["locale"])
        return json_response(await self._load(path))

    async def update(self, request: Request) -> Response:
        locale = request.path_params["locale"]
        path = self._path(locale)

        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise BadRequest(f"Body is not JSON: {exc}") from exc
        if (
            not isinstance(payload, dict)
            or not isinstance(payload.get("key"), str)
            or not isinstance(payload.get("value"), str)
        ):
            raise BadRequest('Expected {"key": "<dotted.key>", "value": "<text>"}')

        messages = await self._load(path)
        try:
            set_nested(messages, payload["key"], payload["value"])
        except ValueError as exc:
            raise BadRequest(str(exc)) from exc

        await path.parent.mkdir(parents=True, exist_ok=True)
        await path.write_text(
            json.dumps(messages, ensure_ascii=False, indent=2) + "\n", encoding="utf-8"
        )
        logger.info("Updated %s message %s", locale, payload["key"])
        return json_response(messages)
