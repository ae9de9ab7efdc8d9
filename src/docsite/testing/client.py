"""In-process client that drives a ``Site`` through its ASGI interface.

Responses come back as the production ``Response`` type, with every
header the site sent (each ``Set-Cookie`` included) in ``headers``.
"""

from __future__ import annotations

import json as json_module
from typing import Any

from docsite._internal.asgi import Message, Scope
from docsite.app import Site
from docsite.http.response import Response


def build_scope(method: str, target: str, headers: dict[str, str]) -> Scope:
    """HTTP scope for *target* (path plus optional query), as pounce would send it."""
    path, _, query = target.partition("?")
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
    if b"host" not in {name for name, _ in raw}:
        raw.append((b"host", b"testserver"))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": raw,
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class TestClient:
    """Usage::

        async with TestClient(site) as client:
            response = await client.get("/en/", headers={"Accept-Language": "fr"})
    """

    __test__ = False
    __slots__ = ("site",)

    def __init__(self, site: Site) -> None:
        self.site = site

    async def __aenter__(self) -> TestClient:
        self.site.compile()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.site.shutdown()

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """POST *body*, or *json* encoded with a JSON content type."""
        merged = dict(headers or {})
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            merged.setdefault("content-type", "application/json")
        return await self.request("POST", path, headers=merged, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        pending = [{"type": "http.request", "body": body, "more_body": False}]
        sent: list[Message] = []

        async def receive() -> Message:
            return pending.pop() if pending else {"type": "http.disconnect"}

        async def send(message: Message) -> None:
            sent.append(message)

        await self.site(build_scope(method, path, headers or {}), receive, send)
        return _collect(sent)


def _collect(messages: list[Message]) -> Response:
    start = next(m for m in messages if m["type"] == "http.response.start")
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")
    content_type = "text/html; charset=utf-8"
    headers: list[tuple[str, str]] = []
    for raw_name, raw_value in start.get("headers", []):
        name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
        if name == "content-type":
            content_type = value
        else:
            headers.append((name, value))
    return Response(body=body, status=start["status"], content_type=content_type, headers=tuple(headers))
