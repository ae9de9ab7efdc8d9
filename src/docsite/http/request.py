"""Immutable view of one HTTP request.

Everything the site routes and negotiates on (method, path, query,
headers, cookies, host) is fixed when the request is built from the
ASGI scope. Only the body is read lazily, for the translation API.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from docsite._internal.asgi import Receive, Scope
from docsite.http.accept import negotiate_language
from docsite.http.cookies import parse_cookies
from docsite.http.freshness import is_fresh
from docsite.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    method: str
    path: str
    query_string: str
    headers: Headers
    cookies: Mapping[str, str]
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    http_version: str = "1.1"
    path_params: dict[str, str] = field(default_factory=dict)
    _receive: Receive | None = field(default=None, repr=False, compare=False)
    # Filled by the first body() call; shared with with_path_params() copies
    _body: list[bytes] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        headers = Headers(tuple(scope.get("headers", ())))
        server, client = scope.get("server"), scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=headers,
            cookies=parse_cookies(headers.get("cookie", "")),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            http_version=scope.get("http_version", "1.1"),
            _receive=receive,
        )

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        return f"{self.path}?{self.query_string}" if self.query_string else self.path

    @property
    def hostname(self) -> str:
        """Public host name without the port.

        The first ``X-Forwarded-Host`` entry wins over ``Host``; with
        neither, the address the server is bound to.
        """
        host = self.headers.get("x-forwarded-host") or self.headers.get("host")
        if not host:
            return self.server[0] if self.server else ""
        host = host.split(",", 1)[0].strip()
        if host.startswith("["):
            # [::1]:8095
            return host[: host.index("]") + 1]
        return host.partition(":")[0]

    def accepts_languages(self, available: Sequence[str]) -> str | None:
        """Best entry of *available* for ``Accept-Language`` (the first one when absent)."""
        return negotiate_language(self.headers.get("accept-language"), available)

    def is_fresh(self, response_headers: Mapping[str, str]) -> bool:
        """Whether a conditional GET/HEAD can be answered with 304."""
        return self.method in ("GET", "HEAD") and is_fresh(self.headers, response_headers)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        return replace(self, path_params=path_params)

    async def body(self) -> bytes:
        if not self._body and self._receive is not None:
            chunks = []
            more = True
            while more:
                message = await self._receive()
                chunks.append(message.get("body", b""))
                more = message.get("more_body", False)
            self._body.append(b"".join(chunks))
        return self._body[0] if self._body else b""

    async def json(self) -> Any:
        return json.loads(await self.body())
