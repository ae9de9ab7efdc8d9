"""Frozen HTTP responses.

Middleware never mutates a response; ``with_header``, ``with_headers``
and ``with_cookie`` return a copy, so a response stored in the
micro-cache can be replayed with different markers per request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from docsite.http.cookies import SetCookie

HTML = "text/html; charset=utf-8"
PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_cookie(self, name: str, value: str, **attributes: object) -> Response:
        """Add a ``Set-Cookie``; *attributes* are ``SetCookie`` fields."""
        cookie = SetCookie(name, value, **attributes)  # type: ignore[arg-type]
        return replace(self, cookies=(*self.cookies, cookie))

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of *name*, compared case-insensitively."""
        wanted = name.lower()
        if wanted == "content-type":
            return self.content_type
        return next((v for k, v in self.headers if k.lower() == wanted), default)

    def cookie(self, name: str) -> SetCookie | None:
        """The last ``Set-Cookie`` for *name*."""
        return next((c for c in reversed(self.cookies) if c.name == name), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """A handler's redirect; 302 unless the redirect table asks for 301."""

    url: str
    status: int = 302

    def to_response(self) -> Response:
        return Response(status=self.status).with_header("Location", self.url)
