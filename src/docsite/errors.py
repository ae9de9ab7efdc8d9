"""Docsite exception hierarchy.

Shared across Router, Site, handler, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class DocsiteError(Exception):
    """Base for all docsite-specific errors."""


class ConfigurationError(DocsiteError):
    """Raised when site configuration or a startup artifact is invalid.

    Typically raised while building the site, before the server accepts
    connections, so a broken deployment fails fast.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(DocsiteError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The ASGI handler
    catches these and turns them into a plain response with that status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class BadRequest(HTTPError):  # noqa: N818
    """400: the request payload could not be understood."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
