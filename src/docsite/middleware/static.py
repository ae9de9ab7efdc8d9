"""Static file serving middleware.

Serves files from a directory for matching URL prefixes. Supports
root-level serving (``prefix="/"``) with automatic index file resolution.

Falls through to the next handler for non-matching paths and for
files that don't exist, so application routes still see them.
"""

import mimetypes
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from docsite.http.freshness import http_date
from docsite.http.request import Request
from docsite.http.response import Response
from docsite.middleware.protocol import Next


def cache_control_for(max_age: int) -> str:
    """``Cache-Control`` value for a static mount with *max_age* seconds."""
    return f"public, max-age={max_age}"


class StaticFiles:
    """Middleware that serves static files from a directory.

    Files are served for paths matching the configured prefix.
    Non-matching paths fall through to the next handler.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        # Long-lived bundle assets
        site.add_middleware(StaticFiles(
            directory="./dist",
            prefix="/dist",
            max_age=60 * 60 * 24 * 30,
        ))

        # Root-level serving (favicon, robots.txt, sitemap.xml)
        site.add_middleware(StaticFiles(directory="./src/public", prefix="/"))
    """

    __slots__ = ("_cache_control", "_directory", "_exclude", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str | None = "index.html",
        max_age: int = 0,
        exclude: Callable[[str], bool] | None = None,
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control_for(max_age)
        # Relative paths left to the application routes
        self._exclude = exclude

        # Normalize prefix: ensure leading slash, strip trailing.
        # Root prefix "/" normalizes to "" (every path is a candidate).
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def prefix(self) -> str:
        return self._prefix or "/"

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path

        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                return await next(request)
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        if self._exclude is not None and self._exclude(relative):
            return await next(request)

        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return await next(request)

        if file_path.is_dir():
            if self._index is None:
                return await next(request)
            index_path = file_path / self._index
            if not index_path.is_file():
                return await next(request)
            # Directory URLs without a trailing slash redirect first
            if not path.endswith("/"):
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            return await next(request)

        return self._serve_file(request, file_path)

    def _serve_file(self, request: Request, file_path: Path) -> Response:
        """Read a file and build a response, answering 304 when fresh."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        stat = file_path.stat()
        validators = {
            "Last-Modified": http_date(datetime.fromtimestamp(int(stat.st_mtime), UTC)),
            "Cache-Control": self._cache_control,
        }
        if request.is_fresh(validators):
            return Response(body="", status=304, content_type=content_type).with_headers(
                validators
            )

        body = file_path.read_bytes()
        return Response(body=body, content_type=content_type).with_headers(validators)
