"""Fixed file routes: the sitemap and release notes pages."""

from pathlib import Path

import anyio

from docsite.errors import NotFound
from docsite.http.request import Request
from docsite.http.response import Response

XML = "text/xml; charset=utf-8"
RELEASE_HTML = "text/html; charset=utf-8"


async def read_file(directory: Path, name: str) -> bytes:
    """Read *name* from *directory*; 404 when missing or outside it."""
    root = directory.resolve()
    path = (root / name).resolve()
    if not path.is_relative_to(root) or not path.is_file():
        raise NotFound(f"No file {name!r}")
    return await anyio.Path(path).read_bytes()


class FileRoutes:
    """``/sitemap.xml`` as XML and ``/releases/{release}`` as HTML."""

    __slots__ = ("_public_dir", "_releases_dir")

    def __init__(self, public_dir: Path, releases_dir: Path) -> None:
        self._public_dir = public_dir
        self._releases_dir = releases_dir

    async def sitemap(self, request: Request) -> Response:
        body = await read_file(self._public_dir, "sitemap.xml")
        return Response(body=body, content_type=XML)

    async def release(self, request: Request) -> Response:
        body = await read_file(self._releases_dir, request.path_params["release"])
        return Response(body=body, content_type=RELEASE_HTML)
