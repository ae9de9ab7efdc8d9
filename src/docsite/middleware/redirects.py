"""Permanent redirects for moved pages, applied before routing."""

import logging

from docsite.http.request import Request
from docsite.http.response import Redirect, Response
from docsite.middleware.protocol import Next
from docsite.site.redirects import RedirectTable

logger = logging.getLogger("docsite.site")


class RedirectTableMiddleware:
    """Answer 301 for any path listed in the redirect table.

    Runs ahead of language handling and the micro-cache, so a moved page
    never renders and never lands in the cache.
    """

    __slots__ = ("_table",)

    def __init__(self, table: RedirectTable) -> None:
        self._table = table

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method in ("GET", "HEAD"):
            target = self._table.lookup(request.path)
            if target is not None:
                logger.debug("301 %s -> %s", request.path, target)
                return Redirect(target, status=301).to_response()
        return await next(request)
