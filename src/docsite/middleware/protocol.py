"""The request pipeline's calling convention.

Every stage of the site (static mounts, the redirect table, the
micro-cache) is an async callable that gets the request and the rest of
the pipeline, and either answers itself or awaits ``next``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from docsite.http.request import Request
from docsite.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Plain ``async def stage(request, next)`` functions satisfy this too::

        async def server_header(request: Request, next: Next) -> Response:
            return (await next(request)).with_header("Server", "docsite")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
