"""One HTTP exchange, from ASGI scope to ASGI messages.

The pipeline (built once per site) is the middleware folded around a final stage that
matches the route and calls its handler. ``HTTPError`` from any stage
becomes its status page; anything else becomes a 500.
"""

from collections.abc import Sequence

from docsite._internal.asgi import Receive, Scope, Send
from docsite.errors import HTTPError
from docsite.http.request import Request
from docsite.http.response import Redirect, Response
from docsite.middleware.protocol import Middleware, Next
from docsite.routing.router import Router
from docsite.server.errors import handle_http_error, handle_internal_error

# 1xx, 204 and 304 carry no message body
_BODYLESS = frozenset({204, 304})


def body_allowed(status: int) -> bool:
    return status >= 200 and status not in _BODYLESS


def build_pipeline(router: Router, middleware: Sequence[Middleware]) -> Next:
    async def route(request: Request) -> Response:
        match = router.match(request.method, request.path)
        result = await match.route.handler(request.with_path_params(match.path_params))
        return result.to_response() if isinstance(result, Redirect) else result

    pipeline: Next = route
    for stage in reversed(middleware):
        pipeline = _bind(stage, pipeline)
    return pipeline


def _bind(stage: Middleware, rest: Next) -> Next:
    async def call(request: Request) -> Response:
        return await stage(request, rest)

    return call


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
    debug: bool,
) -> None:
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    try:
        response = await pipeline(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    await send_response(response, send, head=request.method == "HEAD")


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Emit *response*; a HEAD reply keeps the GET headers, ``Content-Length`` included."""
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers += [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in response.headers]
    headers += [(b"set-cookie", c.to_header_value().encode("latin-1")) for c in response.cookies]

    body = b""
    if body_allowed(response.status):
        body = response.body_bytes
        headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send({"type": "http.response.start", "status": response.status, "headers": headers})
    await send({"type": "http.response.body", "body": b"" if head else body})
