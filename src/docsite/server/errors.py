"""Map exceptions that escape the pipeline to responses.

Render failures never get here (the error presenter answers those);
this covers router errors and bugs in middleware or handlers.
"""

import logging

from docsite.errors import HTTPError
from docsite.http.request import Request
from docsite.http.response import PLAIN_TEXT, Response
from docsite.server.terminal_errors import log_error

logger = logging.getLogger("docsite.server")


def handle_http_error(exc: HTTPError, request: Request, debug: bool) -> Response:
    """Plain-text response carrying the error's status and headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug:
        detail = f"{exc.status}: {detail}"
    response = Response(body=detail, status=exc.status, content_type=PLAIN_TEXT)
    return response.with_headers(dict(exc.headers))


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """500 for an unexpected exception; the debug page in development."""
    log_error(exc, request)

    if debug:
        from docsite.server.debug_page import render_debug_page

        return Response(body=render_debug_page(exc, request), status=500)
    return Response(body="Internal Server Error", status=500, content_type=PLAIN_TEXT)
