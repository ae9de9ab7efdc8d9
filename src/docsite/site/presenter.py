"""Turn render errors into responses."""

import logging
from collections.abc import Mapping
from typing import Any, assert_never

from docsite.http.request import Request
from docsite.http.response import PLAIN_TEXT, Redirect, Response
from docsite.rendering.result import PageNotFound, RedirectSignal, RenderError, RenderFailure
from docsite.server.debug_page import render_debug_page
from docsite.server.terminal_errors import log_error

logger = logging.getLogger("docsite.site")

NOT_FOUND_BODY = "404 | Page Not Found"


class ErrorPresenter:
    """Answer every kind of render error; never raises.

    Render failures get the diagnostic page in every mode: the site is
    documentation tooling and the page is meant for whoever operates it.
    """

    __slots__ = ()

    def present(
        self,
        error: RenderError,
        request: Request,
        context: Mapping[str, Any] | None = None,
    ) -> Response:
        match error:
            case RedirectSignal(url=url):
                return Redirect(url).to_response()
            case PageNotFound():
                return Response(body=NOT_FOUND_BODY, status=404, content_type=PLAIN_TEXT)
            case RenderFailure(exception=exc):
                return self._failure(exc, request, context)
            case _:
                assert_never(error)

    def _failure(
        self,
        exc: BaseException,
        request: Request,
        context: Mapping[str, Any] | None,
    ) -> Response:
        log_error(exc, request)
        try:
            body = render_debug_page(exc, request, context=context)
        except Exception:
            logger.exception("Diagnostic page failed for %s", request.url)
            return Response(body="Internal Server Error", status=500, content_type=PLAIN_TEXT)
        logger.info("Error handled!")
        return Response(body=body, status=500)
