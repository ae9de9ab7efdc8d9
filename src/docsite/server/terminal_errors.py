"""Terminal formatting for render failures.

kida errors are printed with their own compact format inside a banner;
anything else gets a short traceback of application frames. The
``DOCSITE_TRACEBACK`` environment variable (``compact``, ``full`` or
``minimal``) picks the style for non-template errors.

Example::

    -- Template Error -----------------------------------------------
    Undefined variable 'titel' in pages/index.html:3
      Page:  GET /en/
    -----------------------------------------------------------------
"""

from __future__ import annotations

import logging
import os
import traceback
from typing import TYPE_CHECKING

from docsite.server.debug_page import is_app_frame

if TYPE_CHECKING:
    from docsite.http.request import Request

logger = logging.getLogger("docsite.server")

_BANNER_WIDTH = 65


def is_template_error(exc: BaseException) -> bool:
    return "kida" in (type(exc).__module__ or "")


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    title = "-- Template Error "
    lines = [title + "-" * (_BANNER_WIDTH - len(title))]
    format_compact = getattr(exc, "format_compact", None)
    lines.append(format_compact() if callable(format_compact) else str(exc))
    if request is not None:
        lines.append(f"  Page:  {request.method} {request.url}")
    lines.append("-" * _BANNER_WIDTH)
    return "\n".join(lines)


def format_compact_traceback(exc: BaseException, *, limit: int = 5) -> str:
    """Exception summary plus the last *limit* application frames.

    Falls back to the innermost three frames when none belong to the app.
    """
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    shown = [f for f in frames if is_app_frame(f.filename)] or frames[-3:]
    lines = [f"{type(exc).__name__}: {exc}"]
    for frame in shown[-limit:]:
        lines.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
        if frame.line:
            lines.append(f"      {frame.line.strip()}")
    return "\n".join(lines)


def format_minimal_error(exc: BaseException) -> str:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    where = f" at {frames[-1].filename}:{frames[-1].lineno}" if frames else ""
    return f"{type(exc).__name__}{where}: {exc}"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log a 500-class failure in the configured terminal style."""
    prefix = f"500 {request.method} {request.url}" if request is not None else "Server error"

    if is_template_error(exc):
        logger.error("%s\n%s", prefix, format_template_error(exc, request))
        return

    style = os.environ.get("DOCSITE_TRACEBACK", "compact").lower()
    if style == "full":
        logger.error(prefix, exc_info=exc)
    elif style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
