"""Server-side page rendering on top of kida.

The renderer turns a ``RenderContext`` into HTML, or into one of the
typed render errors the error presenter knows how to answer.
"""

from docsite.rendering.context import RenderContext
from docsite.rendering.renderer import PageRenderer
from docsite.rendering.result import (
    PageNotFound,
    RedirectSignal,
    RenderError,
    Rendered,
    RenderFailure,
    RenderResult,
)
from docsite.rendering.slot import BuildWatcher, RendererSlot

__all__ = [
    "BuildWatcher",
    "PageNotFound",
    "PageRenderer",
    "RedirectSignal",
    "RenderContext",
    "RenderError",
    "RenderFailure",
    "RenderResult",
    "Rendered",
    "RendererSlot",
]
