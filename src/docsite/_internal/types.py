"""Handler and hook signatures shared across docsite modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from docsite.http.request import Request
    from docsite.http.response import Redirect, Response

# Route handler: receives the request, returns a Response or Redirect
Handler: TypeAlias = Callable[["Request"], Awaitable["Response | Redirect"]]

# Shutdown hook: awaited with no arguments
Hook: TypeAlias = Callable[[], Awaitable[None]]
