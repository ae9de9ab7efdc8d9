"""Render outcomes.

A render either produces HTML or fails in one of three ways. Callers
match on the concrete type; nothing here is raised.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rendered:
    """Successful render."""

    html: str


@dataclass(frozen=True, slots=True)
class RedirectSignal:
    """The page asked to be served from another URL."""

    url: str


@dataclass(frozen=True, slots=True)
class PageNotFound:
    """No page exists for the requested path."""

    path: str = ""


@dataclass(frozen=True, slots=True)
class RenderFailure:
    """The page exists but rendering it raised."""

    exception: BaseException


type RenderError = RedirectSignal | PageNotFound | RenderFailure
type RenderResult = Rendered | RenderError
