"""Kida environment setup.

Creates the kida Environment for the site's template directory. The
environment is created once per renderer build and shared by every
request rendered with that build.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader

from docsite.templating.filters import BUILTIN_FILTERS, BUILTIN_GLOBALS


def create_environment(
    template_dir: Path,
    *,
    auto_reload: bool = False,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment rooted at *template_dir*.

    Pages and the layout are HTML, so autoescaping is always on; values
    that are already markup (rendered pages, resource tags) are passed
    as ``Markup``.
    """
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=True,
        auto_reload=auto_reload,
    )

    env.update_filters(BUILTIN_FILTERS)
    if filters:
        env.update_filters(dict(filters))

    for name, value in BUILTIN_GLOBALS.items():
        env.add_global(name, value)
    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env
