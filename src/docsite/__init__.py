"""Docsite: server-rendered documentation site.

Language-prefixed pages rendered with kida, a redirect table for moved
pages, and a short-lived micro-cache in front of the renderer.

Basic usage::

    from docsite import SiteConfig, create_site

    site = create_site(SiteConfig.from_env())
    site.run()

Or from the command line::

    docsite serve --production
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DocsiteError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "Site",
    "SiteConfig",
    "create_site",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import docsite`` fast while providing a clean top-level API.
    """
    if name == "Site":
        from docsite.app import Site

        return Site

    if name == "SiteConfig":
        from docsite.config import SiteConfig

        return SiteConfig

    if name == "create_site":
        from docsite.site.factory import create_site

        return create_site

    if name == "Request":
        from docsite.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from docsite.http import response

        return getattr(response, name)

    if name in ("DocsiteError", "ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound"):
        from docsite import errors

        return getattr(errors, name)

    msg = f"module 'docsite' has no attribute {name!r}"
    raise AttributeError(msg)
