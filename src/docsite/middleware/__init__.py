"""Pipeline stages that run before routing.

    StaticFiles              files under a URL prefix
    RedirectTableMiddleware  301 for moved pages
    MicroCache               replays rendered pages for a short time
"""

from docsite.middleware.microcache import MicroCache
from docsite.middleware.protocol import Middleware, Next
from docsite.middleware.redirects import RedirectTableMiddleware
from docsite.middleware.static import StaticFiles

__all__ = [
    "Middleware",
    "MicroCache",
    "Next",
    "RedirectTableMiddleware",
    "StaticFiles",
]
