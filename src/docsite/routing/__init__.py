"""URL routing for the site: route records and the segment trie."""

from docsite.routing.route import Route, RouteMatch
from docsite.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
