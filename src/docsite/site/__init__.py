"""The documentation site: language routing, redirects, rendering wiring.

Build an ASGI application with ``docsite.site.factory.create_site``.
"""
