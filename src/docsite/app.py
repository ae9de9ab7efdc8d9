"""The docsite ASGI application.

``create_site`` registers routes and middleware on a ``Site``; the first
request (or the lifespan startup) compiles them into a ``Router`` and a
middleware tuple, after which registration is closed. Production workers
share one ``Site``, so compilation happens under a lock.
"""

import logging
import threading

from docsite._internal.asgi import Receive, Scope, Send
from docsite._internal.types import Handler, Hook
from docsite.config import SiteConfig
from docsite.middleware.protocol import Middleware, Next
from docsite.routing.route import Route
from docsite.routing.router import Router
from docsite.server.handler import build_pipeline, handle_request

logger = logging.getLogger("docsite.server")

DEFAULT_METHODS = frozenset({"GET", "HEAD"})


class Site:
    """Routes, middleware and shutdown hooks for one documentation site.

    ``app_path`` is the import string pounce's reloader uses to rebuild
    the site in development.
    """

    __slots__ = (
        "_lock",
        "_middleware",
        "_pipeline",
        "_router",
        "_routes",
        "_shutdown_hooks",
        "app_path",
        "config",
    )

    def __init__(self, config: SiteConfig | None = None, *, app_path: str | None = None) -> None:
        self.config: SiteConfig = config or SiteConfig()
        self.app_path = app_path
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._shutdown_hooks: list[Hook] = []
        self._lock = threading.Lock()
        self._router: Router | None = None
        self._pipeline: Next | None = None

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> None:
        """Serve *path* with *handler*; GET and HEAD unless *methods* says otherwise."""
        self._check_open()
        allowed = frozenset(m.upper() for m in methods) if methods else DEFAULT_METHODS
        self._routes.append(Route(path=path, handler=handler, methods=allowed, name=name))

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*; the first one added sees the request first."""
        self._check_open()
        self._middleware.append(middleware)

    def on_shutdown(self, hook: Hook) -> None:
        self._check_open()
        self._shutdown_hooks.append(hook)

    def compile(self) -> Router:
        """Build the route table and pipeline once. Registration is closed afterwards."""
        if self._router is None:
            with self._lock:
                if self._router is None:
                    router = Router(self._routes)
                    self._pipeline = build_pipeline(router, tuple(self._middleware))
                    self._router = router
        return self._router

    @property
    def routes(self) -> list[Route]:
        return self.compile().routes

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with pounce until interrupted."""
        from docsite.server.serve import serve

        self.compile()
        serve(self, host=host, port=port)

    async def shutdown(self) -> None:
        for hook in self._shutdown_hooks:
            await hook()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        self.compile()
        assert self._pipeline is not None
        await handle_request(
            scope,
            receive,
            send,
            pipeline=self._pipeline,
            debug=not self.config.production,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self.compile()
                except Exception as exc:
                    logger.exception("site failed to compile")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    def _check_open(self) -> None:
        if self._router is not None:
            msg = (
                "Cannot modify the site after it has started serving requests. "
                "Register routes, middleware and hooks before the first request."
            )
            raise RuntimeError(msg)
