"""The current renderer, and the dev-mode watcher that replaces it.

Production publishes one renderer at startup. In development the client
build keeps rewriting its manifest; the watcher notices and publishes a
fresh renderer. The watcher is driven by incoming requests, so it runs
on the same event loop as the handlers; requests that arrive before the
first build wait for it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

import anyio

from docsite.errors import ConfigurationError
from docsite.rendering.renderer import PageRenderer

logger = logging.getLogger("docsite.site")


class RendererSlot:
    """Holds the renderer requests should use right now."""

    __slots__ = ("_ready", "_renderer")

    def __init__(self, renderer: PageRenderer | None = None) -> None:
        self._renderer = renderer
        # Created lazily: an anyio Event needs a running event loop
        self._ready: anyio.Event | None = None

    @property
    def ready(self) -> bool:
        return self._renderer is not None

    def publish(self, renderer: PageRenderer) -> None:
        """Make *renderer* current and release any waiting requests."""
        self._renderer = renderer
        if self._ready is not None:
            self._ready.set()

    async def current(self) -> PageRenderer:
        """Return the current renderer, waiting for the first publish."""
        if self._renderer is None:
            if self._ready is None:
                self._ready = anyio.Event()
            await self._ready.wait()
        assert self._renderer is not None
        return self._renderer


class BuildWatcher:
    """Poll the client manifest and republish the renderer when it changes.

    A build that can't be loaded (half-written manifest, template syntax
    error) is logged and the previous renderer stays current.
    """

    __slots__ = ("_build", "_checked", "_interval", "_manifest_path", "_mtime", "_slot")

    def __init__(
        self,
        slot: RendererSlot,
        build: Callable[[], PageRenderer],
        manifest_path: Path,
        *,
        interval: float = 1.0,
    ) -> None:
        self._slot = slot
        self._build = build
        self._manifest_path = manifest_path
        self._interval = interval
        self._mtime: float | None = None
        self._checked: float | None = None

    def poll(self) -> bool:
        """Republish if the manifest changed since the last poll."""
        try:
            mtime = self._manifest_path.stat().st_mtime
        except FileNotFoundError:
            return False
        if mtime == self._mtime:
            return False

        try:
            renderer = self._build()
        except ConfigurationError as exc:
            logger.warning("Client build not ready: %s", exc)
            return False

        self._mtime = mtime
        self._slot.publish(renderer)
        logger.info("Renderer updated from %s", self._manifest_path.name)
        return True

    async def refresh(self) -> None:
        """Poll when due; until a first build loads, keep polling and wait."""
        now = time.monotonic()
        if self._checked is None or now - self._checked >= self._interval:
            self._checked = now
            self.poll()
        while not self._slot.ready:
            await anyio.sleep(self._interval)
            self._checked = time.monotonic()
            self.poll()
