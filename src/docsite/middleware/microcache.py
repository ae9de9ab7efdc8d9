"""Whole-response micro-cache for rendered pages.

Pages carry no per-user content, so a rendered response can be replayed
for every request with the same URL for a short while. The store is a
cachetools ``TTLCache``: entries expire a fixed time after they were
stored and the least recently used one goes first under size pressure.
Production workers share the cache, so every access holds its lock.
Concurrent misses for the same URL are not coalesced.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import replace

from cachetools import TTLCache

from docsite.http.request import Request
from docsite.http.response import Response
from docsite.middleware.protocol import Next

logger = logging.getLogger("docsite.cache")

CACHE_HEADER = "X-Micro-Cache"

# Returns the cache key for a request, or None to bypass the cache
type CacheKey = Callable[[Request], str | None]


class MicroCache:
    """Middleware that replays stored responses for cacheable requests.

    Only ``200`` responses are stored. Stored responses are replayed
    unchanged apart from the ``X-Micro-Cache`` marker header. A conditional
    request that is fresh against a stored response gets a 304.

    Usage::

        site.add_middleware(MicroCache(micro_cache_key(True), ttl=600))
    """

    __slots__ = ("_key", "_lock", "_store", "hits", "misses")

    def __init__(
        self,
        key: CacheKey,
        *,
        ttl: float = 600,
        max_entries: int = 500,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._key = key
        self._store: TTLCache[str, Response] = TTLCache(maxsize=max_entries, ttl=ttl, timer=timer)
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            self._store.expire()
            return len(self._store)

    def get(self, key: str) -> Response | None:
        with self._lock:
            response = self._store.get(key)
            if response is None:
                self.misses += 1
            else:
                self.hits += 1
            return response

    def set(self, key: str, response: Response) -> None:
        with self._lock:
            self._store[key] = response

    def log_stats(self) -> None:
        logger.info(
            "micro-cache: %d entries, %d hits, %d misses", len(self), self.hits, self.misses
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        key = self._key(request)
        if key is None:
            return await next(request)

        cached = self.get(key)
        if cached is not None:
            logger.debug("micro-cache hit: %s", key)
            if request.is_fresh(dict(cached.headers)):
                return replace(cached, body="", status=304).with_header(CACHE_HEADER, "HIT")
            return cached.with_header(CACHE_HEADER, "HIT")

        response = await next(request)
        if response.status == 200:
            self.set(key, response)
        return response.with_header(CACHE_HEADER, "MISS")
