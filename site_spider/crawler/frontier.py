# site_spider/crawler/frontier.py
"""
Frontier scheduler: a depth-bounded, throttled asyncio worker pool.

The same class serves as the primary page crawler (constructed with a
:class:`~site_spider.crawler.scope.Scope`) and as the asset collector
(``scope=None``: any host, denylist still applies). Both share one
:class:`Throttle` and one :class:`HostLimiter`.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, Dict, List, Optional

from site_spider.crawler.dedup import StringFilter
from site_spider.crawler.fetcher import Fetcher
from site_spider.crawler.models import FetchResult, FrontierRequest
from site_spider.crawler.scope import Denylist, Scope
from site_spider.crawler.urls import hostname

Handler = Callable[[FrontierRequest, FetchResult], Awaitable[None]]


class Throttle:
    """Per-host politeness: spaces dispatches by ``delay + uniform(0, random_delay)``."""

    def __init__(self, delay: float = 0.0, random_delay: float = 0.0) -> None:
        self.delay = delay
        self.random_delay = random_delay
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last: Dict[str, float] = {}

    @property
    def enabled(self) -> bool:
        return self.delay > 0 or self.random_delay > 0

    def interval(self) -> float:
        jitter = random.uniform(0, self.random_delay) if self.random_delay > 0 else 0.0
        return self.delay + jitter

    async def wait(self, host: str) -> None:
        if not self.enabled:
            return
        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            last = self._last.get(host)
            if last is not None:
                wait = self.interval() - (time.monotonic() - last)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last[host] = time.monotonic()


class HostLimiter:
    """At most *parallelism* requests in flight per host, across every frontier sharing it."""

    def __init__(self, parallelism: int = 5) -> None:
        self.parallelism = max(1, parallelism)
        self._slots: Dict[str, asyncio.Semaphore] = {}

    def slot(self, host: str) -> asyncio.Semaphore:
        return self._slots.setdefault(host, asyncio.Semaphore(self.parallelism))


class Frontier:
    """Queue + workers for one kind of fetch (pages or assets)."""

    def __init__(
        self,
        name: str,
        fetcher: Fetcher,
        *,
        handler: Handler,
        seen: StringFilter,
        denylist: Denylist,
        scope: Optional[Scope] = None,
        parallelism: int = 5,
        max_depth: int = 0,
        throttle: Optional[Throttle] = None,
        limiter: Optional[HostLimiter] = None,
    ) -> None:
        self.name = name
        self.fetcher = fetcher
        self.handler = handler
        self.seen = seen
        self.denylist = denylist
        self.scope = scope
        self.parallelism = max(1, parallelism)
        self.max_depth = max_depth
        self.throttle = throttle or Throttle()
        self.limiter = limiter or HostLimiter(self.parallelism)
        self.logger = logging.getLogger("SiteSpider")
        self.fetched = 0
        self._queue: asyncio.Queue[FrontierRequest] = asyncio.Queue()
        self._pending = 0
        self._workers: List[asyncio.Task[None]] = []

    # ------------------------------------------------------------------ #
    # Submission                                                         #
    # ------------------------------------------------------------------ #

    def accepts(self, url: str, depth: int) -> bool:
        """Depth bound, denylist and (if set) scope; no dedup side effects."""
        if self.max_depth and depth > self.max_depth:
            return False
        if self.denylist.is_denied(url):
            return False
        if self.scope is not None and not self.scope.in_scope(url):
            return False
        return True

    def submit(
        self,
        url: str,
        depth: int,
        *,
        referer: Optional[str] = None,
        force: bool = False,
    ) -> bool:
        """Queue *url* unless filtered or already seen. Returns True if queued."""
        if not force:
            if not self.accepts(url, depth):
                self.logger.debug("[%s] filtered %s (depth %d)", self.name, url, depth)
                return False
            if not self.seen.check_and_mark(url):
                return False
        else:
            self.seen.check_and_mark(url)
        self._pending += 1
        self._queue.put_nowait(FrontierRequest(url, depth, self.name, referer))
        return True

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #

    @property
    def idle(self) -> bool:
        return self._pending == 0

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"{self.name}-worker-{i}")
            for i in range(self.parallelism)
        ]

    async def join(self) -> None:
        await self._queue.join()

    async def close(self) -> None:
        for w in self._workers:
            w.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    # ------------------------------------------------------------------ #
    # Workers                                                            #
    # ------------------------------------------------------------------ #

    async def _worker(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                await self._process(request)
            except asyncio.CancelledError:
                raise
            except Exception:
                self.logger.exception("[%s] failed to process %s", self.name, request.url)
            finally:
                self._pending -= 1
                self._queue.task_done()

    async def _process(self, request: FrontierRequest) -> None:
        host = hostname(request.url)
        async with self.limiter.slot(host):
            await self.throttle.wait(host)
            result = await self.fetcher.fetch(
                request.url, referer=request.referer, seen=self.seen.check_and_mark
            )
        self.fetched += 1
        await self.handler(request, result)
