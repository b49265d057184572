# === FILE: site_spider/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from site_spider.config import CrawlerConfig
from site_spider.crawler.context import RunContext
from site_spider.crawler.fetcher import Fetcher
from site_spider.crawler.frontier import Frontier, HostLimiter, Throttle
from site_spider.crawler.models import ASSETS, PRIMARY, Category, DiscoveryEvent, FetchResult, FrontierRequest
from site_spider.crawler.pipeline import (
    AssetSignals,
    Outcome,
    PageSignals,
    classify,
    extract_asset,
    extract_page,
    linkfinder_candidates,
)
from site_spider.crawler.urls import hostname, resolve, unminified
from site_spider.parser.patterns import DEFAULT_PATTERNS, PatternSet
from site_spider.parser.robots_parser import robots_paths
from site_spider.parser.sitemap_parser import SITEMAP_PATHS, parse_sitemap
from site_spider.sinks import EventSink

__all__ = ("SEED_DEPTH", "CrawlStats", "Crawler")

#: depth of the seed URL; children are one hop deeper
SEED_DEPTH = 1


@dataclass(slots=True)
class CrawlStats:
    site: str
    pages: int
    assets: int
    duration: float


class Crawler:
    """Two-frontier crawler: pages inside the scope, assets anywhere.

    Usage::

        async with Crawler(config, sink) as crawler:
            stats = await crawler.crawl()
    """

    def __init__(
        self,
        config: CrawlerConfig,
        sink: EventSink,
        *,
        patterns: PatternSet = DEFAULT_PATTERNS,
    ) -> None:
        self.config = config
        self.patterns = patterns
        self.ctx = RunContext.create(config, sink)
        self.logger = logging.getLogger("SiteSpider")
        self.fetcher: Optional[Fetcher] = None
        self.pages: Optional[Frontier] = None
        self.assets: Optional[Frontier] = None
        self.limiter = HostLimiter(config.parallelism)

    async def __aenter__(self) -> Crawler:
        session = self.ctx.open_session()
        try:
            self._build(session)
        except BaseException:
            await self.ctx.close()
            raise
        return self

    def _build(self, session) -> None:
        self.fetcher = Fetcher(session, self.config)
        # both frontiers hit the same hosts: one delay and one parallelism bound
        throttle = Throttle(self.config.delay, self.config.random_delay)
        scope = self.ctx.scope
        self.pages = Frontier(
            PRIMARY,
            self.fetcher,
            handler=self._handle_page,
            seen=self.ctx.filters.urls,
            denylist=scope.denylist,
            scope=scope,
            parallelism=self.config.parallelism,
            max_depth=self.config.max_depth,
            throttle=throttle,
            limiter=self.limiter,
        )
        self.assets = Frontier(
            ASSETS,
            self.fetcher,
            handler=self._handle_asset,
            seen=self.ctx.filters.asset_fetches,
            denylist=scope.denylist,
            scope=None,
            parallelism=self.config.parallelism,
            max_depth=self.config.max_depth,
            throttle=throttle,
            limiter=self.limiter,
        )

    async def __aexit__(self, exc_type, exc, tb) -> None:
        for frontier in (self.pages, self.assets):
            if frontier is not None:
                await frontier.close()
        await self.ctx.close()

    # ------------------------------------------------------------------ #
    # Run                                                                #
    # ------------------------------------------------------------------ #

    async def crawl(self) -> CrawlStats:
        """Crawl until both frontiers are idle.

        URLs taken from robots.txt and sitemaps enter at the seed depth
        (``SEED_DEPTH``), not one hop below the page that listed them.
        """
        if self.pages is None or self.assets is None:
            raise RuntimeError("Crawler must be used as an async context manager")
        site = self.ctx.site
        start = time.monotonic()

        self.pages.submit(site, SEED_DEPTH, force=True)
        self.pages.start()
        self.assets.start()

        if self.config.robots:
            await self._seed_from_robots()
        if self.config.sitemap:
            await self._seed_from_sitemaps()

        await self._wait_idle()

        duration = time.monotonic() - start
        stats = CrawlStats(site, self.pages.fetched, self.assets.fetched, duration)
        self.logger.info(
            "Finished %s: %d pages, %d assets in %.2f s", site, stats.pages, stats.assets, duration
        )
        return stats

    async def _wait_idle(self) -> None:
        # assets can feed pages and pages can feed assets
        while True:
            await self.pages.join()
            await self.assets.join()
            if self.pages.idle and self.assets.idle:
                return

    def _emit(self, category: Category, source: str, payload: str, **extra: Optional[int]) -> None:
        self.ctx.emit(DiscoveryEvent(category, source, payload, **extra))

    # ------------------------------------------------------------------ #
    # Pages                                                              #
    # ------------------------------------------------------------------ #

    async def _handle_page(self, request: FrontierRequest, result: FetchResult) -> None:
        outcome = classify(result)
        if outcome is Outcome.SUPPRESSED:
            self.logger.debug(
                "Error request: %s - Status code: %s - Error: %s", result.url, result.status, result.error
            )
            return
        if outcome is Outcome.REPORTED:
            self._emit(Category.URL, result.url, result.url, status=result.status)
            return
        signals = extract_page(result, self.ctx.scope.domain, self.patterns)
        self._dispatch_page(request, signals)

    def _dispatch_page(self, request: FrontierRequest, signals: PageSignals) -> None:
        filters = self.ctx.filters
        url = signals.url
        self._emit(Category.URL, url, url, status=signals.status, length=signals.length)
        self._dispatch_leaks(url, signals.subdomains, signals.buckets)

        if signals.has_form and filters.forms.check_and_mark(url):
            self._emit(Category.FORM, url, url)
        if signals.has_upload and filters.upload_forms.check_and_mark(url):
            self._emit(Category.UPLOAD_FORM, url, url)

        for script in signals.assets:
            if not filters.scripts.check_and_mark(script):
                continue
            self._emit(Category.JAVASCRIPT, url, script)
            original = unminified(script)
            if original:
                self.assets.submit(original, request.depth, referer=url)
            self.assets.submit(script, request.depth, referer=url)

        for link in signals.links:
            self.pages.submit(link, request.depth + 1, referer=url)

    def _dispatch_leaks(self, source: str, subdomains: List[str], buckets: List[str]) -> None:
        for sub in subdomains:
            if self.ctx.filters.subdomains.check_and_mark(sub):
                self._emit(Category.SUBDOMAIN, source, sub)
        for bucket in buckets:
            if self.ctx.filters.buckets.check_and_mark(bucket):
                self._emit(Category.AWS_S3, source, bucket)

    # ------------------------------------------------------------------ #
    # Assets                                                             #
    # ------------------------------------------------------------------ #

    async def _handle_asset(self, request: FrontierRequest, result: FetchResult) -> None:
        if result.status != 200:
            self.logger.debug("Asset %s -> HTTP %s", result.url, result.status)
            return
        signals = extract_asset(result, self.ctx.scope.domain, self.patterns)
        self._dispatch_asset(request, signals)

    def _dispatch_asset(self, request: FrontierRequest, signals: AssetSignals) -> None:
        self._dispatch_leaks(signals.url, signals.subdomains, signals.buckets)
        script_in_scope = self.ctx.scope.in_scope(signals.url)
        for path in signals.paths:
            self._emit(Category.LINKFINDER, signals.url, path)
            for candidate in linkfinder_candidates(path, self.ctx.site, signals.url, script_in_scope):
                self.pages.submit(candidate, request.depth + 1, referer=signals.url)

    # ------------------------------------------------------------------ #
    # robots.txt / sitemap.xml                                           #
    # ------------------------------------------------------------------ #

    async def _fetch_direct(self, url: str) -> FetchResult:
        async with self.limiter.slot(hostname(url)):
            return await self.fetcher.fetch(url)

    async def _seed_from_robots(self) -> None:
        robots_url = resolve("/robots.txt", self.ctx.site)
        if not robots_url:
            return
        result = await self._fetch_direct(robots_url)
        if result.status != 200:
            self.logger.debug("robots.txt %s -> HTTP %s", robots_url, result.status)
            return
        for path in robots_paths(result.body):
            url = resolve(path, self.ctx.site)
            if url:
                self._emit(Category.ROBOTS, robots_url, url)
                self.pages.submit(url, SEED_DEPTH, referer=robots_url)

    async def _seed_from_sitemaps(self) -> None:
        todo = [u for u in (resolve(p, self.ctx.site) for p in SITEMAP_PATHS) if u]
        visited = set()
        while todo:
            sitemap_url = todo.pop(0)
            if sitemap_url in visited:
                continue
            visited.add(sitemap_url)
            result = await self._fetch_direct(sitemap_url)
            if result.status != 200:
                continue
            sitemap = parse_sitemap(result.body)
            for nested in sitemap.sitemaps:
                url = resolve(nested, sitemap_url)
                if url and self.ctx.scope.in_scope(url):
                    todo.append(url)
            for loc in sitemap.urls:
                url = resolve(loc, sitemap_url)
                if url:
                    self._emit(Category.SITEMAP, sitemap_url, url)
                    self.pages.submit(url, SEED_DEPTH, referer=sitemap_url)
