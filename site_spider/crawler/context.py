# site_spider/crawler/context.py
"""
Per-run context: everything the crawl shares, constructed explicitly and
passed by reference (no module-level mutable state).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from site_spider.config import CrawlerConfig
from site_spider.crawler.dedup import StringFilter
from site_spider.crawler.models import DiscoveryEvent
from site_spider.crawler.scope import Scope
from site_spider.logger import logger
from site_spider.sinks import EventSink


@dataclass
class DedupFilters:
    """One filter per discovery category."""

    urls: StringFilter = field(default_factory=lambda: StringFilter("urls"))
    forms: StringFilter = field(default_factory=lambda: StringFilter("forms"))
    upload_forms: StringFilter = field(default_factory=lambda: StringFilter("upload-forms"))
    scripts: StringFilter = field(default_factory=lambda: StringFilter("scripts"))
    subdomains: StringFilter = field(default_factory=lambda: StringFilter("subdomains"))
    buckets: StringFilter = field(default_factory=lambda: StringFilter("buckets"))
    # fetch-level dedup of the asset collector (script + unminified variants)
    asset_fetches: StringFilter = field(default_factory=lambda: StringFilter("asset-fetches"))


@dataclass
class RunContext:
    config: CrawlerConfig
    scope: Scope
    sink: EventSink
    session: Optional[ClientSession] = None
    filters: DedupFilters = field(default_factory=DedupFilters)

    @classmethod
    def create(cls, config: CrawlerConfig, sink: EventSink) -> RunContext:
        """Build the scope up front: a bad seed or blacklist fails here."""
        scope = Scope.for_site(config.seed, config.blacklist)
        logger.info("Crawling site: %s (domain %s)", config.seed, scope.domain)
        return cls(config=config, scope=scope, sink=sink)

    @property
    def site(self) -> str:
        return self.config.seed

    def open_session(self) -> ClientSession:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                connector=TCPConnector(ssl=False, limit=0),
                raise_for_status=False,
            )
        return self.session

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    def emit(self, event: DiscoveryEvent) -> None:
        """Hand *event* to the sink; sink failures are logged, never raised."""
        try:
            self.sink.emit(event)
        except Exception:
            logger.exception("Event sink failed on %s", event.render())
