# site_spider/crawler/fetcher.py
"""
Fetcher module: one GET per URL with header injection, proxy and a
host-restricted redirect policy. No retries: every URL is attempted once.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Tuple

from aiohttp import ClientError, ClientResponse, ClientSession

from site_spider.config import CrawlerConfig
from site_spider.crawler.agents import pick_user_agent
from site_spider.crawler.models import FetchResult
from site_spider.crawler.urls import hostname, resolve
from site_spider.logger import logger
from site_spider.utils import load_raw_request

REDIRECT_STATUS = frozenset({301, 302, 303, 307, 308})
MAX_REDIRECTS = 10


class Fetcher:
    """Performs HTTP GETs on behalf of both frontiers."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self.target_host = hostname(config.seed)
        self._headers: List[Tuple[str, str]] = list(config.headers)
        self._cookie: Optional[str] = config.cookie
        if config.raw_request is not None:
            # a raw request replaces command-line headers and cookie
            raw = load_raw_request(config.raw_request)
            self._headers = raw.headers
            self._cookie = raw.cookie

    def build_headers(self, referer: Optional[str] = None) -> Dict[str, str]:
        headers = {"User-Agent": pick_user_agent(self.config.user_agent)}
        if referer:
            headers["Referer"] = referer
        if self._cookie:
            headers["Cookie"] = self._cookie
        for name, value in self._headers:
            headers[name] = value
        return headers

    def redirect_allowed(self, current_url: str, location: str) -> bool:
        """Follow only redirects that stay on the target host (or the current one)."""
        if self.config.no_redirect:
            return False
        if self.target_host and self.target_host in location:
            return True
        return hostname(location) == hostname(current_url)

    async def fetch(
        self,
        url: str,
        referer: Optional[str] = None,
        seen: Optional[Callable[[str], bool]] = None,
    ) -> FetchResult:
        """
        GET *url*, following permitted redirects by hand.

        *seen* is the caller's ``check_and_mark``: a hop to a URL it already
        knows is not followed and the 3xx response becomes the result.
        Network errors and timeouts give ``status=0``.
        """
        headers = self.build_headers(referer)
        current = url
        try:
            for _ in range(MAX_REDIRECTS + 1):
                async with self.session.get(
                    current,
                    headers=headers,
                    proxy=self.config.proxy,
                    allow_redirects=False,
                ) as resp:
                    location = resp.headers.get("Location", "")
                    if resp.status in REDIRECT_STATUS and location:
                        target = resolve(location, current)
                        if (
                            target
                            and self.redirect_allowed(current, target)
                            and (seen is None or seen(target))
                        ):
                            logger.debug("Redirect %s -> %s", current, target)
                            current = target
                            continue
                        logger.debug("Refused redirect %s -> %s", current, location)
                    return await self._to_result(current, resp)
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.debug("Error request: %s - %s", current, exc or type(exc).__name__)
            return FetchResult(current, 0, error=str(exc) or type(exc).__name__)
        logger.debug("Too many redirects: %s", url)
        return FetchResult(current, 0, error="too many redirects")

    @staticmethod
    async def _to_result(url: str, resp: ClientResponse) -> FetchResult:
        raw = await resp.read()
        charset = resp.charset or "utf-8"
        try:
            text = raw.decode(charset, errors="replace")
        except LookupError:
            text = raw.decode("utf-8", errors="replace")
        return FetchResult(
            url=url,
            status=resp.status,
            body=text,
            content_type=resp.headers.get("Content-Type", ""),
        )
