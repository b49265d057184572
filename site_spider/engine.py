# File: site_spider/engine.py
"""site_spider.engine: Точки входа для запуска обхода одного или нескольких сайтов."""

from __future__ import annotations

import asyncio
from typing import Callable, List, Sequence

from site_spider.config import CrawlerConfig
from site_spider.crawler.crawler import CrawlStats, Crawler
from site_spider.logger import logger
from site_spider.parser.patterns import DEFAULT_PATTERNS, PatternSet
from site_spider.sinks import EventSink

__all__ = ["start_crawl", "crawl_sites"]


async def start_crawl(
    config: CrawlerConfig,
    sink: EventSink,
    *,
    patterns: PatternSet = DEFAULT_PATTERNS,
) -> CrawlStats:
    """
    Запускает обход одного сайта и возвращает статистику.

    Parameters
    ----------
    config : CrawlerConfig
        Конфигурация обхода.
    sink : EventSink
        Получатель событий.
    """
    async with Crawler(config, sink, patterns=patterns) as crawler:
        return await crawler.crawl()


async def crawl_sites(
    configs: Sequence[CrawlerConfig],
    sink_factory: Callable[[CrawlerConfig], EventSink],
    threads: int = 1,
) -> List[CrawlStats]:
    """Обходит несколько сайтов, не более ``threads`` одновременно.

    Ошибка одного сайта логируется и не прерывает остальные.
    """
    semaphore = asyncio.Semaphore(max(1, threads))

    async def _one(cfg: CrawlerConfig) -> CrawlStats | None:
        async with semaphore:
            sink = sink_factory(cfg)
            try:
                return await start_crawl(cfg, sink)
            except Exception as exc:
                logger.error("Crawling %s failed: %s", cfg.seed, exc)
                return None
            finally:
                closer = getattr(sink, "close", None)
                if callable(closer):
                    closer()

    results = await asyncio.gather(*(_one(cfg) for cfg in configs))
    return [r for r in results if r is not None]
