# File: site_spider/aggregator.py
"""site_spider.aggregator: Сводный отчёт по событиям обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TypedDict

from site_spider.crawler.models import Category, DiscoveryEvent


class UrlInfo(TypedDict, total=False):
    """Информация о загруженном URL."""

    url: str
    status: int
    length: Optional[int]


class LinkFinderInfo(TypedDict):
    """Путь, найденный в JavaScript."""

    source: str
    path: str


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода, сгруппированные по категориям."""

    site: str = ""
    urls: List[UrlInfo] = field(default_factory=list)
    forms: List[str] = field(default_factory=list)
    upload_forms: List[str] = field(default_factory=list)
    javascript: List[str] = field(default_factory=list)
    subdomains: List[str] = field(default_factory=list)
    aws_s3: List[str] = field(default_factory=list)
    linkfinder: List[LinkFinderInfo] = field(default_factory=list)
    robots: List[str] = field(default_factory=list)
    sitemap: List[str] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        """Число записей по каждой категории."""
        return {k: len(v) for k, v in asdict(self).items() if isinstance(v, list)}

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


_SIMPLE: Dict[Category, str] = {
    Category.FORM: "forms",
    Category.UPLOAD_FORM: "upload_forms",
    Category.JAVASCRIPT: "javascript",
    Category.SUBDOMAIN: "subdomains",
    Category.AWS_S3: "aws_s3",
    Category.ROBOTS: "robots",
    Category.SITEMAP: "sitemap",
}


def aggregate_results(events: Iterable[DiscoveryEvent], site: str = "") -> CrawlReport:
    """Собирает события в CrawlReport (порядок – порядок появления)."""
    report = CrawlReport(site=site)
    for event in events:
        if event.category is Category.URL:
            report.urls.append({"url": event.payload, "status": event.status or 0, "length": event.length})
        elif event.category is Category.LINKFINDER:
            report.linkfinder.append({"source": event.source, "path": event.payload})
        else:
            bucket: List[Any] = getattr(report, _SIMPLE[event.category])
            if event.payload not in bucket:
                bucket.append(event.payload)
    return report
