# site_spider/crawler/pipeline.py
"""
Pure pipeline stages between fetch and dispatch:

``fetch -> classify -> extract -> dispatch``

``classify`` and the ``extract_*`` functions have no side effects; the
crawler owns dispatch (dedup, events, re-queueing).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from site_spider.crawler.models import FetchResult
from site_spider.crawler.urls import resolve
from site_spider.parser.html_parser import parse_html
from site_spider.parser.patterns import (
    DEFAULT_PATTERNS,
    PatternSet,
    decode_chars,
    extract_bucket_names,
    extract_script_paths,
    extract_subdomains,
)


class Outcome(str, Enum):
    SUCCESS = "success"
    REPORTED = "reported"
    SUPPRESSED = "suppressed"


def is_suppressed(status: int) -> bool:
    """404, 429, anything below 100 (no response) and 5xx are not reported."""
    return status in (404, 429) or status < 100 or status >= 500


def classify(result: FetchResult) -> Outcome:
    if result.ok:
        return Outcome.SUCCESS
    if is_suppressed(result.status):
        return Outcome.SUPPRESSED
    return Outcome.REPORTED


@dataclass(slots=True)
class PageSignals:
    """Everything a successful page response yields, before dedup."""

    url: str
    status: int
    length: int
    links: List[str] = field(default_factory=list)
    has_form: bool = False
    has_upload: bool = False
    assets: List[str] = field(default_factory=list)
    subdomains: List[str] = field(default_factory=list)
    buckets: List[str] = field(default_factory=list)


@dataclass(slots=True)
class AssetSignals:
    url: str
    paths: List[str] = field(default_factory=list)
    subdomains: List[str] = field(default_factory=list)
    buckets: List[str] = field(default_factory=list)


def extract_page(result: FetchResult, domain: str, patterns: PatternSet = DEFAULT_PATTERNS) -> PageSignals:
    decoded = decode_chars(result.body)
    signals = PageSignals(
        url=result.url,
        status=result.status,
        length=len(decoded),
        subdomains=extract_subdomains(decoded, domain, patterns),
        buckets=extract_bucket_names(decoded, patterns),
    )
    if result.is_html:
        page = parse_html(result.body, result.url)
        signals.links = [u for u in (resolve(h, result.url) for h in page.links) if u]
        signals.has_form = bool(page.forms)
        signals.has_upload = page.has_upload
        signals.assets = page.assets
    return signals


def extract_asset(result: FetchResult, domain: str, patterns: PatternSet = DEFAULT_PATTERNS) -> AssetSignals:
    return AssetSignals(
        url=result.url,
        paths=extract_script_paths(result.body, patterns),
        subdomains=extract_subdomains(result.body, domain, patterns),
        buckets=extract_bucket_names(result.body, patterns),
    )


def linkfinder_candidates(path: str, site: str, script_url: str, script_in_scope: bool) -> List[str]:
    """Resolve a mined path against the seed site and, if in scope, the script URL."""
    candidates: List[str] = []
    with_site = resolve(path, site)
    if with_site:
        candidates.append(with_site)
    if script_in_scope:
        with_script = resolve(path, script_url)
        if with_script and with_script not in candidates:
            candidates.append(with_script)
    return candidates
