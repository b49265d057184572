# File: tests/conftest.py
from typing import Any, Callable

import pytest

from site_spider.config import CrawlerConfig
from site_spider.crawler.models import FetchResult
from site_spider.sinks import CollectingSink


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    """
    Return a factory for CrawlerConfig with test-friendly defaults
    (no robots.txt probing, a few hops, short timeout).
    """

    def _make(site: str, **overrides: Any) -> CrawlerConfig:
        values: dict[str, Any] = {
            "max_depth": 3,
            "parallelism": 4,
            "timeout": 5.0,
            "user_agent": "TestAgent/1.0",
            "robots": False,
        }
        values.update(overrides)
        return CrawlerConfig(site=site, **values)

    return _make


@pytest.fixture()
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture()
def html_result() -> FetchResult:
    """
    Provide a successful HTML FetchResult with links, a form and a script.
    """
    html = (
        "<html><body>"
        '<a href="/link1">L1</a><a href="http://external.com/">X</a>'
        '<form action="/login"><input type="file" name="f"></form>'
        '<script src="/static/app.min.js"></script>'
        "<p>api.example.com https://mybucket.s3.amazonaws.com/key</p>"
        "</body></html>"
    )
    return FetchResult(
        url="http://example.com/",
        status=200,
        body=html,
        content_type="text/html; charset=utf-8",
    )
