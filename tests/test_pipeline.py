# File: tests/test_pipeline.py
import pytest

from site_spider.crawler.models import Category, DiscoveryEvent, FetchResult
from site_spider.crawler.pipeline import (
    Outcome,
    classify,
    extract_asset,
    extract_page,
    is_suppressed,
    linkfinder_candidates,
)


@pytest.mark.parametrize(
    "event,line",
    [
        (
            DiscoveryEvent(Category.URL, "http://a.com/", "http://a.com/", status=200, length=42),
            "[url] - [code-200] - [length-42] - http://a.com/",
        ),
        (
            DiscoveryEvent(Category.URL, "http://a.com/x", "http://a.com/x", status=403),
            "[url] - [code-403] - http://a.com/x",
        ),
        (DiscoveryEvent(Category.FORM, "http://a.com/", "http://a.com/"), "[form] - http://a.com/"),
        (DiscoveryEvent(Category.UPLOAD_FORM, "http://a.com/", "http://a.com/"), "[upload-form] - http://a.com/"),
        (DiscoveryEvent(Category.JAVASCRIPT, "http://a.com/", "http://a.com/a.js"), "[javascript] - http://a.com/a.js"),
        (DiscoveryEvent(Category.SUBDOMAIN, "http://a.com/", "api.a.com"), "[subdomains] - api.a.com"),
        (DiscoveryEvent(Category.AWS_S3, "http://a.com/", "b.s3.amazonaws.com"), "[aws-s3] - b.s3.amazonaws.com"),
        (
            DiscoveryEvent(Category.LINKFINDER, "http://a.com/a.js", "/api"),
            "[linkfinder] - [from: http://a.com/a.js] - /api",
        ),
    ],
)
def test_event_render(event, line):
    assert event.render() == line


def test_event_to_dict():
    event = DiscoveryEvent(Category.URL, "http://a.com/", "http://a.com/", status=200, length=3)
    assert event.to_dict("http://a.com") == {
        "input": "http://a.com",
        "source": "http://a.com/",
        "type": "url",
        "output": "http://a.com/",
        "status": 200,
        "length": 3,
    }


@pytest.mark.parametrize(
    "status,suppressed",
    [(0, True), (99, True), (404, True), (429, True), (500, True), (503, True), (403, False), (401, False), (302, False)],
)
def test_is_suppressed(status, suppressed):
    assert is_suppressed(status) is suppressed


def test_classify():
    assert classify(FetchResult("http://a.com/", 200)) is Outcome.SUCCESS
    assert classify(FetchResult("http://a.com/", 204)) is Outcome.SUCCESS
    assert classify(FetchResult("http://a.com/", 403)) is Outcome.REPORTED
    assert classify(FetchResult("http://a.com/", 0, error="timeout")) is Outcome.SUPPRESSED


def test_extract_page(html_result):
    signals = extract_page(html_result, "example.com")
    assert signals.status == 200
    assert signals.length == len(html_result.body)
    assert signals.links == ["http://example.com/link1", "http://external.com/"]
    assert signals.has_form and signals.has_upload
    assert signals.assets == ["http://example.com/static/app.min.js"]
    assert signals.subdomains == ["api.example.com"]
    assert signals.buckets == ["mybucket.s3.amazonaws.com"]


def test_extract_page_skips_html_extractors_for_other_content():
    result = FetchResult(
        "http://example.com/data.txt", 200, body='<a href="/x">api.example.com</a>', content_type="text/plain"
    )
    signals = extract_page(result, "example.com")
    assert signals.links == []
    assert signals.subdomains == ["api.example.com"]


def test_extract_asset():
    result = FetchResult("https://cdn.net/app.js", 200, body='x="/api/v2/items"; y="data.s3.amazonaws.com"')
    signals = extract_asset(result, "example.com")
    assert "/api/v2/items" in signals.paths
    assert signals.buckets == ["data.s3.amazonaws.com"]


def test_linkfinder_candidates():
    site = "https://example.com/"
    assert linkfinder_candidates("api/users", site, "https://static.example.com/js/app.js", True) == [
        "https://example.com/api/users",
        "https://static.example.com/js/api/users",
    ]
    assert linkfinder_candidates("/api/users", site, "https://cdn.net/app.js", False) == [
        "https://example.com/api/users",
    ]
    assert linkfinder_candidates("javascript:void(0)", site, "https://cdn.net/app.js", True) == []
