# File: tests/test_urls.py
import pytest

from site_spider.crawler.urls import ext_type, hostname, resolve, unminified


def test_resolve_relative_against_base():
    assert resolve("/a/b", "https://example.com/x/") == "https://example.com/a/b"
    assert resolve("c", "https://example.com/x/") == "https://example.com/x/c"
    assert resolve("../up", "https://example.com/x/y/") == "https://example.com/x/up"


def test_resolve_keeps_absolute_urls():
    assert resolve("https://other.com/c", "https://example.com/") == "https://other.com/c"


def test_resolve_protocol_relative():
    assert resolve("//cdn.example.net/app.js", "https://example.com/") == "https://cdn.example.net/app.js"


@pytest.mark.parametrize(
    "reference",
    [
        "javascript:void(0)",
        "JavaScript:alert(1)",
        "mailto:admin@example.com",
        "tel:+123",
        "data:text/plain,hi",
        "#top",
        "",
        "   ",
        None,
        "ftp://example.com/file",
        "http://[::1",
        "http://example.com:99999999/",
    ],
)
def test_resolve_rejects(reference):
    assert resolve(reference, "https://example.com/") is None


def test_resolve_strips_fragment_and_is_idempotent():
    first = resolve("/page#section", "https://example.com/")
    assert first == "https://example.com/page"
    assert resolve(first, "https://anything.org/") == first


def test_ext_type():
    assert ext_type("https://example.com/static/App.JS?v=1") == ".js"
    assert ext_type("https://example.com/feed.xml") == ".xml"
    assert ext_type("https://example.com/dir/") == ""


def test_unminified():
    assert unminified("https://example.com/foo.min.js") == "https://example.com/foo.js"
    assert unminified("https://example.com/foo.js") is None


def test_hostname():
    assert hostname("https://Sub.Example.com:8080/x") == "sub.example.com"
    assert hostname("nonsense") == ""
