# File: tests/test_scope.py
import pytest

from site_spider.crawler.scope import Denylist, Scope, get_domain


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://sub.example.com/x", "example.com"),
        ("https://example.com", "example.com"),
        ("https://a.b.example.co.uk/", "example.co.uk"),
        ("http://localhost:8080/", "localhost"),
        ("http://127.0.0.1:8080/", "127.0.0.1"),
        ("not a url", ""),
    ],
)
def test_get_domain(url, expected):
    assert get_domain(url) == expected


@pytest.fixture()
def scope() -> Scope:
    return Scope("example.com")


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "http://example.com/a?b=1",
        "https://sub.example.com/a",
        "https://deep.sub.example.com:8443/",
        "https://WWW.Example.com/",
    ],
)
def test_in_scope(scope, url):
    assert scope.in_scope(url)


@pytest.mark.parametrize(
    "url",
    [
        "https://notexample.com/",
        "https://evil-example.com/",
        "https://example.com.evil.net/",
        "https://other.com/?next=example.com",
        "ftp://example.com/file",
        "/relative/path",
        "",
    ],
)
def test_out_of_scope(scope, url):
    assert not scope.in_scope(url)


def test_scope_requires_domain():
    with pytest.raises(ValueError):
        Scope("")
    with pytest.raises(ValueError):
        Scope.for_site("not a url")


@pytest.mark.parametrize(
    "url,denied",
    [
        ("https://example.com/logo.png", True),
        ("https://example.com/style.CSS?v=3", True),
        ("https://example.com/font.woff2#x", True),
        ("https://example.com/app.js", False),
        ("https://example.com/page", False),
        ("https://example.com/png-guide", False),
    ],
)
def test_default_denylist(url, denied):
    assert Denylist.build().is_denied(url) is denied


def test_user_blacklist():
    scope = Scope.for_site("https://example.com/", blacklist=r"/logout")
    assert scope.is_denied("https://example.com/logout")
    assert not scope.allows("https://example.com/logout")
    assert scope.allows("https://example.com/account")
    assert not scope.allows("https://example.com/a.gif")
