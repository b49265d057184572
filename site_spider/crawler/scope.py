# site_spider/crawler/scope.py
"""
Crawl scope: target domain + subdomains, and the URL denylist.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Pattern, Tuple
from urllib.parse import urlsplit

import tldextract

__all__ = ("DEFAULT_DENY_PATTERN", "Denylist", "Scope", "get_domain")

#: static assets that are never worth fetching
DEFAULT_DENY_PATTERN = r"(?i)\.(jpg|jpeg|gif|css|tif|tiff|png|ttf|woff|woff2|ico)(?:\?|#|$)"

# bundled public suffix snapshot only: no network access, no cache writes
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def get_domain(url: str) -> str:
    """Registrable domain (eTLD+1) of *url*'s host.

    Hosts without a public suffix (``localhost``, IP literals) are returned
    as-is. Returns ``""`` when the URL has no host.
    """
    try:
        host = (urlsplit(url).hostname or "").rstrip(".")
    except ValueError:
        return ""
    if not host:
        return ""
    ext = _EXTRACT(host)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return host


@dataclass(frozen=True)
class Denylist:
    """Built-in static-asset pattern plus an optional user pattern."""

    patterns: Tuple[Pattern[str], ...]

    @classmethod
    def build(cls, user_pattern: Optional[str] = None) -> Denylist:
        patterns = [re.compile(DEFAULT_DENY_PATTERN)]
        if user_pattern:
            patterns.append(re.compile(user_pattern))
        return cls(tuple(patterns))

    def is_denied(self, url: str) -> bool:
        return any(p.search(url) for p in self.patterns)


@dataclass(frozen=True)
class Scope:
    """Immutable per-run scope descriptor.

    A URL is in scope when its scheme is http(s) and its host is the target
    domain or a dot-separated subdomain of it. The host is matched with an
    anchored pattern, so ``evil-example.com`` is *not* in ``example.com``.
    """

    domain: str
    denylist: Denylist = field(default_factory=Denylist.build)
    _host_re: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.domain:
            raise ValueError("Failed to parse target domain")
        host_re = re.compile(r"^(?:[\w-]+\.)*" + re.escape(self.domain.lower()) + r"$")
        object.__setattr__(self, "_host_re", host_re)

    @classmethod
    def for_site(cls, site: str, blacklist: Optional[str] = None) -> Scope:
        return cls(get_domain(site), Denylist.build(blacklist))

    def in_scope(self, url: str) -> bool:
        try:
            parts = urlsplit(url)
            host = (parts.hostname or "").rstrip(".")
        except ValueError:
            return False
        if parts.scheme not in ("http", "https") or not host:
            return False
        return bool(self._host_re.match(host))

    def is_denied(self, url: str) -> bool:
        return self.denylist.is_denied(url)

    def allows(self, url: str) -> bool:
        return self.in_scope(url) and not self.is_denied(url)
