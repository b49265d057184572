# site_spider/crawler/urls.py
"""
URL resolution helpers: relative → absolute, fragment stripping, scheme filtering.
"""
from __future__ import annotations

import posixpath
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlsplit

_SKIPPED_PREFIXES = ("#", "javascript:", "mailto:", "tel:", "data:")
_MINIFIED_MARKER = ".min.js"


def resolve(reference: Optional[str], base: str) -> Optional[str]:
    """
    Resolve *reference* against *base* and return an absolute http(s) URL.

    Returns None for empty input, bare fragments, pseudo-schemes such as
    ``javascript:`` or ``mailto:``, non-http(s) results and anything that
    ``urllib.parse`` cannot make sense of. Never raises.
    """
    if not reference:
        return None
    ref = reference.strip()
    if not ref or ref.lower().startswith(_SKIPPED_PREFIXES):
        return None
    try:
        absolute, _ = urldefrag(urljoin(base, ref))
        parts = urlsplit(absolute)
        # port access validates it
        parts.port
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    return absolute


def ext_type(url: str) -> str:
    """Lower-cased extension of the URL path (``".js"``), or ``""``."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    return posixpath.splitext(path)[1].lower()


def unminified(url: str) -> Optional[str]:
    """Guess the non-minified source of ``*.min.js`` URLs, None otherwise."""
    if _MINIFIED_MARKER not in url:
        return None
    return url.replace(_MINIFIED_MARKER, ".js")


def hostname(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""
