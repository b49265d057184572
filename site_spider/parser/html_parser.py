# === FILE: site_spider/parser/html_parser.py ===
"""HTML extractors for SiteSpider.

Every function here is pure: it takes markup (and, where needed, the page URL)
and returns raw discoveries. Nothing is deduplicated or scope-checked at this
stage; that is the crawler's job.

The functions tolerate broken markup. ``html.parser`` is lenient, and if
BeautifulSoup still fails the extractor returns an empty result instead of
failing the request that produced the page.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup

from site_spider.crawler.urls import ext_type, resolve
from site_spider.logger import logger

__all__: Sequence[str] = (
    "ASSET_EXTENSIONS",
    "ParsedPage",
    "parse_html",
    "extract_hyperlinks",
    "extract_form_actions",
    "extract_upload_markers",
    "extract_asset_refs",
)

#: extensions of ``src`` references that are sent to the asset collector
ASSET_EXTENSIONS = frozenset({".js", ".xml", ".json"})


def _soup(html: str) -> Optional[BeautifulSoup]:
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:  # pragma: no cover - html.parser rarely gives up
        logger.debug("HTML parse error: %s", exc)
        return None


def _hrefs(soup: BeautifulSoup) -> list[str]:
    return [str(tag["href"]) for tag in soup.find_all(href=True)]


def _form_actions(soup: BeautifulSoup) -> list[str]:
    return [str(tag["action"]) for tag in soup.find_all("form", action=True)]


def _has_upload(soup: BeautifulSoup) -> bool:
    for tag in soup.find_all("input"):
        if str(tag.get("type", "")).strip().lower() == "file":
            return True
    return False


def _assets(soup: BeautifulSoup, base_url: str) -> list[str]:
    found: list[str] = []
    for tag in soup.find_all(src=True):
        url = resolve(str(tag["src"]), base_url)
        if url and ext_type(url) in ASSET_EXTENSIONS:
            found.append(url)
    return found


def extract_hyperlinks(html: str) -> list[str]:
    """Every ``href`` attribute value, in document order."""
    soup = _soup(html)
    return _hrefs(soup) if soup is not None else []


def extract_form_actions(html: str) -> list[str]:
    """Action values of ``<form action=...>`` elements."""
    soup = _soup(html)
    return _form_actions(soup) if soup is not None else []


def extract_upload_markers(html: str) -> bool:
    """True if the page has an ``<input type="file">``."""
    soup = _soup(html)
    return _has_upload(soup) if soup is not None else False


def extract_asset_refs(html: str, base_url: str) -> list[str]:
    """Resolved ``src`` URLs pointing at scripts, XML or JSON."""
    soup = _soup(html)
    return _assets(soup, base_url) if soup is not None else []


@dataclass(slots=True)
class ParsedPage:
    """All HTML signals of one page, produced by a single parse."""

    url: str
    links: list[str] = field(default_factory=list)
    forms: list[str] = field(default_factory=list)
    has_upload: bool = False
    assets: list[str] = field(default_factory=list)


def parse_html(html: str, url: str) -> ParsedPage:
    """Run all HTML extractors over one soup (the crawler's hot path)."""
    soup = _soup(html)
    if soup is None:
        return ParsedPage(url=url)
    return ParsedPage(
        url=url,
        links=_hrefs(soup),
        forms=_form_actions(soup),
        has_upload=_has_upload(soup),
        assets=_assets(soup, url),
    )
