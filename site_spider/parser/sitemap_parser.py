# File: site_spider/parser/sitemap_parser.py
"""site_spider.parser.sitemap_parser: Парсинг sitemap.xml и sitemap index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from lxml import etree

from site_spider.logger import logger

#: пути, по которым обычно лежат карты сайта
SITEMAP_PATHS: tuple[str, ...] = (
    "/sitemap.xml",
    "/sitemap_news.xml",
    "/sitemap_index.xml",
    "/sitemap-index.xml",
    "/sitemapindex.xml",
    "/sitemap-news.xml",
    "/post-sitemap.xml",
    "/page-sitemap.xml",
    "/category-sitemap.xml",
    "/author-sitemap.xml",
)


@dataclass(slots=True)
class Sitemap:
    """Содержимое одного sitemap: адреса страниц и вложенные карты."""

    urls: List[str] = field(default_factory=list)
    sitemaps: List[str] = field(default_factory=list)


def parse_sitemap(xml_content: str) -> Sitemap:
    """Разбирает XML sitemap и возвращает найденные <loc>.

    Для ``<sitemapindex>`` адреса попадают в ``sitemaps``, для ``<urlset>`` –
    в ``urls``. Битый или пустой XML даёт пустой результат.

    Пример:
    ```python
    from site_spider.parser.sitemap_parser import parse_sitemap

    sitemap = parse_sitemap(response_text)
    print(sitemap.urls)
    ```
    """
    if not xml_content.strip():
        return Sitemap()
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        logger.debug("Broken sitemap XML: %s", exc)
        return Sitemap()
    if root is None:
        return Sitemap()

    locs = [loc.text.strip() for loc in root.iterfind(".//{*}loc") if loc.text and loc.text.strip()]
    tag = etree.QName(root).localname.lower() if isinstance(root.tag, str) else ""
    if tag == "sitemapindex":
        return Sitemap(sitemaps=locs)
    return Sitemap(urls=locs)
