# site_spider/crawler/models.py
"""
Data models for the SiteSpider crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

PRIMARY = "primary"
ASSETS = "assets"


class Category(str, Enum):
    """Discovery categories; the value is the tag printed in event lines."""

    URL = "url"
    FORM = "form"
    UPLOAD_FORM = "upload-form"
    JAVASCRIPT = "javascript"
    SUBDOMAIN = "subdomains"
    AWS_S3 = "aws-s3"
    LINKFINDER = "linkfinder"
    ROBOTS = "robots"
    SITEMAP = "sitemap"


@dataclass(frozen=True, slots=True)
class FrontierRequest:
    """A queued fetch: absolute URL, hop depth (seed = 1) and owning frontier."""

    url: str
    depth: int
    origin: str = PRIMARY
    referer: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one fetch. ``status`` is 0 when no HTTP response was received."""

    url: str
    status: int
    body: str = ""
    content_type: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        return "html" in self.content_type.lower()


@dataclass(frozen=True, slots=True)
class DiscoveryEvent:
    """Immutable record of something found during the crawl."""

    category: Category
    source: str
    payload: str
    status: Optional[int] = None
    length: Optional[int] = None

    def render(self) -> str:
        """Format the event as a single output line.

        >>> DiscoveryEvent(Category.FORM, "http://a.com/", "http://a.com/").render()
        '[form] - http://a.com/'
        """
        parts = [f"[{self.category.value}]"]
        if self.category is Category.LINKFINDER:
            parts.append(f"[from: {self.source}]")
        if self.status is not None:
            parts.append(f"[code-{self.status}]")
        if self.length is not None:
            parts.append(f"[length-{self.length}]")
        parts.append(self.payload)
        return " - ".join(parts)

    def to_dict(self, input_url: str = "") -> Dict[str, Any]:
        """JSON-line representation used by ``--json`` output."""
        return {
            "input": input_url,
            "source": self.source,
            "type": self.category.value,
            "output": self.payload,
            "status": self.status or 0,
            "length": self.length or 0,
        }
