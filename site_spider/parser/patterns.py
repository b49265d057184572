# File: site_spider/parser/patterns.py
"""site_spider.parser.patterns: regex-based miners for raw response bodies.

Three strategies are used by the crawler:

* subdomains : ``<labels>.<target domain>`` anywhere in a body;
* buckets    : AWS S3 bucket URL shapes;
* link finder: quoted strings in JavaScript that look like paths or URLs.

They are bundled in a :class:`PatternSet` so that a caller can swap the rules
without touching the scheduler (``Crawler(..., patterns=PatternSet(...))``).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Pattern, Sequence
from urllib.parse import unquote

from site_spider.logger import logger

__all__: Sequence[str] = (
    "PatternSet",
    "DEFAULT_PATTERNS",
    "decode_chars",
    "extract_subdomains",
    "extract_bucket_names",
    "extract_script_paths",
)

LINKFINDER_RE = re.compile(
    r"""(?:"|')"""
    r"""("""
    r"""((?:[a-zA-Z]{1,10}://|//)[^"'/]{1,}\.[a-zA-Z]{2,}[^"']{0,})"""
    r"""|((?:/|\.\./|\./)[^"'><,;| *()(%%$^/\\\[\]][^"'><,;|()]{1,})"""
    r"""|([a-zA-Z0-9_\-/]{1,}/[a-zA-Z0-9_\-/]{1,}\.(?:[a-zA-Z]{1,4}|action)(?:[\?|#][^"|']{0,}|))"""
    r"""|([a-zA-Z0-9_\-/]{1,}/[a-zA-Z0-9_\-/]{3,}(?:[\?|#][^"|']{0,}|))"""
    r"""|([a-zA-Z0-9_\-]{1,}\.(?:php|asp|aspx|jsp|json|action|html|js|txt|xml)(?:[\?|#][^"|']{0,}|))"""
    r""")"""
    r"""(?:"|')"""
)

AWS_S3_RE = re.compile(
    r"(?i)[a-z0-9.-]+\.s3\.amazonaws\.com"
    r"|[a-z0-9.-]+\.s3-[a-z0-9-]+\.amazonaws\.com"
    r"|[a-z0-9.-]+\.s3-website[.-](?:eu|ap|us|ca|sa|cn)"
    r"|//s3\.amazonaws\.com/[a-z0-9._-]+"
    r"|//s3-[a-z0-9-]+\.amazonaws\.com/[a-z0-9._-]+"
)

# one or more DNS labels followed by a dot; the domain is appended per run
_SUBDOMAIN_PREFIX = r"(?i)(?:(?:[a-z0-9]|[_a-z0-9][_a-z0-9-]{0,61}[a-z0-9])\.)+"

# leftovers of URL-encoding glued to a hostname, e.g. "2f" from "%2f"
_NAME_STRIP_RE = re.compile(r"(?i)^(?:20|25|2b|2f|3d|3a|40)+")

# bodies bigger than this are split into lines before link finding
_SPLIT_THRESHOLD = 1_000_000


def decode_chars(text: str) -> str:
    """Undo URL-encoding and the JSON escapes commonly used for ``/`` and ``&``."""
    try:
        text = unquote(text)
    except (TypeError, ValueError):
        pass
    return text.replace("\\u002f", "/").replace("\\u002F", "/").replace("\\u0026", "&")


def _clean_name(name: str) -> str:
    name = name.strip().lower().lstrip("*.")
    name = _NAME_STRIP_RE.sub("", name)
    name = name.strip("-")
    if len(name) > 1 and name[0] == ".":
        name = name[1:]
    return name


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def subdomain_miner(body: str, domain: str) -> List[str]:
    pattern = re.compile(_SUBDOMAIN_PREFIX + re.escape(domain))
    subs = []
    for match in pattern.finditer(body):
        sub = _clean_name(match.group(0))
        if sub and sub != domain.lower() and sub.endswith("." + domain.lower()):
            subs.append(sub)
    return _unique(subs)


def bucket_miner(body: str) -> List[str]:
    return _unique([decode_chars(m.group(0)) for m in AWS_S3_RE.finditer(body)])


def link_miner(body: str) -> List[str]:
    if len(body) > _SPLIT_THRESHOLD:
        body = body.replace(";", ";\r\n").replace(",", ",\r\n")
    body = decode_chars(body)
    links = []
    for match in LINKFINDER_RE.finditer(body):
        link = re.sub(r"[\t\r\n]+", " ", match.group(1).strip())
        if link:
            links.append(link)
    return _unique(links)


@dataclass(frozen=True)
class PatternSet:
    """Swappable pattern-matching strategies used by the crawler."""

    subdomains: Callable[[str, str], List[str]] = subdomain_miner
    buckets: Callable[[str], List[str]] = bucket_miner
    script_paths: Callable[[str], List[str]] = link_miner


DEFAULT_PATTERNS = PatternSet()


def extract_subdomains(body: str, domain: str, patterns: PatternSet = DEFAULT_PATTERNS) -> List[str]:
    """All ``<label>.<domain>`` strings found in *body* (cleaned, unique)."""
    try:
        return patterns.subdomains(body, domain)
    except (re.error, TypeError, ValueError) as exc:
        logger.debug("Subdomain extraction failed: %s", exc)
        return []


def extract_bucket_names(body: str, patterns: PatternSet = DEFAULT_PATTERNS) -> List[str]:
    """All S3 bucket references found in *body*."""
    try:
        return patterns.buckets(body)
    except (re.error, TypeError, ValueError) as exc:
        logger.debug("Bucket extraction failed: %s", exc)
        return []


def extract_script_paths(body: str, patterns: PatternSet = DEFAULT_PATTERNS) -> List[str]:
    """Candidate paths/URLs quoted inside a script body."""
    try:
        return patterns.script_paths(body)
    except (re.error, TypeError, ValueError) as exc:
        logger.debug("Link finder failed: %s", exc)
        return []
