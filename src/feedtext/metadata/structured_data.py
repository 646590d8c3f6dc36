"""
Publication-date lookup from structured markup (meta tags, <time>, JSON-LD).

These sources are usually more reliable than dates found in the article
text, so they are consulted before falling back to free-text extraction.

Lookup order:
- ``article:published_time`` / ``og:article:published_time`` meta tags
- generic ``date`` / ``pubdate`` / ``publish_date`` / ``published_date`` /
  ``datePublished`` meta tags
- the first ``<time datetime="...">`` element
- JSON-LD ``datePublished``, then ``dateCreated``
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateparser

from ..utils.date_extractor import DateExtractor

logger = logging.getLogger(__name__)

# JSON-LD script block pattern
_JSONLD_BLOCK_RE = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)

# Meta tag patterns - both attribute orderings
_META_PUBTIME_RE = re.compile(
    r'<meta\s+(?:property|name)=["\'](?:article:published_time|og:article:published_time)["\']'
    r'\s+content=["\']([^"\']+)["\']',
    re.IGNORECASE,
)
_META_PUBTIME_ALT_RE = re.compile(
    r'<meta\s+content=["\']([^"\']+)["\']'
    r'\s+(?:property|name)=["\'](?:article:published_time|og:article:published_time)["\']',
    re.IGNORECASE,
)

_META_DATE_RE = re.compile(
    r'<meta\s+(?:property|name)=["\'](?:date|pubdate|publish_date|published_date|datePublished)["\']'
    r'\s+content=["\']([^"\']+)["\']',
    re.IGNORECASE,
)
_META_DATE_ALT_RE = re.compile(
    r'<meta\s+content=["\']([^"\']+)["\']'
    r'\s+(?:property|name)=["\'](?:date|pubdate|publish_date|published_date|datePublished)["\']',
    re.IGNORECASE,
)

_TIME_DATETIME_RE = re.compile(r'<time[^>]+datetime=["\']([^"\']+)["\']', re.IGNORECASE)

# Raw key lookups for JSON-LD blocks that do not parse as JSON
_JSONLD_DATE_PUBLISHED_RE = re.compile(r'"datePublished"\s*:\s*"([^"]+)"', re.IGNORECASE)
_JSONLD_DATE_CREATED_RE = re.compile(r'"dateCreated"\s*:\s*"([^"]+)"', re.IGNORECASE)

META_DATE_PATTERNS = (
    _META_PUBTIME_RE,
    _META_PUBTIME_ALT_RE,
    _META_DATE_RE,
    _META_DATE_ALT_RE,
)

DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%a, %d %b %Y %H:%M:%S %z",
)

JSONLD_DATE_KEYS = ("datePublished", "dateCreated")

_date_extractor = DateExtractor()


def parse_date_string(value: str) -> datetime | None:
    """
    Parse a date value taken from markup.

    Zoned ISO-8601 is tried first, then a fixed list of formats (values
    without an offset are taken as UTC), and finally free-text extraction.

    Returns:
        A timezone-aware UTC datetime, or None when nothing parses
    """
    trimmed = value.strip() if value else ""
    if not trimmed:
        return None

    try:
        parsed = dateparser.isoparse(trimmed)
    except (ValueError, OverflowError):
        parsed = None
    if parsed is not None and parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc)

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(trimmed, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return _date_extractor.extract_date(trimmed)


def extract_publish_date_from_html(html_text: str) -> datetime | None:
    """
    Find the publication date declared in the page markup.

    Args:
        html_text: Raw HTML content

    Returns:
        The first parseable date, or None
    """
    if not html_text:
        return None

    for pattern in META_DATE_PATTERNS:
        date = _parse_first_match(pattern, html_text)
        if date:
            return date

    date = _parse_first_match(_TIME_DATETIME_RE, html_text)
    if date:
        return date

    return _extract_jsonld_date(html_text)


def _parse_first_match(pattern: re.Pattern[str], html_text: str) -> datetime | None:
    match = pattern.search(html_text)
    if not match:
        return None
    return parse_date_string(match.group(1))


def _extract_jsonld_date(html_text: str) -> datetime | None:
    """Extract datePublished/dateCreated from JSON-LD script blocks."""
    if "application/ld+json" in html_text:
        items = list(_iter_jsonld_items(html_text))
        for key in JSONLD_DATE_KEYS:
            for item in items:
                raw = item.get(key)
                if raw and isinstance(raw, str):
                    date = parse_date_string(raw)
                    if date:
                        return date

    # Malformed blocks (or inline JSON outside a script type) still carry the keys
    for pattern in (_JSONLD_DATE_PUBLISHED_RE, _JSONLD_DATE_CREATED_RE):
        date = _parse_first_match(pattern, html_text)
        if date:
            return date

    return None


def _iter_jsonld_items(html_text: str):
    for match in _JSONLD_BLOCK_RE.finditer(html_text):
        try:
            data = json.loads(match.group(1))
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping unparseable JSON-LD block")
            continue

        items: list[Any] = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            yield item
            graph = item.get("@graph")
            if isinstance(graph, list):
                yield from (node for node in graph if isinstance(node, dict))
