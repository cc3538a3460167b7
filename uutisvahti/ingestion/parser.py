"""Tolerant RSS 2.0 and Atom feed parser.

Real-world feeds are frequently malformed, so entries are located with
regular expressions instead of a validating XML parser. Both RSS ``<item>``
and Atom ``<entry>`` elements are scanned on every call.
"""

import logging
import re
from functools import lru_cache
from typing import Iterator, Optional

from pydantic import ValidationError

from .models import FeedEntry
from .normalize import clean_description, decode_entities, parse_timestamp

logger = logging.getLogger(__name__)

_ITEM_RE = re.compile(r"<item[^>]*>([\s\S]*?)</item>", re.IGNORECASE)
_ENTRY_RE = re.compile(r"<entry[^>]*>([\s\S]*?)</entry>", re.IGNORECASE)
_ATOM_HREF_RE = re.compile(r"""<link[^>]*href=["']([^"']+)["'][^>]*>""")


@lru_cache(maxsize=None)
def _tag_pattern(tag: str) -> "re.Pattern[str]":
    name = re.escape(tag)
    return re.compile(
        rf"<{name}[^>]*><!\[CDATA\[([\s\S]*?)\]\]></{name}>|<{name}[^>]*>([\s\S]*?)</{name}>",
        re.IGNORECASE,
    )


def extract_tag(content: str, *tags: str) -> Optional[str]:
    """Return the body of the first non-empty tag, trying ``tags`` in order.

    CDATA-wrapped bodies are unwrapped. Bodies are trimmed; an empty
    body counts as missing.
    """
    for tag in tags:
        match = _tag_pattern(tag).search(content)
        if match:
            value = (match.group(1) or match.group(2) or "").strip()
            if value:
                return value
    return None


def _build_entry(
    title: Optional[str],
    link: Optional[str],
    guid: Optional[str],
    published: Optional[str],
    description: Optional[str],
) -> Optional[FeedEntry]:
    if not title or not link:
        return None
    return FeedEntry(
        title=decode_entities(title),
        link=decode_entities(link),
        guid=decode_entities(guid) if guid else None,
        published=published,
        published_at=parse_timestamp(published),
        description=clean_description(description),
    )


def parse_rss_item(content: str) -> Optional[FeedEntry]:
    """Build an entry from the inner XML of an RSS ``<item>``."""
    return _build_entry(
        title=extract_tag(content, "title"),
        link=extract_tag(content, "link"),
        guid=extract_tag(content, "guid", "id"),
        published=extract_tag(content, "pubDate", "published"),
        description=extract_tag(content, "description", "content:encoded", "summary"),
    )


def parse_atom_entry(content: str) -> Optional[FeedEntry]:
    """Build an entry from the inner XML of an Atom ``<entry>``."""
    href = _ATOM_HREF_RE.search(content)
    return _build_entry(
        title=extract_tag(content, "title"),
        link=href.group(1) if href else extract_tag(content, "link"),
        guid=extract_tag(content, "id"),
        published=extract_tag(content, "published", "updated"),
        description=extract_tag(content, "summary", "content"),
    )


def _scan(text: str, pattern: "re.Pattern[str]", build, kind: str) -> Iterator[FeedEntry]:
    for match in pattern.finditer(text):
        try:
            entry = build(match.group(1))
        except (ValidationError, ValueError, TypeError, OverflowError) as e:
            logger.debug("Skipping malformed %s at offset %d: %s", kind, match.start(), e)
            continue
        if entry is not None:
            yield entry


def parse_feed(text: str) -> Iterator[FeedEntry]:
    """Lazily yield entries from RSS or Atom feed text.

    RSS items come first, then Atom entries. Entries without a title or
    link are dropped. A malformed entry never stops the scan, and a feed
    without entries simply yields nothing.
    """
    if not text:
        return
    yield from _scan(text, _ITEM_RE, parse_rss_item, "item")
    yield from _scan(text, _ENTRY_RE, parse_atom_entry, "entry")
