"""Text and timestamp normalization for feed fields."""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import pendulum

DESCRIPTION_LIMIT = 500

_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "#39": "'",
    "apos": "'",
}
_ENTITY_RE = re.compile(r"&(lt|gt|amp|quot|#39|apos);")
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def decode_entities(text: str) -> str:
    """Decode the five standard XML entities (plus &#39;)."""
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(1)], text)


def strip_html(text: str) -> str:
    """Replace markup tags with spaces and collapse whitespace."""
    text = _TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_description(text: Optional[str], limit: int = DESCRIPTION_LIMIT) -> Optional[str]:
    """Decode, strip and truncate a feed description.

    Entities are decoded before stripping so escaped HTML
    (``&lt;p&gt;``) is removed as markup too.
    """
    if not text:
        return None
    cleaned = strip_html(decode_entities(text))[:limit]
    return cleaned or None


def parse_timestamp(text: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 822 or ISO 8601 date into an aware UTC datetime.

    Returns None for missing or unparseable values.
    """
    text = (text or "").strip()
    if not text:
        return None

    parsed: Optional[datetime] = None
    # RSS pubDate is RFC 822
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None

    if parsed is None:
        # Atom and most other feeds use ISO 8601
        try:
            parsed = pendulum.parse(text, strict=False)
        except (ValueError, TypeError, OverflowError):
            return None
        if not isinstance(parsed, datetime):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offset dates at the edge of the calendar have no UTC equivalent
        return None
