"""Feed fetching, parsing and normalization."""

from .fetcher import FeedFetcher
from .models import FeedEntry, FetchResult, IngestionResult
from .normalize import clean_description, decode_entities, parse_timestamp, strip_html
from .parser import extract_tag, parse_feed

__all__ = [
    "FeedFetcher",
    "FeedEntry",
    "FetchResult",
    "IngestionResult",
    "clean_description",
    "decode_entities",
    "extract_tag",
    "parse_feed",
    "parse_timestamp",
    "strip_html",
]
