"""Shared fixtures: in-memory storage fakes and feed builders."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx
import pytest

from uutisvahti.config import DEFAULT_KEYWORDS
from uutisvahti.errors import ArticleInsertError, DuplicateArticleError, StorageError
from uutisvahti.ingestion import FeedFetcher
from uutisvahti.models import Source, SourceCategory
from uutisvahti.scoring import SignificanceScorer

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeSourceManager:
    """Source storage returning a fixed list, or failing."""

    def __init__(self, sources: Optional[List[Source]] = None, error: Optional[Exception] = None):
        self.sources = sources or []
        self.error = error

    def get_active_sources(self, conn) -> List[Source]:
        if self.error is not None:
            raise self.error
        return [s for s in self.sources if s.is_active]


class FakeArticleStorage:
    """Article storage keyed by URL, like the real UNIQUE(url) column."""

    def __init__(self):
        self.rows: Dict[str, dict] = {}
        self.reject_urls: set = set()
        self.race_urls: set = set()
        self.exists_checks: List[str] = []

    def article_exists(self, conn, url: str) -> bool:
        self.exists_checks.append(url)
        return url in self.rows

    def insert_article(self, conn, **fields) -> int:
        url = fields["url"]
        if url in self.reject_urls:
            raise ArticleInsertError(f"Could not insert {url}: check constraint")
        if url in self.race_urls or url in self.rows:
            raise DuplicateArticleError(url)
        self.rows[url] = fields
        return len(self.rows)


def make_rss(items: List[dict]) -> str:
    """Build an RSS 2.0 document from item field dicts."""
    parts = []
    for item in items:
        fields = "".join(f"<{tag}>{value}</{tag}>" for tag, value in item.items())
        parts.append(f"<item>{fields}</item>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Feed</title>'
        + "".join(parts)
        + "</channel></rss>"
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def rss():
    return make_rss


@pytest.fixture
def scorer() -> SignificanceScorer:
    return SignificanceScorer(keywords=DEFAULT_KEYWORDS)


@pytest.fixture
def make_source():
    def _make(source_id: int, name: str, weight: int = 5, active: bool = True) -> Source:
        return Source(
            id=source_id,
            name=name,
            feed_url=f"https://{name.lower()}.example.com/feed",
            category=SourceCategory.INDUSTRY,
            weight=weight,
            is_active=active,
        )

    return _make


@pytest.fixture
def article_storage() -> FakeArticleStorage:
    return FakeArticleStorage()


@pytest.fixture
def fake_source_manager():
    return FakeSourceManager


@pytest.fixture
def storage_error():
    return StorageError


@pytest.fixture
def mock_fetcher():
    """FeedFetcher whose HTTP layer serves a dict of URL to (status, body).

    Unknown URLs raise a connection error.
    """

    def _make(routes: Dict[str, tuple]) -> FeedFetcher:
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            url = str(request.url)
            if url not in routes:
                raise httpx.ConnectError("connection refused", request=request)
            status, body = routes[url]
            return httpx.Response(status, text=body)

        fetcher = FeedFetcher(timeout=5.0, transport=httpx.MockTransport(handler))
        fetcher.requests = requests
        return fetcher

    return _make
