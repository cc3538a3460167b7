"""Feed fetcher."""

import logging
from typing import Optional

import httpx

from ..models import Source
from .models import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "AI-Uutisvahti/1.0"


class FeedFetcher:
    """Fetch raw feed text over HTTP.

    Every call downloads the whole feed: no retries, caching or
    conditional requests. Failures are reported in the result, never raised.
    """

    def __init__(
        self,
        timeout: float = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize feed fetcher.

        Args:
            timeout: Default request timeout in seconds
            user_agent: User-Agent header sent to feed hosts
            transport: Optional httpx transport, mainly for tests
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def fetch(self, source: Source, timeout: Optional[float] = None) -> FetchResult:
        """Fetch a single source's feed."""
        try:
            with httpx.Client(
                timeout=timeout if timeout is not None else self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = client.get(source.feed_url)
                response.raise_for_status()

                return FetchResult(
                    source_name=source.name,
                    feed_url=source.feed_url,
                    success=True,
                    text=response.text,
                    status_code=response.status_code,
                )

        except httpx.HTTPStatusError as e:
            return FetchResult(
                source_name=source.name,
                feed_url=source.feed_url,
                success=False,
                status_code=e.response.status_code,
                error=f"HTTP {e.response.status_code}",
            )
        except httpx.TimeoutException as e:
            return FetchResult(
                source_name=source.name,
                feed_url=source.feed_url,
                success=False,
                error=f"Timeout: {e}",
            )
        except httpx.HTTPError as e:
            return FetchResult(
                source_name=source.name,
                feed_url=source.feed_url,
                success=False,
                error=f"HTTP error: {e}",
            )
        except httpx.InvalidURL as e:
            return FetchResult(
                source_name=source.name,
                feed_url=source.feed_url,
                success=False,
                error=f"Invalid URL: {e}",
            )
