"""Ingestion orchestrator: sources to stored, scored articles."""

import logging
import time
from datetime import datetime, timezone
from itertools import islice
from typing import Optional

from psycopg import Connection

from ..config import Config
from ..db import ArticleStorage, RunManager, SourceManager, get_connection
from ..errors import DuplicateArticleError, StorageError
from ..ingestion import FeedEntry, FeedFetcher, IngestionResult, parse_feed
from ..models import Source
from ..scoring import SignificanceScorer

logger = logging.getLogger(__name__)


class DeadlineExceeded(Exception):
    """The run used up its time budget."""


class _Deadline:
    """Wall-clock budget for one run."""

    def __init__(self, seconds: Optional[float]) -> None:
        self.expires_at = time.monotonic() + seconds if seconds is not None else None

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return self.expires_at - time.monotonic()

    def check(self) -> None:
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded()


class IngestionOrchestrator:
    """Drive every active source through fetch, parse, dedup, score and insert.

    Sources and their entries are processed one at a time. Only a failure
    to load the source list fails the run; everything else is logged and
    absorbed into the counts.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        scorer: SignificanceScorer,
        source_manager: Optional[SourceManager] = None,
        article_storage: Optional[ArticleStorage] = None,
        max_entries_per_source: int = 20,
    ) -> None:
        """
        Initialize ingestion orchestrator.

        Args:
            fetcher: Feed fetcher
            scorer: Significance scorer
            source_manager: Source storage
            article_storage: Article storage
            max_entries_per_source: Entries considered per source and run
        """
        self.fetcher = fetcher
        self.scorer = scorer
        self.source_manager = source_manager or SourceManager()
        self.article_storage = article_storage or ArticleStorage()
        self.max_entries_per_source = max_entries_per_source

    def run(
        self,
        conn: Connection,
        deadline: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> IngestionResult:
        """
        Run one ingestion pass over all active sources.

        Args:
            conn: Database connection
            deadline: Optional time budget in seconds for the whole run
            now: Reference time for recency scoring and missing dates

        Returns:
            Aggregate result; ``success`` is False only when the source
            list could not be loaded
        """
        budget = _Deadline(deadline)

        try:
            sources = self.source_manager.get_active_sources(conn)
        except Exception as e:
            logger.error("Could not load active sources: %s", e)
            return IngestionResult.failure(str(e))

        result = IngestionResult(success=True, sources_total=len(sources))
        logger.info("Found %d active sources", len(sources))

        try:
            for source in sources:
                budget.check()
                if not self._process_source(conn, source, result, budget, now):
                    result.sources_failed += 1
        except DeadlineExceeded:
            result.timed_out = True
            logger.warning(
                "Run deadline of %ss reached, stopping with %d inserted, %d skipped",
                deadline,
                result.inserted,
                result.skipped,
            )

        logger.info(
            "Ingestion complete. Inserted: %d, Skipped: %d, Failed inserts: %d, Failed sources: %d",
            result.inserted,
            result.skipped,
            result.failed_inserts,
            result.sources_failed,
        )
        return result

    def _process_source(
        self,
        conn: Connection,
        source: Source,
        result: IngestionResult,
        budget: _Deadline,
        now: Optional[datetime],
    ) -> bool:
        """Process one source. Returns False if the source failed."""
        logger.info("Fetching feed from %s: %s", source.name, source.feed_url)

        timeout = self.fetcher.timeout
        remaining = budget.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        try:
            fetched = self.fetcher.fetch(source, timeout=timeout)
            if not fetched.success:
                logger.warning("Failed to fetch %s: %s", source.name, fetched.error)
                # A fetch cut short by the run deadline ends the run
                budget.check()
                return False

            entries = islice(parse_feed(fetched.text or ""), self.max_entries_per_source)
            processed = 0
            for entry in entries:
                budget.check()
                self._process_entry(conn, source, entry, result, now)
                processed += 1
        except DeadlineExceeded:
            raise
        except Exception:
            logger.exception("Error processing source %s", source.name)
            return False

        logger.info("Processed %d entries from %s", processed, source.name)
        return True

    def _process_entry(
        self,
        conn: Connection,
        source: Source,
        entry: FeedEntry,
        result: IngestionResult,
        now: Optional[datetime],
    ) -> None:
        """Dedup, score and store a single entry, updating the counts."""
        try:
            if self.article_storage.article_exists(conn, entry.link):
                result.skipped += 1
                return

            breakdown = self.scorer.evaluate(entry, source.weight, now)
            published_at = entry.published_at or now or datetime.now(timezone.utc)

            self.article_storage.insert_article(
                conn,
                source_id=source.id,
                title=entry.title,
                url=entry.link,
                guid=entry.guid,
                published_at=published_at,
                raw_excerpt=entry.description,
                score=breakdown.score,
                is_significant=breakdown.is_significant,
            )
        except DuplicateArticleError:
            # Another run stored it between the check and the insert
            logger.debug("Concurrent duplicate skipped: %s", entry.link)
            result.skipped += 1
            return
        except StorageError as e:
            logger.error("Error inserting article %s: %s", entry.link, e)
            result.failed_inserts += 1
            return

        result.inserted += 1
        logger.info(
            "Inserted: %s (score: %d, keywords: %s)",
            entry.title[:50],
            breakdown.score,
            ", ".join(breakdown.matched_keywords) or "-",
        )


def build_orchestrator(config: Config) -> IngestionOrchestrator:
    """Create an orchestrator from configuration."""
    settings = config.config.ingestion
    return IngestionOrchestrator(
        fetcher=FeedFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent),
        scorer=SignificanceScorer.from_config(config.config.scoring),
        max_entries_per_source=settings.max_entries_per_source,
    )


def run_ingestion(
    config: Config,
    deadline: Optional[float] = None,
    orchestrator: Optional[IngestionOrchestrator] = None,
) -> IngestionResult:
    """
    Open the database, run ingestion and record the run.

    A database that cannot be reached counts as an unavailable source list.
    """
    if orchestrator is None:
        orchestrator = build_orchestrator(config)
    if deadline is None:
        deadline = config.config.ingestion.run_deadline

    started_at = datetime.now(timezone.utc)
    try:
        with get_connection(config.get_db_config(), timeout=deadline) as conn:
            result = orchestrator.run(conn, deadline=deadline)
            try:
                RunManager().record_run(conn, result, started_at)
            except Exception as e:
                conn.rollback()
                logger.warning("Could not record ingestion run: %s", e)
            return result
    except Exception as e:
        logger.error("Ingestion error: %s", e)
        return IngestionResult.failure(str(e))
