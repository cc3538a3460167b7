"""Article storage and deduplication."""

from datetime import datetime, timezone
from typing import List, Optional

import psycopg
from psycopg import Connection
from psycopg.errors import UniqueViolation

from ..errors import ArticleInsertError, DuplicateArticleError, StorageError
from ..models import Article

_ARTICLE_COLUMNS = """
    id, source_id, title, url, guid, published_at, raw_excerpt, score,
    is_significant, summary_fi, why_it_matters, tags, title_fi,
    created_at, updated_at
"""


class ArticleStorage:
    """Handle article storage and deduplication.

    The existence check and the insert are not atomic. Two concurrent
    runs may both see a URL as new; the ``UNIQUE(url)`` constraint
    rejects the second insert, which surfaces as DuplicateArticleError.
    """

    def article_exists(self, conn: Connection, url: str) -> bool:
        """Check whether an article with exactly this URL is stored."""
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 FROM articles WHERE url = %s LIMIT 1", (url,))
                return cur.fetchone() is not None
        except psycopg.Error as e:
            conn.rollback()
            raise StorageError(f"Dedup lookup failed for {url}: {e}") from e

    def insert_article(
        self,
        conn: Connection,
        source_id: int,
        title: str,
        url: str,
        guid: Optional[str],
        published_at: Optional[datetime],
        raw_excerpt: Optional[str],
        score: int,
        is_significant: bool,
    ) -> int:
        """
        Insert a new article and commit.

        A missing publication time defaults to now.

        Returns:
            New article ID

        Raises:
            DuplicateArticleError: The URL is already stored
            ArticleInsertError: Storage rejected the row for another reason
        """
        if published_at is None:
            published_at = datetime.now(timezone.utc)

        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO articles (
                        source_id, title, url, guid, published_at,
                        raw_excerpt, score, is_significant
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        source_id,
                        title,
                        url,
                        guid,
                        published_at,
                        raw_excerpt,
                        score,
                        is_significant,
                    ),
                )
                article_id = cur.fetchone()["id"]
            conn.commit()
        except UniqueViolation as e:
            conn.rollback()
            raise DuplicateArticleError(url) from e
        except psycopg.Error as e:
            conn.rollback()
            raise ArticleInsertError(f"Could not insert {url}: {e}") from e

        return article_id

    def get_recent_articles(
        self,
        conn: Connection,
        limit: int = 20,
        significant_only: bool = False,
    ) -> List[Article]:
        """Get most recently published articles."""
        query = f"SELECT {_ARTICLE_COLUMNS} FROM articles"
        if significant_only:
            query += " WHERE is_significant = TRUE"
        query += " ORDER BY published_at DESC LIMIT %s"

        with conn.cursor() as cur:
            cur.execute(query, (limit,))
            return [Article(**row) for row in cur.fetchall()]

    def get_pending_enrichment(self, conn: Connection, limit: int = 10) -> List[Article]:
        """Get articles still missing a Finnish summary or title, oldest first."""
        with conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT {_ARTICLE_COLUMNS} FROM articles
                WHERE summary_fi IS NULL OR title_fi IS NULL
                ORDER BY created_at
                LIMIT %s
                """,
                (limit,),
            )
            return [Article(**row) for row in cur.fetchall()]

    def update_enrichment(
        self,
        conn: Connection,
        article_id: int,
        summary_fi: Optional[str] = None,
        why_it_matters: Optional[str] = None,
        tags: Optional[List[str]] = None,
        title_fi: Optional[str] = None,
    ) -> bool:
        """
        Store enrichment fields for an article.

        Only enrichment columns are written; score, title, url and source
        stay as ingested. Fields passed as None keep their stored value.
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE articles SET
                    summary_fi = COALESCE(%s, summary_fi),
                    why_it_matters = COALESCE(%s, why_it_matters),
                    tags = COALESCE(%s, tags),
                    title_fi = COALESCE(%s, title_fi)
                WHERE id = %s
                """,
                (summary_fi, why_it_matters, tags, title_fi, article_id),
            )
            updated = cur.rowcount > 0
        conn.commit()
        return updated
