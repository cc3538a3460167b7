"""Source management in database."""

from typing import Dict, List, Optional

import psycopg
from psycopg import Connection
from psycopg.errors import UniqueViolation

from ..config import SourceConfig
from ..errors import StorageError
from ..models import Source, SourceCategory

_SOURCE_COLUMNS = "id, name, feed_url, category, weight, is_active, created_at, updated_at"


class SourceManager:
    """Manage feed sources in database."""

    def get_active_sources(self, conn: Connection) -> List[Source]:
        """Get all sources that should be polled."""
        try:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {_SOURCE_COLUMNS} FROM sources
                    WHERE is_active = TRUE
                    ORDER BY id
                    """
                )
                return [Source(**row) for row in cur.fetchall()]
        except psycopg.Error as e:
            conn.rollback()
            raise StorageError(f"Could not load active sources: {e}") from e

    def get_sources(self, conn: Connection) -> List[Source]:
        """Get all sources from database."""
        with conn.cursor() as cur:
            cur.execute(f"SELECT {_SOURCE_COLUMNS} FROM sources ORDER BY name")
            return [Source(**row) for row in cur.fetchall()]

    def get_source_by_name(self, conn: Connection, name: str) -> Optional[Source]:
        """Get a source by its unique name."""
        with conn.cursor() as cur:
            cur.execute(f"SELECT {_SOURCE_COLUMNS} FROM sources WHERE name = %s", (name,))
            row = cur.fetchone()
            return Source(**row) if row else None

    def add_source(
        self,
        conn: Connection,
        name: str,
        feed_url: str,
        category: SourceCategory,
        weight: int = 5,
        is_active: bool = True,
    ) -> Source:
        """Insert a new source."""
        # Validate before touching the database
        source = Source(
            name=name, feed_url=feed_url, category=category, weight=weight, is_active=is_active
        )
        try:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO sources (name, feed_url, category, weight, is_active)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_SOURCE_COLUMNS}
                    """,
                    (
                        source.name,
                        source.feed_url,
                        source.category.value,
                        source.weight,
                        source.is_active,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        except UniqueViolation as e:
            conn.rollback()
            raise StorageError(f"Source '{name}' or an active source with this URL already exists") from e
        return Source(**row)

    def set_active(self, conn: Connection, name: str, is_active: bool) -> bool:
        """Activate or deactivate a source. Returns False if it does not exist."""
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE sources SET is_active = %s WHERE name = %s",
                    (is_active, name),
                )
                updated = cur.rowcount > 0
            conn.commit()
        except UniqueViolation as e:
            conn.rollback()
            raise StorageError(f"Another active source already uses the feed URL of '{name}'") from e
        return updated

    def update_source(
        self,
        conn: Connection,
        name: str,
        weight: Optional[int] = None,
        category: Optional[SourceCategory] = None,
    ) -> bool:
        """Update weight and/or category. Returns False if nothing matched."""
        assignments = []
        params: list = []
        if weight is not None:
            if not 1 <= weight <= 10:
                raise ValueError(f"Weight must be between 1 and 10, got {weight}")
            assignments.append("weight = %s")
            params.append(weight)
        if category is not None:
            assignments.append("category = %s")
            params.append(SourceCategory(category).value)
        if not assignments:
            return False

        with conn.cursor() as cur:
            cur.execute(
                f"UPDATE sources SET {', '.join(assignments)} WHERE name = %s",
                (*params, name),
            )
            updated = cur.rowcount > 0
        conn.commit()
        return updated

    def remove_source(self, conn: Connection, name: str) -> bool:
        """Delete a source and its articles. Returns False if it does not exist."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM sources WHERE name = %s", (name,))
            deleted = cur.rowcount > 0
        conn.commit()
        return deleted

    def sync_sources(
        self,
        conn: Connection,
        sources: List[SourceConfig],
    ) -> Dict[str, int]:
        """
        Seed sources from config into the database.

        Existing sources keep their settings, since administrators may
        have edited them since seeding.

        Returns:
            Mapping of source name to database ID
        """
        source_map = {}

        with conn.cursor() as cur:
            for source in sources:
                cur.execute(
                    """
                    INSERT INTO sources (name, feed_url, category, weight, is_active)
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (name) DO UPDATE SET name = EXCLUDED.name
                    RETURNING id
                    """,
                    (
                        source.name,
                        source.feed_url,
                        source.category.value,
                        source.weight,
                        source.is_active,
                    ),
                )
                source_map[source.name] = cur.fetchone()["id"]

        conn.commit()
        return source_map
