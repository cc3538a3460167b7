"""Ingestion run history in database."""

from datetime import datetime, timezone
from typing import List, Optional

from psycopg import Connection

from ..ingestion.models import IngestionResult
from ..models import IngestionRun


class RunManager:
    """Record ingestion runs so administrators can see that runs happened."""

    def record_run(
        self,
        conn: Connection,
        result: IngestionResult,
        started_at: datetime,
        finished_at: Optional[datetime] = None,
    ) -> int:
        """
        Store the outcome of a finished run.

        Returns:
            Run ID
        """
        if finished_at is None:
            finished_at = datetime.now(timezone.utc)

        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO ingestion_runs (
                    started_at, finished_at, status, inserted, skipped,
                    failed_inserts, sources_total, sources_failed, timed_out, error
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
                """,
                (
                    started_at,
                    finished_at,
                    "success" if result.success else "failed",
                    result.inserted,
                    result.skipped,
                    result.failed_inserts,
                    result.sources_total,
                    result.sources_failed,
                    result.timed_out,
                    result.error,
                ),
            )
            run_id = cur.fetchone()["id"]

        conn.commit()
        return run_id

    def get_recent_runs(
        self,
        conn: Connection,
        limit: int = 10,
    ) -> List[IngestionRun]:
        """Get recent runs, newest first."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM ingestion_runs
                ORDER BY started_at DESC
                LIMIT %s
                """,
                (limit,),
            )
            return [IngestionRun(**row) for row in cur.fetchall()]
