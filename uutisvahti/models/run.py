"""Run model for tracking ingestion runs."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class IngestionRun(DBModel):
    """Persisted summary of one ingestion run."""

    started_at: datetime = Field(..., description="When the run started")
    finished_at: Optional[datetime] = Field(None, description="When the run finished")
    status: str = Field("success", description="Run status (success, failed)")
    inserted: int = Field(0, description="New articles stored")
    skipped: int = Field(0, description="Entries already stored")
    failed_inserts: int = Field(0, description="Entries storage rejected")
    sources_total: int = Field(0, description="Active sources at run start")
    sources_failed: int = Field(0, description="Sources that could not be fetched or processed")
    timed_out: bool = Field(False, description="Whether the run hit its deadline")
    error: Optional[str] = Field(None, description="Run-level error message")
