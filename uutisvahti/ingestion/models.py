"""Data models for ingestion."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class FeedEntry(BaseModel):
    """One normalized entry extracted from a feed. Never persisted directly."""

    title: str = Field(..., min_length=1, description="Entry title")
    link: str = Field(..., min_length=1, description="Canonical entry URL")
    guid: Optional[str] = Field(None, description="RSS guid or Atom id")
    published: Optional[str] = Field(None, description="Publication date as found in the feed")
    published_at: Optional[datetime] = Field(None, description="Parsed publication date (UTC)")
    description: Optional[str] = Field(None, description="Stripped, truncated description")


class FetchResult(BaseModel):
    """Result of fetching one source's feed."""

    source_name: str = Field(..., description="Source name")
    feed_url: str = Field(..., description="Feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    text: Optional[str] = Field(None, description="Response body")
    status_code: Optional[int] = Field(None, description="HTTP status code")
    error: Optional[str] = Field(None, description="Error message if failed")


class IngestionResult(BaseModel):
    """Aggregate result of one ingestion run."""

    success: bool = Field(..., description="False only when sources could not be loaded")
    inserted: int = Field(0, description="New articles stored")
    skipped: int = Field(0, description="Entries already stored")
    failed_inserts: int = Field(0, description="Entries storage rejected")
    sources_total: int = Field(0, description="Active sources at run start")
    sources_failed: int = Field(0, description="Sources skipped because of errors")
    timed_out: bool = Field(False, description="Whether the run hit its deadline")
    error: Optional[str] = Field(None, description="Run-level error message")

    @classmethod
    def failure(cls, error: str) -> "IngestionResult":
        """Result for a run that could not start."""
        return cls(success=False, error=error)

    def to_response(self) -> Dict[str, Any]:
        """Response body for callers triggering a run."""
        if not self.success:
            return {"error": self.error or "Unknown error"}
        return {"success": True, "inserted": self.inserted, "skipped": self.skipped}
