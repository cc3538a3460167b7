"""Article model for ingested feed entries."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model.

    Score, title, url and source are written once at ingestion. The Finnish
    enrichment fields are filled in later by the summarization job.
    """

    source_id: int = Field(..., description="Foreign key to sources table")
    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Canonical URL, unique across articles")
    guid: Optional[str] = Field(None, description="Feed GUID or Atom id")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    raw_excerpt: Optional[str] = Field(None, description="Stripped, truncated feed description")
    score: int = Field(0, description="Significance score", ge=0, le=100)
    is_significant: bool = Field(False, description="score >= 50 at ingestion time")
    summary_fi: Optional[str] = Field(None, description="Finnish summary")
    why_it_matters: Optional[str] = Field(None, description="Finnish 'why it matters' text")
    tags: List[str] = Field(default_factory=list, description="Topic tags")
    title_fi: Optional[str] = Field(None, description="Finnish title")

    @property
    def needs_enrichment(self) -> bool:
        """Whether the summarization job still has work on this article."""
        return self.summary_fi is None or self.title_fi is None
