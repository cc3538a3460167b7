"""Source model for configured feed endpoints."""

from enum import Enum

from pydantic import Field

from .base import DBModel


class SourceCategory(str, Enum):
    """Editorial category of a source."""

    RESEARCH = "research"
    INDUSTRY = "industry"
    TOOLS = "tools"
    REGULATION = "regulation"
    EDUCATION = "education"


class Source(DBModel):
    """RSS/Atom feed source model."""

    name: str = Field(..., description="Display name")
    feed_url: str = Field(..., description="RSS or Atom feed URL")
    category: SourceCategory = Field(..., description="Source category")
    weight: int = Field(5, description="Base score weight", ge=1, le=10)
    is_active: bool = Field(True, description="Whether the source is polled")
