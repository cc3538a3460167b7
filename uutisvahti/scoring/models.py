"""Scoring models."""

from typing import List

from pydantic import BaseModel, Field


class ScoreBreakdown(BaseModel):
    """Significance score of one entry with its components."""

    score: int = Field(..., description="Final score", ge=0, le=100)
    is_significant: bool = Field(..., description="score >= threshold")
    base: int = Field(..., description="Points from source weight")
    matched_keywords: List[str] = Field(default_factory=list, description="Distinct keywords found")
    recency_bonus: int = Field(0, description="Points for a recent publication date")
