"""Significance scoring."""

from .models import ScoreBreakdown
from .scorer import SignificanceScorer

__all__ = ["ScoreBreakdown", "SignificanceScorer"]
