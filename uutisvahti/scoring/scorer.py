"""Significance scoring for feed entries."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from ..config import ScoringConfig
from ..ingestion.models import FeedEntry
from .models import ScoreBreakdown


class SignificanceScorer:
    """Score entries from source weight, keyword hits and recency.

    The scorer is pure: the same entry, weight and ``now`` always give
    the same score.
    """

    def __init__(
        self,
        keywords: Sequence[str],
        weight_multiplier: int = 5,
        keyword_points: int = 10,
        recent_hours: float = 24.0,
        recent_bonus: int = 20,
        fresh_hours: float = 48.0,
        fresh_bonus: int = 10,
        max_score: int = 100,
        significance_threshold: int = 50,
    ) -> None:
        """
        Initialize significance scorer.

        Args:
            keywords: Terms matched case-insensitively as substrings
            weight_multiplier: Points per unit of source weight
            keyword_points: Points per distinct keyword found
            recent_hours: Age limit for the larger recency bonus
            recent_bonus: Bonus for entries younger than recent_hours
            fresh_hours: Age limit for the smaller recency bonus
            fresh_bonus: Bonus for entries younger than fresh_hours
            max_score: Upper clamp for the final score
            significance_threshold: Minimum score of a significant entry
        """
        if not 0 <= max_score <= 100:
            raise ValueError(f"max_score must be between 0 and 100, got {max_score}")

        self.keywords = list(dict.fromkeys(k.lower() for k in keywords if k))
        self.weight_multiplier = weight_multiplier
        self.keyword_points = keyword_points
        self.recent_hours = recent_hours
        self.recent_bonus = recent_bonus
        self.fresh_hours = fresh_hours
        self.fresh_bonus = fresh_bonus
        self.max_score = max_score
        self.significance_threshold = significance_threshold

    @classmethod
    def from_config(cls, config: ScoringConfig) -> "SignificanceScorer":
        """Create a scorer from the scoring section of the config."""
        return cls(
            keywords=config.keywords,
            weight_multiplier=config.weight_multiplier,
            keyword_points=config.keyword_points,
            recent_hours=config.recent_hours,
            recent_bonus=config.recent_bonus,
            fresh_hours=config.fresh_hours,
            fresh_bonus=config.fresh_bonus,
            max_score=config.max_score,
            significance_threshold=config.significance_threshold,
        )

    def matched_keywords(self, entry: FeedEntry) -> List[str]:
        """Distinct keywords found in the title or description."""
        text = f"{entry.title} {entry.description or ''}".lower()
        return [keyword for keyword in self.keywords if keyword in text]

    def recency_bonus(self, published_at: Optional[datetime], now: Optional[datetime] = None) -> int:
        """Bonus points for a recent publication date."""
        if published_at is None:
            return 0
        if now is None:
            now = datetime.now(timezone.utc)
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        # Future dates count as brand new
        age_hours = (now - published_at).total_seconds() / 3600
        if age_hours < self.recent_hours:
            return self.recent_bonus
        if age_hours < self.fresh_hours:
            return self.fresh_bonus
        return 0

    def evaluate(self, entry: FeedEntry, weight: int, now: Optional[datetime] = None) -> ScoreBreakdown:
        """Score an entry and keep the breakdown."""
        base = weight * self.weight_multiplier
        matched = self.matched_keywords(entry)
        bonus = self.recency_bonus(entry.published_at, now)

        score = min(base + len(matched) * self.keyword_points + bonus, self.max_score)
        return ScoreBreakdown(
            score=score,
            is_significant=self.is_significant(score),
            base=base,
            matched_keywords=matched,
            recency_bonus=bonus,
        )

    def score(self, entry: FeedEntry, weight: int, now: Optional[datetime] = None) -> int:
        """Score an entry from 0 to max_score."""
        return self.evaluate(entry, weight, now).score

    def is_significant(self, score: int) -> bool:
        """Whether a score makes an article significant."""
        return score >= self.significance_threshold
