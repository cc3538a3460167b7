"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.source import SourceCategory

DEFAULT_KEYWORDS = [
    "benchmark", "sota", "state-of-the-art", "release", "paper", "breakthrough",
    "eu ai act", "regulation", "gpt-5", "gemini", "claude", "llama", "mistral",
    "openai", "anthropic", "google", "meta", "microsoft", "nvidia",
    "arxiv", "neurips", "icml", "iclr", "research", "model", "training",
    "fine-tuning", "rlhf", "multimodal", "vision", "language model",
]


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("uutisvahti", description="Database name")
    user: str = Field("uutisvahti", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class IngestionConfig(BaseModel):
    """Feed ingestion parameters."""

    user_agent: str = Field("AI-Uutisvahti/1.0", description="User-Agent sent to feed hosts")
    fetch_timeout: float = Field(20.0, description="Per-feed HTTP timeout in seconds", gt=0)
    max_entries_per_source: int = Field(
        20, description="Entries considered per source and run", ge=1, le=500
    )
    run_deadline: Optional[float] = Field(
        None, description="Wall-clock limit for one run in seconds", gt=0
    )


class ScoringConfig(BaseModel):
    """Significance scoring parameters."""

    keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_KEYWORDS),
        description="Keywords worth points when found in title or description",
    )
    weight_multiplier: int = Field(5, ge=0)
    keyword_points: int = Field(10, ge=0)
    recent_hours: float = Field(24.0, gt=0)
    recent_bonus: int = Field(20, ge=0)
    fresh_hours: float = Field(48.0, gt=0)
    fresh_bonus: int = Field(10, ge=0)
    max_score: int = Field(100, ge=0, le=100)
    significance_threshold: int = Field(50, ge=0, le=100)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        """Lowercase keywords and drop blanks and repeats."""
        seen = []
        for keyword in v:
            keyword = keyword.strip().lower()
            if keyword and keyword not in seen:
                seen.append(keyword)
        return seen

    @field_validator("fresh_hours")
    @classmethod
    def validate_windows(cls, v: float, info) -> float:
        """The fresh window must not be shorter than the recent window."""
        recent = info.data.get("recent_hours", 24.0)
        if v < recent:
            raise ValueError(f"fresh_hours ({v}) must be >= recent_hours ({recent})")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Console log level")
    log_dir: Optional[str] = Field(None, description="Directory for rotated log files")


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class SourceConfig(BaseModel):
    """Source definition from sources.yaml, used to seed the database."""

    name: str = Field(..., description="Source name")
    feed_url: str = Field(..., description="RSS or Atom feed URL")
    category: SourceCategory = Field(SourceCategory.INDUSTRY, description="Source category")
    weight: int = Field(5, description="Source weight", ge=1, le=10)
    is_active: bool = Field(True, description="Whether the source is polled")
