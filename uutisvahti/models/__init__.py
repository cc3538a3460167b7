"""Data models for Uutisvahti."""

from .article import Article
from .run import IngestionRun
from .source import Source, SourceCategory

__all__ = ["Article", "IngestionRun", "Source", "SourceCategory"]
