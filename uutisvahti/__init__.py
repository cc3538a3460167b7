"""Uutisvahti - AI news feed ingestion and significance scoring."""

__version__ = "0.1.0"
