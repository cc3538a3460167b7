"""Ingestion pipeline."""

from .orchestrator import IngestionOrchestrator, build_orchestrator, run_ingestion

__all__ = ["IngestionOrchestrator", "build_orchestrator", "run_ingestion"]
