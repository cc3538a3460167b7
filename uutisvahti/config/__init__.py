"""Configuration management."""

from .loader import Config, default_config_path, load_config, load_sources, save_config, save_sources
from .models import (
    DEFAULT_KEYWORDS,
    ConfigModel,
    IngestionConfig,
    LoggingConfig,
    PostgresConfig,
    ScoringConfig,
    SourceConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DEFAULT_KEYWORDS",
    "IngestionConfig",
    "LoggingConfig",
    "PostgresConfig",
    "ScoringConfig",
    "SourceConfig",
    "default_config_path",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
