"""Tests for configuration loading."""

import pytest
import yaml

from uutisvahti.config import (
    DEFAULT_KEYWORDS,
    Config,
    ConfigModel,
    SourceConfig,
    load_config,
    load_sources,
    save_config,
    save_sources,
)


def test_defaults_without_file(tmp_path):
    config = Config(tmp_path / "missing.yaml")

    assert config.config.ingestion.max_entries_per_source == 20
    assert config.config.ingestion.user_agent == "AI-Uutisvahti/1.0"
    assert config.config.scoring.keywords == DEFAULT_KEYWORDS
    assert len(DEFAULT_KEYWORDS) == 31


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    monkeypatch.setenv("UUTISVAHTI_CONFIG", str(path))

    assert Config().config_path == path


def test_load_config_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({
            "ingestion": {"fetch_timeout": 5, "max_entries_per_source": 10},
            "scoring": {"keywords": ["Claude", "GEMINI"], "significance_threshold": 60},
        })
    )

    config = load_config(path)

    assert config.ingestion.fetch_timeout == 5
    assert config.ingestion.max_entries_per_source == 10
    assert config.scoring.keywords == ["claude", "gemini"]
    assert config.scoring.significance_threshold == 60


def test_invalid_config_raises_value_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"scoring": {"recent_hours": 48, "fresh_hours": 24}}))

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_db_password_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    save_config(ConfigModel(postgres={"password_env": "TEST_DB_PASSWORD"}), path)
    monkeypatch.setenv("TEST_DB_PASSWORD", "s3cret")

    assert Config(path).get_db_config()["password"] == "s3cret"


def test_sources_round_trip_skips_invalid(tmp_path):
    path = tmp_path / "sources.yaml"
    save_sources(
        [SourceConfig(name="Lab", feed_url="https://lab.example.com/feed", category="research", weight=9)],
        path,
    )
    data = yaml.safe_load(path.read_text())
    data["sources"].append({"name": "Broken", "feed_url": "https://x.example.com", "weight": 99})
    path.write_text(yaml.safe_dump(data))

    sources = load_sources(path)

    assert [s.name for s in sources] == ["Lab"]
    assert sources[0].category.value == "research"
