"""Tests for configuration loading."""

import pytest

from rotten_trenches.config import ConfigurationError, env_config, load_config


def test_load_config(tmp_path, monkeypatch):
    monkeypatch.setenv("HELIUS_API_KEY", "secret")
    path = tmp_path / "config.yaml"
    path.write_text(
        """
job:
  lookback_hours: null
  entity_delay_seconds: 1.5
database:
  path: /tmp/x.db
"""
    )

    config = load_config(path)

    assert config.job.lookback_hours is None
    assert config.job.entity_delay_seconds == 1.5
    assert config.job.fallback_sol_price == 150.0
    assert config.database.path == "/tmp/x.db"
    assert config.api.transaction_limit == 100
    assert config.logging.level == "INFO"
    assert config.require_helius_api_key() == "secret"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("HELIUS_API_KEY", raising=False)

    config = env_config()

    with pytest.raises(ConfigurationError, match="HELIUS_API_KEY is not configured"):
        config.require_helius_api_key()


def test_empty_api_key_counts_as_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("HELIUS_API_KEY", "")
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(path).helius_api_key is None
