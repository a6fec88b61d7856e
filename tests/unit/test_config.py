"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from flowtrim.config import load_config


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("FLOWTRIM_CONFIG", "FLOWTRIM_MISSING_STEPS_POLICY", "FLOWTRIM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_config_file():
    config = load_config()
    assert config.decomposition.min_spec_size == 2
    assert config.decomposition.max_spec_size == 8
    assert config.decomposition.cost_boundary == 15
    assert config.application.missing_steps_policy == "ignore"
    assert config.log_level == "WARNING"


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
decomposition:
  min_spec_size: 3
  max_spec_size: 6
application:
  missing_steps_policy: warn
"""
    )
    monkeypatch.setenv("FLOWTRIM_CONFIG", str(config_path))

    config = load_config()
    assert config.decomposition.min_spec_size == 3
    assert config.decomposition.max_spec_size == 6
    assert config.application.missing_steps_policy == "warn"


def test_load_config_from_working_directory(tmp_path):
    (tmp_path / "flowtrim.yaml").write_text("log_level: DEBUG\n")
    assert load_config().log_level == "DEBUG"


def test_explicit_path_wins_over_env(tmp_path, monkeypatch):
    env_path = tmp_path / "env.yaml"
    env_path.write_text("log_level: ERROR\n")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("log_level: INFO\n")
    monkeypatch.setenv("FLOWTRIM_CONFIG", str(env_path))

    assert load_config(str(explicit)).log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FLOWTRIM_MISSING_STEPS_POLICY", "SKIP")
    monkeypatch.setenv("FLOWTRIM_LOG_LEVEL", "debug")

    config = load_config()
    assert config.application.missing_steps_policy == "skip"
    assert config.log_level == "DEBUG"


def test_invalid_policy_is_rejected(monkeypatch):
    monkeypatch.setenv("FLOWTRIM_MISSING_STEPS_POLICY", "explode")
    with pytest.raises(ValidationError):
        load_config()


def test_invalid_spec_range_is_rejected(tmp_path):
    (tmp_path / "flowtrim.yaml").write_text(
        "decomposition:\n  min_spec_size: 6\n  max_spec_size: 4\n"
    )
    with pytest.raises(ValidationError):
        load_config()
