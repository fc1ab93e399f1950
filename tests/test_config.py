"""Tests for SchedulerConfig."""

import os

import pytest
from pydantic import ValidationError

from healthsched.config import DEFAULT_QUEUE_CAPACITY, SchedulerConfig


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no HEALTHSCHED_* variables and no .env file in reach."""
    for key in list(os.environ):
        if key.startswith("HEALTHSCHED_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env):
    """Test default settings."""
    config = SchedulerConfig()
    assert config.queue_capacity == DEFAULT_QUEUE_CAPACITY
    assert config.nominal_queue_delay == 0.1
    assert config.edge_slack_factor == 3
    assert config.placement_failure_policy == "drop"
    assert not config.evict_expired
    assert config.seed is None


def test_invalid_values():
    """Test out-of-range settings are rejected."""
    with pytest.raises(ValidationError):
        SchedulerConfig(queue_capacity=0)
    with pytest.raises(ValidationError):
        SchedulerConfig(placement_failure_policy="retry")
    with pytest.raises(ValidationError):
        SchedulerConfig(nominal_queue_delay=-0.5)


def test_settings_from_environment(clean_env):
    """Test settings read from HEALTHSCHED_* variables."""
    clean_env.setenv("HEALTHSCHED_QUEUE_CAPACITY", "25")
    clean_env.setenv("HEALTHSCHED_PLACEMENT_FAILURE_POLICY", "hold")
    clean_env.setenv("HEALTHSCHED_EVICT_EXPIRED", "true")
    clean_env.setenv("HEALTHSCHED_SEED", "9")
    clean_env.setenv("UNRELATED", "x")

    config = SchedulerConfig()
    assert config.queue_capacity == 25
    assert config.placement_failure_policy == "hold"
    assert config.evict_expired
    assert config.seed == 9
    assert config.nominal_queue_delay == 0.1


def test_settings_from_dotenv_file(clean_env, tmp_path):
    """Test settings read from a .env file in the working directory."""
    (tmp_path / ".env").write_text("HEALTHSCHED_QUEUE_CAPACITY=7\nOTHER_TOOL_SETTING=1\n")
    assert SchedulerConfig().queue_capacity == 7


def test_keyword_arguments_override_environment(clean_env):
    """Test explicit values win over the environment."""
    clean_env.setenv("HEALTHSCHED_QUEUE_CAPACITY", "25")
    assert SchedulerConfig(queue_capacity=3).queue_capacity == 3


def test_invalid_environment_value(clean_env):
    """Test malformed variables are rejected."""
    clean_env.setenv("HEALTHSCHED_QUEUE_CAPACITY", "many")
    with pytest.raises(ValidationError):
        SchedulerConfig()
