"""Tests for ScenarioLoader."""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from healthsched.data_models.task import Urgency
from healthsched.workload.loader import ScenarioConfig, ScenarioLoader

SCENARIOS_DIR = Path(__file__).parent.parent / "scenarios"

ARRIVAL = {
    "patient_id": 1,
    "arrival_time": 0.0,
    "vitals": {"heart_rate": 75, "systolic_bp": 120, "temperature": 36.8, "spo2": 98},
}


def test_scenario_config_validation():
    """Test ScenarioConfig validation and defaults."""
    config = ScenarioConfig(name="one", arrivals=[ARRIVAL])
    assert config.name == "one"
    assert config.queue_capacity is None
    assert len(config.edge_rates) == 4
    assert len(config.cloud_rates) == 8
    assert config.arrivals[0].urgency == Urgency.NORMAL


def test_scenario_config_requires_workload():
    """Test a scenario without arrivals or generate is rejected."""
    with pytest.raises(ValidationError):
        ScenarioConfig(name="empty")


def test_scenario_config_invalid_rates():
    """Test non-positive resource rates are rejected."""
    with pytest.raises(ValidationError):
        ScenarioConfig(name="bad", edge_rates=[3000.0, 0.0], arrivals=[ARRIVAL])


def test_scenario_config_invalid_capacity():
    """Test non-positive queue capacity is rejected."""
    with pytest.raises(ValidationError):
        ScenarioConfig(name="bad", queue_capacity=0, arrivals=[ARRIVAL])


def test_scenario_config_invalid_arrival():
    """Test arrivals with out-of-range vitals are rejected."""
    bad = {**ARRIVAL, "vitals": {**ARRIVAL["vitals"], "spo2": 130}}
    with pytest.raises(ValidationError):
        ScenarioConfig(name="bad", arrivals=[bad])


def test_scenario_loader_init():
    """Test ScenarioLoader initialization."""
    with tempfile.TemporaryDirectory() as tmpdir:
        loader = ScenarioLoader(tmpdir)
        assert loader.scenarios_dir == Path(tmpdir)


def test_scenario_loader_missing_dir():
    """Test ScenarioLoader with non-existent directory."""
    with pytest.raises(ValueError, match="not found"):
        ScenarioLoader("/nonexistent/directory")


def test_load_valid_scenario():
    """Test loading a valid scenario file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "ward.json"
        with open(path, "w") as f:
            json.dump({"name": "ward", "queue_capacity": 5, "arrivals": [ARRIVAL]}, f)

        config = ScenarioLoader(tmpdir).load("ward.json")
        assert config.name == "ward"
        assert config.queue_capacity == 5
        assert len(config.arrivals) == 1


def test_load_absolute_path_without_dir():
    """Test loading by absolute path with no scenarios directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "gen.json"
        with open(path, "w") as f:
            json.dump({"name": "gen", "generate": {"patients": 2, "readings_per_patient": 1}}, f)

        config = ScenarioLoader().load(path)
        assert config.generate.patients == 2
        assert config.generate.seed is None


def test_load_missing_file():
    """Test loading a file that does not exist."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            ScenarioLoader(tmpdir).load("missing.json")


def test_load_malformed_json():
    """Test malformed JSON surfaces a decode error."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            ScenarioLoader(tmpdir).load("broken.json")


def test_list_scenarios():
    """Test listing scenario files."""
    loader = ScenarioLoader(SCENARIOS_DIR)
    names = [p.stem for p in loader.list_scenarios()]
    assert names == ["baseline", "edge_outage", "surge"]
    assert ScenarioLoader().list_scenarios() == []


@pytest.mark.parametrize("name", ["baseline", "edge_outage", "surge"])
def test_bundled_scenarios_load(name):
    """Test every bundled scenario validates."""
    config = ScenarioLoader(SCENARIOS_DIR).load(f"{name}.json")
    assert config.name == name
