"""Tests for the healthsched command line."""

import json
from pathlib import Path

import pytest

from healthsched.cli import main

SCENARIOS_DIR = Path(__file__).parent.parent / "scenarios"


def test_show_config(capsys, monkeypatch):
    """Test show-config prints the effective settings."""
    monkeypatch.setenv("HEALTHSCHED_QUEUE_CAPACITY", "12")
    main(["show-config"])

    config = json.loads(capsys.readouterr().out)
    assert config["queue_capacity"] == 12
    assert config["placement_failure_policy"] == "drop"


def test_simulate_generated(capsys):
    """Test a generated simulation prints a report."""
    main(["simulate", "--patients", "4", "--readings", "2", "--seed", "3"])
    out = capsys.readouterr().out
    assert "HEALTHCARE SCHEDULER REPORT" in out
    assert "SUBMITTED: 8" in out


def test_simulate_scenario_to_file(tmp_path, capsys):
    """Test a scenario run writes the JSON result."""
    output = tmp_path / "out" / "surge.json"
    main([
        "simulate",
        "--scenario", str(SCENARIOS_DIR / "surge.json"),
        "--output", str(output),
        "--quiet",
    ])

    assert capsys.readouterr().out == ""
    result = json.loads(output.read_text())
    assert result["scenario"] == "surge"
    assert result["admitted"] == 4


def test_simulate_missing_scenario_exits():
    """Test a missing scenario file exits with an error."""
    with pytest.raises(SystemExit) as exc:
        main(["simulate", "--scenario", "/nonexistent/scenario.json"])
    assert exc.value.code == 1


def test_no_command_exits(capsys):
    """Test running without a command prints help and exits."""
    with pytest.raises(SystemExit):
        main([])
