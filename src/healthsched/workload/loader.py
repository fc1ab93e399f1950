"""Scenario loader for healthsched scenario files."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from healthsched.config import DEFAULT_CLOUD_RATES, DEFAULT_EDGE_RATES
from healthsched.data_models.arrival import Arrival


class GeneratedWorkload(BaseModel):
    """Parameters for a generated workload."""

    patients: int = Field(ge=0, description="Number of synthetic patients")
    readings_per_patient: int = Field(ge=0, description="Readings per patient")
    seed: int | None = Field(default=None, description="Generator seed")


class ScenarioConfig(BaseModel):
    """Validated scenario configuration."""

    name: str = Field(description="Scenario name")
    description: str = Field(default="", description="What the scenario exercises")
    queue_capacity: int | None = Field(
        default=None, gt=0, description="Per-urgency queue capacity override"
    )
    edge_rates: list[float] = Field(
        default_factory=lambda: list(DEFAULT_EDGE_RATES),
        description="Processing rate of each edge resource",
    )
    cloud_rates: list[float] = Field(
        default_factory=lambda: list(DEFAULT_CLOUD_RATES),
        description="Processing rate of each cloud resource",
    )
    arrivals: list[Arrival] = Field(default_factory=list, description="Explicit arrivals")
    generate: GeneratedWorkload | None = Field(
        default=None, description="Generated arrivals, added to the explicit ones"
    )

    @field_validator("edge_rates", "cloud_rates")
    @classmethod
    def validate_rates(cls, v: list[float]) -> list[float]:
        """Every resource must process work."""
        for rate in v:
            if rate <= 0:
                raise ValueError(f"Resource rates must be positive, got {rate}")
        return v

    @model_validator(mode="after")
    def validate_workload(self) -> "ScenarioConfig":
        if not self.arrivals and self.generate is None:
            raise ValueError(f"Scenario {self.name!r} has neither arrivals nor generate")
        return self


class ScenarioLoader:
    """Loads and validates healthsched scenario files."""

    def __init__(self, scenarios_dir: str | Path | None = None) -> None:
        """
        Initialize the scenario loader.

        Args:
            scenarios_dir: Directory relative paths are resolved against
                (current directory if None)
        """
        self.scenarios_dir = Path(scenarios_dir) if scenarios_dir is not None else None
        if self.scenarios_dir is not None and not self.scenarios_dir.exists():
            raise ValueError(f"Scenarios directory not found: {self.scenarios_dir}")

    def load(self, path: str | Path) -> ScenarioConfig:
        """
        Load and validate a scenario JSON file.

        Args:
            path: Path to the scenario file (absolute or relative to scenarios_dir)

        Returns:
            Validated ScenarioConfig object

        Raises:
            FileNotFoundError: If the scenario file doesn't exist
            pydantic.ValidationError: If the scenario is invalid
            json.JSONDecodeError: If JSON is malformed
        """
        scenario_path = Path(path)

        if not scenario_path.is_absolute() and self.scenarios_dir is not None:
            scenario_path = self.scenarios_dir / scenario_path

        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {scenario_path}")

        with open(scenario_path) as f:
            raw_config = json.load(f)

        return ScenarioConfig.model_validate(raw_config)

    def list_scenarios(self) -> list[Path]:
        """
        List all scenario files in the scenarios directory.

        Returns:
            Sorted list of paths to scenario files
        """
        if self.scenarios_dir is None:
            return []
        return sorted(self.scenarios_dir.rglob("*.json"))
