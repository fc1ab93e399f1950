"""Simulation driver and reference compute fabric."""

from healthsched.runner.fabric import Completion, SimulatedFabric
from healthsched.runner.simulation import SimulationRunner, run_generated, run_scenario

__all__ = [
    "Completion",
    "SimulatedFabric",
    "SimulationRunner",
    "run_generated",
    "run_scenario",
]
