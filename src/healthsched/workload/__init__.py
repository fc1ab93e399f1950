"""Workload sources: synthetic generation and scenario files."""

from healthsched.workload.generator import PatientProfile, WorkloadGenerator
from healthsched.workload.loader import GeneratedWorkload, ScenarioConfig, ScenarioLoader

__all__ = [
    "PatientProfile",
    "WorkloadGenerator",
    "GeneratedWorkload",
    "ScenarioConfig",
    "ScenarioLoader",
]
