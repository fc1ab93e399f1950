"""healthsched - Two-tier (edge/cloud) scheduler for healthcare IoT workloads."""

# Data models
from healthsched.data_models.arrival import Arrival
from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.result import MetricsSummary, Placement, RunResult, Submission
from healthsched.data_models.stats import QueueStatistics
from healthsched.data_models.task import Task, TaskStateError, Urgency, VitalSigns

# Configuration
from healthsched.config import SchedulerConfig

# Scheduling
from healthsched.queueing.admission import AdmissionQueue
from healthsched.placement.engine import PlacementEngine, TierLoad
from healthsched.placement.fabric import ComputeFabric
from healthsched.tracking.tracker import CompletionTracker
from healthsched.metrics.aggregator import MetricsAggregator
from healthsched.scheduler import Scheduler

# Workloads
from healthsched.workload.generator import WorkloadGenerator
from healthsched.workload.loader import ScenarioConfig, ScenarioLoader

# Runners
from healthsched.runner.fabric import SimulatedFabric
from healthsched.runner.simulation import SimulationRunner

# IO
from healthsched.io.formatter import ReportFormatter

__version__ = "0.1.0"

__all__ = [
    # Data models
    "Task",
    "TaskStateError",
    "Urgency",
    "VitalSigns",
    "Arrival",
    "CompletionRecord",
    "QueueStatistics",
    "Diagnostic",
    "Submission",
    "Placement",
    "MetricsSummary",
    "RunResult",
    # Configuration
    "SchedulerConfig",
    # Scheduling
    "AdmissionQueue",
    "PlacementEngine",
    "TierLoad",
    "ComputeFabric",
    "CompletionTracker",
    "MetricsAggregator",
    "Scheduler",
    # Workloads
    "WorkloadGenerator",
    "ScenarioConfig",
    "ScenarioLoader",
    # Runners
    "SimulatedFabric",
    "SimulationRunner",
    # IO
    "ReportFormatter",
]
