"""healthsched data models.

Core data structures used throughout healthsched for representing tasks,
arrivals, completion records, queue counters, diagnostics, and scheduling results.
"""

from healthsched.data_models.arrival import Arrival, classify_urgency
from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.result import (
    LatencyStats,
    LoadQuarter,
    MetricsSummary,
    Placement,
    QualityMetrics,
    ResourceMetrics,
    RunResult,
    Submission,
    TierComparison,
    TimeWindow,
)
from healthsched.data_models.stats import QueueStatistics
from healthsched.data_models.task import Task, TaskStateError, Urgency, VitalSigns

__all__ = [
    "Task",
    "TaskStateError",
    "Urgency",
    "VitalSigns",
    "Arrival",
    "classify_urgency",
    "CompletionRecord",
    "QueueStatistics",
    "Diagnostic",
    "Submission",
    "Placement",
    "LatencyStats",
    "TierComparison",
    "TimeWindow",
    "LoadQuarter",
    "ResourceMetrics",
    "QualityMetrics",
    "MetricsSummary",
    "RunResult",
]
