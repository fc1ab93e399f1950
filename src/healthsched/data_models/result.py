"""Result data models returned by scheduler operations."""

from pydantic import BaseModel, Field

from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.stats import QueueStatistics


class Submission(BaseModel):
    """Outcome of offering a task to the scheduler."""

    task_id: int | None = Field(default=None, description="Assigned id (None for invalid input)")
    admitted: bool = Field(description="True if the task entered an admission queue")
    diagnostic: Diagnostic | None = Field(default=None, description="Why the task was refused")

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.admitted:
            return f"Submission(task {self.task_id} admitted)"
        return f"Submission(refused: {self.diagnostic})"


class Placement(BaseModel):
    """Outcome of a placement decision for one task."""

    task_id: int = Field(ge=0, description="Task that was placed")
    placed: bool = Field(description="True if a resource was found")
    tier: str | None = Field(default=None, description="Chosen tier")
    resource_index: int | None = Field(default=None, ge=0, description="Resource within the tier")
    utilization: float | None = Field(
        default=None, ge=0, le=1, description="Edge utilization seen by HIGH placement"
    )
    network_slice: str | None = Field(default=None, description="Slice used for telemetry")
    network_latency_ms: float | None = Field(
        default=None, ge=0, description="Jittered slice latency (telemetry only)"
    )
    diagnostic: Diagnostic | None = Field(default=None, description="Why placement failed")

    def __str__(self) -> str:
        """Human-readable string representation."""
        if not self.placed:
            return f"Placement(task {self.task_id} unplaced)"
        return (
            f"Placement(task {self.task_id} -> {self.tier}[{self.resource_index}] "
            f"via {self.network_slice} {self.network_latency_ms:.2f}ms)"
        )


class LatencyStats(BaseModel):
    """Response-time statistics for a group of completion records."""

    count: int = Field(default=0, ge=0, description="Number of records")
    mean: float = Field(default=0.0, description="Mean response time")
    median: float = Field(default=0.0, description="Nearest-rank median response time")
    std_dev: float = Field(default=0.0, ge=0, description="Population standard deviation")
    min: float = Field(default=0.0, description="Fastest response time")
    max: float = Field(default=0.0, description="Slowest response time")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"n={self.count}, mean={self.mean:.2f}s, median={self.median:.2f}s, "
            f"std={self.std_dev:.2f}s"
        )


class TierComparison(BaseModel):
    """Edge-versus-cloud comparison; all zero when either tier has no records."""

    edge_mean_latency: float = Field(default=0.0, description="Mean edge response time")
    cloud_mean_latency: float = Field(default=0.0, description="Mean cloud response time")
    latency_ratio: float = Field(
        default=0.0, ge=0, description="Cloud mean latency over edge mean latency"
    )
    edge_sla_rate: float = Field(default=0.0, ge=0, le=1, description="Edge SLA compliance")
    cloud_sla_rate: float = Field(default=0.0, ge=0, le=1, description="Cloud SLA compliance")
    edge_mean_execution: float = Field(default=0.0, description="Mean edge execution time")
    cloud_mean_execution: float = Field(default=0.0, description="Mean cloud execution time")


class TimeWindow(BaseModel):
    """Throughput and latency of the records whose approximate start falls in one window."""

    index: int = Field(ge=1, description="1-based window number")
    start: float = Field(description="Window start in seconds")
    end: float = Field(description="Window end in seconds (exclusive)")
    count: int = Field(ge=0, description="Records started in the window")
    throughput: float = Field(ge=0, description="Records per second of window")
    mean_latency: float = Field(description="Mean response time of the window's records")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"Window {self.index} ({self.start:.1f}-{self.end:.1f}s): {self.count} tasks, "
            f"{self.throughput:.2f} tasks/s, {self.mean_latency:.2f}s avg latency"
        )


class LoadQuarter(BaseModel):
    """Latency, waiting time and SLA compliance of one quarter of the load."""

    index: int = Field(ge=1, le=4, description="1-based quarter number")
    count: int = Field(ge=0, description="Records in the quarter")
    mean_latency: float = Field(description="Mean response time")
    mean_waiting: float = Field(ge=0, description="Mean waiting time")
    sla_compliance: float = Field(ge=0, le=1, description="SLA compliance (0-1)")


class ResourceMetrics(BaseModel):
    """System-wide use of compute time."""

    system_efficiency: float = Field(
        default=0.0, ge=0, description="Total execution time over total response time"
    )
    avg_resource_utilization: float = Field(
        default=0.0, ge=0, description="Total execution time over execution plus waiting time"
    )
    total_execution_time: float = Field(default=0.0, ge=0, description="Sum of execution times")
    total_waiting_time: float = Field(default=0.0, ge=0, description="Sum of waiting times")


class QualityMetrics(BaseModel):
    """Composite quality-of-service indicators."""

    reliability: float = Field(default=0.0, ge=0, le=1, description="SLA compliance (0-1)")
    performance_index: float = Field(
        default=0.0, ge=0, description="Reliability times 100 over mean response time"
    )


class MetricsSummary(BaseModel):
    """
    Aggregate statistics computed from the completion records of a run.

    Keyed dictionaries use urgency values (CRITICAL, HIGH, NORMAL) or tier
    names (edge, cloud).
    """

    total_completed: int = Field(ge=0, description="Number of completion records")
    percentiles: dict[str, float] = Field(
        default_factory=dict, description="P50/P90/P95/P99 response time"
    )
    throughput: float = Field(ge=0, description="Completed tasks per second")
    sla_compliance: float = Field(ge=0, le=1, description="Overall SLA compliance (0-1)")
    sla_by_urgency: dict[str, float] = Field(default_factory=dict)
    sla_by_tier: dict[str, float] = Field(default_factory=dict)
    latency_by_urgency: dict[str, LatencyStats] = Field(default_factory=dict)
    latency_by_tier: dict[str, LatencyStats] = Field(default_factory=dict)
    load_distribution: dict[str, float] = Field(default_factory=dict)
    tier_comparison: TierComparison = Field(default_factory=TierComparison)
    scalability_ratio: float = Field(default=0.0, ge=0)
    throughput_by_tier: dict[str, float] = Field(default_factory=dict)
    tier_distribution_by_urgency: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="Completed tasks per tier for each urgency"
    )
    efficiency_by_urgency: dict[str, float] = Field(
        default_factory=dict, description="Mean execution over mean execution plus waiting"
    )
    time_windows: list[TimeWindow] = Field(
        default_factory=list, description="Non-empty windows of the run, at most five"
    )
    load_quarters: list[LoadQuarter] = Field(
        default_factory=list, description="Quarters of the load by approximate start time"
    )
    resources: ResourceMetrics = Field(default_factory=ResourceMetrics)
    quality: QualityMetrics = Field(default_factory=QualityMetrics)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"MetricsSummary(completed={self.total_completed}, "
            f"sla={self.sla_compliance:.3f}, "
            f"p50={self.percentiles.get('P50', 0.0):.2f}s, "
            f"throughput={self.throughput:.2f}/s)"
        )


class RunResult(BaseModel):
    """
    Final output of a simulation run.

    Contains the completion records, per-queue counters, diagnostics and the
    aggregated metrics.
    """

    scenario: str | None = Field(default=None, description="Scenario name, if any")
    submitted: int = Field(ge=0, description="Tasks offered to the scheduler")
    admitted: int = Field(ge=0, description="Tasks that entered a queue")
    dispatched: int = Field(ge=0, description="Tasks handed to the fabric")
    records: list[CompletionRecord] = Field(default_factory=list)
    queue_statistics: dict[str, QueueStatistics] = Field(default_factory=dict)
    tier_assignments: dict[str, int] = Field(
        default_factory=dict, description="Tasks placed per tier"
    )
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    metrics: MetricsSummary = Field(description="Aggregated statistics")
    execution_time: float | None = Field(default=None, description="Wall-clock run time in seconds")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"RunResult({len(self.records)}/{self.submitted} completed, "
            f"{len(self.diagnostics)} diagnostics) - {self.metrics}"
        )
