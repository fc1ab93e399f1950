"""Metrics aggregator computing run statistics from completion records."""

import math
from collections.abc import Callable, Iterable

from healthsched.config import CLOUD_TIER, EDGE_TIER
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.result import (
    LatencyStats,
    LoadQuarter,
    MetricsSummary,
    QualityMetrics,
    ResourceMetrics,
    TierComparison,
    TimeWindow,
)
from healthsched.data_models.task import Urgency

PERCENTILES = (50, 90, 95, 99)

TIME_WINDOW_SECONDS = 10.0
MAX_TIME_WINDOWS = 5


def percentile(values: Iterable[float], p: float) -> float:
    """
    Nearest-rank percentile.

    Args:
        values: Sample values, in any order
        p: Percentile in (0, 100]

    Returns:
        The ceil(p/100 * n)-th smallest value, or 0.0 for an empty sample
    """
    ordered = sorted(values)
    if not ordered:
        return 0.0
    index = math.ceil((p / 100.0) * len(ordered)) - 1
    index = max(0, min(index, len(ordered) - 1))
    return ordered[index]


def mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def std_dev(values: list[float]) -> float:
    """Population standard deviation (0.0 for fewer than two values)."""
    if len(values) <= 1:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def latency_stats(records: list[CompletionRecord]) -> LatencyStats:
    """Response-time statistics for a group of records."""
    times = sorted(r.response_time for r in records)
    if not times:
        return LatencyStats()
    return LatencyStats(
        count=len(times),
        mean=mean(times),
        median=percentile(times, 50),
        std_dev=std_dev(times),
        min=times[0],
        max=times[-1],
    )


class MetricsAggregator:
    """
    Read-only statistics over a set of completion records.

    Metrics:
    1. Response-time percentiles (nearest rank)
    2. Latency statistics by urgency and by tier
    3. Throughput - completed count over the longest response time
    4. SLA compliance - overall, by urgency, by tier
    5. Edge-versus-cloud comparison
    6. Load trends - time windows, load quarters, scalability ratio
    7. Resource and quality-of-service indicators

    Every method returns 0 or an empty mapping for an empty record set, and
    none depends on the order of the records.
    """

    def __init__(self, records: Iterable[CompletionRecord]):
        """
        Initialize the aggregator.

        Args:
            records: Completion records to analyse (copied)
        """
        self.records = list(records)

    def _group(self, key: Callable[[CompletionRecord], str]) -> dict[str, list[CompletionRecord]]:
        groups: dict[str, list[CompletionRecord]] = {}
        for record in self.records:
            groups.setdefault(key(record), []).append(record)
        return groups

    def _by_urgency(self) -> dict[str, list[CompletionRecord]]:
        return self._group(lambda r: r.urgency.value)

    def _by_tier(self) -> dict[str, list[CompletionRecord]]:
        return self._group(lambda r: r.tier)

    def response_time_percentiles(self) -> dict[str, float]:
        times = [r.response_time for r in self.records]
        return {f"P{p}": percentile(times, p) for p in PERCENTILES}

    def latency_stats_by_urgency(self) -> dict[str, LatencyStats]:
        groups = self._by_urgency()
        return {u.value: latency_stats(groups[u.value]) for u in Urgency if u.value in groups}

    def latency_stats_by_tier(self) -> dict[str, LatencyStats]:
        return {tier: latency_stats(group) for tier, group in sorted(self._by_tier().items())}

    def _max_response_time(self) -> float:
        return max((r.response_time for r in self.records), default=0.0)

    def throughput(self) -> float:
        """Completed tasks per second of the longest observed response time."""
        longest = self._max_response_time()
        if longest <= 0:
            return 0.0
        return len(self.records) / longest

    def throughput_by_tier(self) -> dict[str, float]:
        longest = self._max_response_time()
        if longest <= 0:
            return {}
        return {tier: len(group) / longest for tier, group in sorted(self._by_tier().items())}

    @staticmethod
    def _compliance(records: list[CompletionRecord]) -> float:
        if not records:
            return 0.0
        return sum(1 for r in records if r.sla_compliant) / len(records)

    def sla_compliance_rate(self) -> float:
        return self._compliance(self.records)

    def sla_compliance_by_urgency(self) -> dict[str, float]:
        groups = self._by_urgency()
        return {u.value: self._compliance(groups[u.value]) for u in Urgency if u.value in groups}

    def sla_compliance_by_tier(self) -> dict[str, float]:
        return {tier: self._compliance(group) for tier, group in sorted(self._by_tier().items())}

    def tier_comparison(self) -> TierComparison:
        """
        Compare edge and cloud records.

        The latency ratio is cloud mean over edge mean, with the edge mean
        floored at 0.01s. All fields stay 0 unless both tiers have records.
        """
        groups = self._by_tier()
        edge = groups.get(EDGE_TIER, [])
        cloud = groups.get(CLOUD_TIER, [])
        if not edge or not cloud:
            return TierComparison()

        edge_latency = mean([r.response_time for r in edge])
        cloud_latency = mean([r.response_time for r in cloud])
        return TierComparison(
            edge_mean_latency=edge_latency,
            cloud_mean_latency=cloud_latency,
            latency_ratio=max(cloud_latency, 0.0) / max(edge_latency, 0.01),
            edge_sla_rate=self._compliance(edge),
            cloud_sla_rate=self._compliance(cloud),
            edge_mean_execution=mean([r.execution_time for r in edge]),
            cloud_mean_execution=mean([r.execution_time for r in cloud]),
        )

    def load_distribution(self) -> dict[str, float]:
        """Share of completed tasks per tier."""
        if not self.records:
            return {}
        total = len(self.records)
        return {tier: len(group) / total for tier, group in sorted(self._by_tier().items())}

    def tier_distribution_by_urgency(self) -> dict[str, dict[str, int]]:
        """Completed task counts per tier, for each urgency."""
        groups = self._by_urgency()
        distribution: dict[str, dict[str, int]] = {}
        for urgency in Urgency:
            counts: dict[str, int] = {}
            for record in groups.get(urgency.value, []):
                counts[record.tier] = counts.get(record.tier, 0) + 1
            if counts:
                distribution[urgency.value] = dict(sorted(counts.items()))
        return distribution

    def efficiency_by_urgency(self) -> dict[str, float]:
        """Mean execution time over mean execution plus waiting time."""
        groups = self._by_urgency()
        efficiency = {}
        for urgency in Urgency:
            group = groups.get(urgency.value)
            if not group:
                continue
            execution = mean([r.execution_time for r in group])
            waiting = mean([r.waiting_time for r in group])
            efficiency[urgency.value] = execution / max(execution + waiting, 0.01)
        return efficiency

    def _by_start_time(self) -> list[CompletionRecord]:
        # Approximate start: response time minus execution time
        return sorted(self.records, key=lambda r: (r.response_time - r.execution_time, r.task_id))

    def time_windows(self) -> list[TimeWindow]:
        """
        Throughput and mean latency per time window of the run.

        The run, as long as the longest response time, is cut into one window
        per started 10 seconds, at most five, of equal size. A record belongs
        to the window holding its approximate start time (response minus
        execution time). Windows without records are left out.

        Returns:
            Non-empty windows in time order
        """
        longest = self._max_response_time()
        if longest <= 0:
            return []

        count = min(MAX_TIME_WINDOWS, int(longest / TIME_WINDOW_SECONDS) + 1)
        size = longest / count
        windows = []
        for i in range(count):
            start, end = i * size, (i + 1) * size
            group = [
                r for r in self.records if start <= r.response_time - r.execution_time < end
            ]
            if not group:
                continue
            windows.append(
                TimeWindow(
                    index=i + 1,
                    start=start,
                    end=end,
                    count=len(group),
                    throughput=len(group) / size,
                    mean_latency=mean([r.response_time for r in group]),
                )
            )
        return windows

    def load_quarters(self) -> list[LoadQuarter]:
        """
        Split the records into four quarters by approximate start time.

        The last quarter also takes the remainder. Needs at least four
        records, otherwise empty.
        """
        ordered = self._by_start_time()
        quarter = len(ordered) // 4
        if quarter == 0:
            return []

        quarters = []
        for i in range(4):
            group = ordered[i * quarter:] if i == 3 else ordered[i * quarter:(i + 1) * quarter]
            quarters.append(
                LoadQuarter(
                    index=i + 1,
                    count=len(group),
                    mean_latency=mean([r.response_time for r in group]),
                    mean_waiting=mean([r.waiting_time for r in group]),
                    sla_compliance=self._compliance(group),
                )
            )
        return quarters

    def scalability_ratio(self) -> float:
        """
        Last-quartile over first-quartile mean latency.

        Records are ordered by approximate start time (response minus
        execution time). Needs at least four records, otherwise 0.0.
        """
        ordered = self._by_start_time()
        quarter = len(ordered) // 4
        if quarter == 0:
            return 0.0
        first = mean([r.response_time for r in ordered[:quarter]])
        last = mean([r.response_time for r in ordered[3 * quarter:]])
        return max(last, 0.0) / max(first, 0.01)

    def resource_metrics(self) -> ResourceMetrics:
        """System efficiency and resource utilization over all records."""
        if not self.records:
            return ResourceMetrics()

        execution = sum(r.execution_time for r in self.records)
        waiting = sum(r.waiting_time for r in self.records)
        response = sum(r.response_time for r in self.records)
        busy = execution + waiting
        return ResourceMetrics(
            system_efficiency=execution / max(response, 0.01),
            avg_resource_utilization=execution / busy if busy > 0 else 0.0,
            total_execution_time=execution,
            total_waiting_time=waiting,
        )

    def quality_metrics(self) -> QualityMetrics:
        """
        Reliability and performance index.

        Reliability is the SLA compliance rate. The performance index is
        reliability * 100 over the mean response time, floored at 0.01s.
        """
        if not self.records:
            return QualityMetrics()

        reliability = self.sla_compliance_rate()
        latency = mean([r.response_time for r in self.records])
        return QualityMetrics(
            reliability=reliability,
            performance_index=reliability * 100 / max(latency, 0.01),
        )

    def summarize(self) -> MetricsSummary:
        """
        Compute every metric at once.

        Returns:
            MetricsSummary for the record set
        """
        return MetricsSummary(
            total_completed=len(self.records),
            percentiles=self.response_time_percentiles(),
            throughput=self.throughput(),
            sla_compliance=self.sla_compliance_rate(),
            sla_by_urgency=self.sla_compliance_by_urgency(),
            sla_by_tier=self.sla_compliance_by_tier(),
            latency_by_urgency=self.latency_stats_by_urgency(),
            latency_by_tier=self.latency_stats_by_tier(),
            load_distribution=self.load_distribution(),
            tier_comparison=self.tier_comparison(),
            scalability_ratio=self.scalability_ratio(),
            throughput_by_tier=self.throughput_by_tier(),
            tier_distribution_by_urgency=self.tier_distribution_by_urgency(),
            efficiency_by_urgency=self.efficiency_by_urgency(),
            time_windows=self.time_windows(),
            load_quarters=self.load_quarters(),
            resources=self.resource_metrics(),
            quality=self.quality_metrics(),
        )
